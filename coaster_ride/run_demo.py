from __future__ import annotations

"""Command line demo for the coaster ride simulation.

Running ``python -m coaster_ride.run_demo`` loads a track and a ride
parameter file, simulates the ride at a fixed frame rate and writes the
results to a time-stamped directory under ``outputs``.

Two files are produced for each run:

``ride.csv``
    One row per frame with progress, speed, energy reference height and the
    smoothed camera position and look-at target.
``summary.json``
    Ride time, first-peak progress, top speed and frame count.
"""

from pathlib import Path
from datetime import datetime
import argparse
import json
import logging
import time

import numpy as np

from .io_utils import read_track_points_csv, read_ride_params_csv, write_csv
from .ride_config import RideConfig
from .ride_state import RideState
from .simulate import simulate_ride
from .track_curve import build_track_curve
from .track_tilt import positions


def run(
    track_file: str,
    params_file: str | None = None,
    fps: float = 60.0,
    speed_scale: float | None = None,
    looped: bool | None = None,
    chain_lift: bool | None = None,
    laps: int = 1,
    max_time: float = 600.0,
    plot: bool = False,
    output_root: str | Path = "outputs",
) -> tuple[float, Path]:
    """Simulate a ride and return the ride time and output directory.

    Parameters
    ----------
    track_file:
        CSV file of track control points.
    params_file:
        Optional ``key,value`` file with :class:`ride_config.RideConfig` fields and
        the ride flags ``speed_scale``, ``looped`` and ``chain_lift``.
    speed_scale, looped, chain_lift:
        Values provided via the CLI override those from the parameter file.
        If ``looped`` is unresolved it is inferred from whether the first and
        last points coincide.
    laps:
        Laps ridden on a looped track.
    plot:
        Also save elevation, speed and camera path figures.
    """
    start_time = time.perf_counter()

    points = read_track_points_csv(track_file)
    params = read_ride_params_csv(params_file) if params_file is not None else {}
    config = RideConfig.from_params(params)

    # A ``none`` entry leaves a ride flag at its default.
    if speed_scale is None and params.get("speed_scale") is not None:
        speed_scale = float(params["speed_scale"])
    if speed_scale is None:
        speed_scale = 1.0
    if chain_lift is None and params.get("chain_lift") is not None:
        chain_lift = bool(params["chain_lift"])
    if chain_lift is None:
        chain_lift = True
    if looped is None and params.get("looped") is not None:
        looped = bool(params["looped"])
    if looped is None:
        xyz = positions(points)
        looped = bool(len(xyz) > 2 and np.allclose(xyz[0], xyz[-1], atol=1e-6))

    state = RideState(
        speed_scale=speed_scale, is_looped=looped, has_chain_lift=chain_lift
    )
    ride = simulate_ride(points, state, config, fps=fps, max_time=max_time, laps=laps)
    if ride.empty:
        raise ValueError("track needs at least two distinct points")

    peak = float(ride.attrs["first_peak_progress"])
    ride_time = float(ride["time_s"].iloc[-1])

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_dir = Path(output_root) / timestamp
    out_dir.mkdir(parents=True, exist_ok=True)

    write_csv(ride, out_dir / "ride.csv")
    with (out_dir / "summary.json").open("w") as f:
        json.dump(
            {
                "ride_time_s": ride_time,
                "first_peak_progress": peak,
                "max_speed_mps": float(ride["speed_mps"].max()),
                "frames": int(len(ride)),
            },
            f,
        )

    if plot:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from .plots import plot_camera_path, plot_elevation_profile, plot_ride_speed

        curve = build_track_curve(positions(points), looped)
        t = np.linspace(0.0, 1.0, 501)
        heights = [curve.point_at(ti)[1] for ti in t]
        figures = {
            "elevation.png": plot_elevation_profile(t, heights, first_peak=peak),
            "speed.png": plot_ride_speed(ride["time_s"], ride["speed_mps"]),
            "camera_path.png": plot_camera_path(ride),
        }
        for name, ax in figures.items():
            ax.figure.savefig(out_dir / name)
            plt.close(ax.figure)

    total_runtime = time.perf_counter() - start_time
    print(
        f"Frames: {len(ride)}, "
        f"First peak: {peak:.3f}, "
        f"Total runtime: {total_runtime:.3f} s"
    )

    return ride_time, out_dir


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run coaster ride camera demo")
    parser.add_argument("--track", default="data/coaster_track.csv", help="Track points CSV")
    parser.add_argument("--params", default="data/ride_params.csv", help="Ride parameter CSV")
    parser.add_argument("--fps", type=float, default=60.0, help="Simulated frame rate")
    parser.add_argument(
        "--speed-scale", type=float, default=None, help="Ride speed multiplier"
    )
    parser.add_argument("--laps", type=int, default=1, help="Laps on a looped track")
    parser.add_argument(
        "--max-time", type=float, default=600.0, help="Maximum simulated time in seconds"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--open",
        dest="looped",
        action="store_const",
        const=False,
        help="Force track to be treated as open",
    )
    group.add_argument(
        "--looped",
        dest="looped",
        action="store_const",
        const=True,
        help="Force track to be treated as a loop",
    )
    parser.set_defaults(looped=None)
    lift = parser.add_mutually_exclusive_group()
    lift.add_argument("--chain-lift", dest="chain_lift", action="store_const", const=True)
    lift.add_argument("--no-chain-lift", dest="chain_lift", action="store_const", const=False)
    parser.set_defaults(chain_lift=None)
    parser.add_argument("--plot", action="store_true", help="Save figures")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    ride_time, out_dir = run(
        args.track,
        args.params,
        fps=args.fps,
        speed_scale=args.speed_scale,
        looped=args.looped,
        chain_lift=args.chain_lift,
        laps=args.laps,
        max_time=args.max_time,
        plot=args.plot,
    )
    print(f"Ride time: {ride_time:.2f} s")
    print(f"Outputs written to {out_dir}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
