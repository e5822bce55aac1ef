import sys
from pathlib import Path
import json
import re

import numpy as np
import pandas as pd
import pytest

# Ensure the package directory's parent is on the path when pytest runs directly
sys.path.append(str(Path(__file__).resolve().parents[1]))

from coaster_ride.run_demo import main, run


BASE_PATH = Path(__file__).resolve().parents[1]
TRACK = str(BASE_PATH / "data" / "coaster_track.csv")
PARAMS = str(BASE_PATH / "data" / "ride_params.csv")


def test_looped_ride_outputs(tmp_path, capfd) -> None:
    ride_time, out_dir = run(TRACK, PARAMS, fps=30.0, output_root=tmp_path)

    out = capfd.readouterr().out
    assert re.search(r"Frames: \d+", out)
    assert re.search(r"First peak: [0-9.]+", out)
    assert re.search(r"Total runtime: [0-9.]+ s", out)

    with (out_dir / "summary.json").open() as f:
        summary = json.load(f)
    assert summary["ride_time_s"] > 0
    assert np.isclose(summary["ride_time_s"], ride_time)
    assert 0.0 < summary["first_peak_progress"] <= 0.5
    assert summary["max_speed_mps"] > 10.0

    ride = pd.read_csv(out_dir / "ride.csv")
    assert len(ride) == summary["frames"]
    assert int(np.sum(np.diff(ride["progress"]) < 0)) == 1


def test_open_ride_without_params(tmp_path) -> None:
    ride_time, out_dir = run(
        TRACK, None, fps=20.0, looped=False, chain_lift=False, speed_scale=3.0,
        output_root=tmp_path,
    )
    ride = pd.read_csv(out_dir / "ride.csv")
    assert np.all(np.diff(ride["progress"]) > 0)
    assert ride["progress"].iloc[-1] < 1.0
    assert ride_time > 0


def test_run_writes_plots(tmp_path) -> None:
    _, out_dir = run(TRACK, PARAMS, fps=10.0, speed_scale=5.0, plot=True, output_root=tmp_path)
    for name in ("elevation.png", "speed.png", "camera_path.png"):
        assert (out_dir / name).exists()


def test_run_raises_on_degenerate_track(tmp_path) -> None:
    track = tmp_path / "track.csv"
    track.write_text("x_m,y_m,z_m\n0,0,0\n")
    with pytest.raises(ValueError, match="two distinct points"):
        run(str(track), None, output_root=tmp_path)


def test_main_cli(tmp_path, capfd, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    main(["--track", TRACK, "--params", PARAMS, "--fps", "10", "--speed-scale", "4"])
    out = capfd.readouterr().out
    assert re.search(r"Ride time: [0-9.]+ s", out)
    assert "Outputs written to" in out
    assert (tmp_path / "outputs").is_dir()
