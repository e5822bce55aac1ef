"""Offline ride simulation.

:func:`simulate_ride` drives a :class:`ride_engine.RideEngine` at a fixed
frame rate, as a renderer would, and records one row per frame.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

try:  # pragma: no cover - import shim
    from .ride_config import RideConfig
    from .ride_engine import RideEngine
    from .ride_state import RideState
    from .track_tilt import TrackPoint
except ImportError:  # pragma: no cover - direct execution support
    from ride_config import RideConfig
    from ride_engine import RideEngine
    from ride_state import RideState
    from track_tilt import TrackPoint

logger = logging.getLogger(__name__)

COLUMNS = [
    "time_s",
    "progress",
    "speed_mps",
    "max_height_m",
    "cam_x",
    "cam_y",
    "cam_z",
    "look_x",
    "look_y",
    "look_z",
]


def simulate_ride(
    points: Sequence[TrackPoint],
    state: RideState,
    config: RideConfig | None = None,
    fps: float = 60.0,
    max_time: float = 600.0,
    laps: int = 1,
) -> pd.DataFrame:
    """Simulate a ride and return the per-frame log.

    Parameters
    ----------
    points:
        Track control points.
    state:
        Ride flags and speed scale.  ``state`` is started by this function
        and stopped when the simulation ends.
    config:
        Physics and camera constants.
    fps:
        Simulated frame rate.
    max_time:
        Time after which the simulation stops even if the ride has not.
    laps:
        Number of laps to ride on a looped track.

    Returns
    -------
    pandas.DataFrame
        One row per rendered frame with the columns listed in ``COLUMNS``.
        Empty when the track cannot be ridden.
    """
    if fps <= 0:
        raise ValueError("fps must be positive")
    if laps < 1:
        raise ValueError("laps must be >= 1")

    engine = RideEngine(state, config)
    engine.set_track(points)
    engine.start_ride()

    dt = 1.0 / fps
    n_frames = int(np.ceil(max_time * fps))
    rows: list[list[float]] = []
    for frame in range(1, n_frames + 1):
        pose = engine.update(dt)
        if pose is None:
            break
        rows.append(
            [
                frame * dt,
                state.progress,
                engine.last_speed,
                engine.max_height,
                *pose.position,
                *pose.look_at,
            ]
        )
        if state.is_looped and engine.laps >= laps:
            break

    if state.is_riding:
        state.stop_ride()
    logger.info("Simulated %d frames", len(rows))
    ride = pd.DataFrame(rows, columns=COLUMNS)
    ride.attrs["first_peak_progress"] = engine.first_peak_progress
    return ride
