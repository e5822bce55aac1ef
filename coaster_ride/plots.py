from __future__ import annotations

"""Plotting helpers for ride simulation results.

This module contains simple functions for visualising the track elevation,
the simulated speed and the camera path.  Plots are produced using
:mod:`matplotlib` and return the :class:`~matplotlib.axes.Axes` instance for
further customisation.
"""

from typing import Iterable, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def plot_elevation_profile(
    progress: Iterable[float],
    height: Iterable[float],
    first_peak: float | None = None,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot track height against progress.

    Parameters
    ----------
    progress, height:
        Samples of normalised progress and the corresponding track height.
    first_peak:
        Optional progress of the chain-lift crest, drawn as a vertical line.
    ax:
        Existing axes to draw on.  If ``None`` a new figure and axes are
        created.
    """
    if ax is None:
        _, ax = plt.subplots()

    ax.plot(progress, height, color="k", label="Track")
    if first_peak is not None:
        ax.axvline(first_peak, color="tab:red", linestyle="--", label="Lift crest")

    ax.set_xlabel("Progress [-]")
    ax.set_ylabel("Height [m]")
    ax.legend()
    return ax


def plot_ride_speed(
    time: Iterable[float],
    speed: Iterable[float],
    label: str | None = None,
    ax: Optional[plt.Axes] = None,
) -> plt.Axes:
    """Plot ride speed as a function of time."""
    if ax is None:
        _, ax = plt.subplots()

    ax.plot(time, speed, color="tab:blue", label=label)
    ax.set_xlabel("Time [s]")
    ax.set_ylabel("Speed [m/s]")
    if label is not None:
        ax.legend()
    return ax


def plot_camera_path(ride: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Plot the camera and look-at paths in the ``x``/``z`` plane.

    ``ride`` is the frame log returned by :func:`simulate.simulate_ride`.
    """
    required = {"cam_x", "cam_z", "look_x", "look_z"}
    missing = required.difference(ride.columns)
    if missing:
        raise ValueError(f"ride log missing columns: {', '.join(sorted(missing))}")

    if ax is None:
        _, ax = plt.subplots()

    cam_x = np.asarray(ride["cam_x"], dtype=float)
    cam_z = np.asarray(ride["cam_z"], dtype=float)
    ax.plot(cam_x, cam_z, color="tab:blue", label="Camera")
    ax.plot(ride["look_x"], ride["look_z"], color="tab:orange", linestyle="--", label="Look-at")
    if cam_x.size:
        ax.plot(cam_x[0], cam_z[0], "ko", label="Start")

    ax.set_aspect("equal", adjustable="box")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("z [m]")
    ax.legend()
    return ax
