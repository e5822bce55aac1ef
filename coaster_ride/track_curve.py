from __future__ import annotations

"""Parametric 3D track curve.

The coaster track is represented by a cubic spline through the designer's
control points.  The spline is parameterised by normalised cumulative chord
length so that ``t = 0`` is the first control point and ``t = 1`` the last
(or, for closed tracks, the first point again after a full lap).
"""

from typing import Iterable

import numpy as np
from scipy.interpolate import CubicSpline


def chord_knots(points: Iterable[Iterable[float]], closed: bool) -> tuple[np.ndarray, np.ndarray]:
    """Return the control points used by the curve and their parameters.

    Consecutive duplicates are dropped, as is a closing point that repeats the
    first one on a closed track.

    Returns
    -------
    index:
        Row indices into ``points`` of the control points that are kept.
    knots:
        Normalised cumulative chord length of each kept point.  For closed
        tracks one extra knot of ``1.0`` marks the return to the first point.

    Raises
    ------
    ValueError
        If ``points`` does not have shape ``(n, 3)`` or fewer than two
        distinct points remain.
    """
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError("points must have shape (n, 3)")

    index = np.arange(len(pts))
    # Consecutive duplicates would give repeated knots.
    if len(pts) > 1:
        keep = np.r_[True, np.any(np.diff(pts, axis=0) != 0.0, axis=1)]
        index = index[keep]
    if closed and len(index) > 1 and np.array_equal(pts[index[0]], pts[index[-1]]):
        index = index[:-1]
    if len(index) < 2:
        raise ValueError("at least two distinct points are required")

    kept = pts[index]
    if closed:
        kept = np.vstack((kept, kept[:1]))
    chords = np.linalg.norm(np.diff(kept, axis=0), axis=1)
    knots = np.concatenate(([0.0], np.cumsum(chords)))
    return index, knots / knots[-1]


class TrackCurve:
    """Continuous curve through an ordered sequence of 3D points.

    Parameters
    ----------
    points:
        Array-like of shape ``(n, 3)`` with the control point coordinates.
        Consecutive duplicates are ignored.
    closed:
        If ``True`` the curve returns to the first point and is fitted with
        periodic boundary conditions so the joint is smooth.
    divisions:
        Number of chords used to approximate the arc length.
    """

    def __init__(
        self,
        points: Iterable[Iterable[float]],
        closed: bool = False,
        divisions: int = 200,
    ) -> None:
        if divisions < 1:
            raise ValueError("divisions must be >= 1")
        pts = np.asarray(points, dtype=float)
        index, knots = chord_knots(pts, closed)
        pts = pts[index]
        if closed:
            pts = np.vstack((pts, pts[:1]))

        self.closed = closed
        self.control_points = pts
        self.knots = knots
        self._spline = CubicSpline(
            knots, pts, axis=0, bc_type="periodic" if closed else "natural"
        )
        self._divisions = divisions
        self._length: float | None = None

    def _wrap(self, t: float) -> float:
        if self.closed:
            return float(t) % 1.0
        return float(np.clip(t, 0.0, 1.0))

    def point_at(self, t: float) -> np.ndarray:
        """Return the position at parameter ``t``."""
        return np.asarray(self._spline(self._wrap(t)), dtype=float)

    def tangent_at(self, t: float) -> np.ndarray:
        """Return the unit direction of travel at parameter ``t``."""
        d = np.asarray(self._spline(self._wrap(t), 1), dtype=float)
        norm = np.linalg.norm(d)
        if norm < 1e-12:
            return np.array([1.0, 0.0, 0.0])
        return d / norm

    def arc_length(self) -> float:
        """Return the total length of the curve."""
        if self._length is None:
            t = np.linspace(0.0, 1.0, self._divisions + 1)
            samples = self._spline(t)
            self._length = float(np.sum(np.linalg.norm(np.diff(samples, axis=0), axis=1)))
        return self._length


def build_track_curve(points: Iterable[Iterable[float]], closed: bool) -> TrackCurve | None:
    """Return a :class:`TrackCurve` or ``None`` when there is nothing to ride.

    Fewer than two points, or points that collapse to a single location, are a
    valid empty track rather than an error.
    """
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or len(pts) < 2:
        return None
    if len(np.unique(pts, axis=0)) < 2:
        return None
    return TrackCurve(pts, closed=closed)
