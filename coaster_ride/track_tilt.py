from __future__ import annotations

"""Track control points and banking lookup.

Designers describe a coaster as an ordered list of :class:`TrackPoint`
instances.  Each point carries a position and a banking angle ``tilt_deg``
which rolls the rider around the direction of travel.  Between control
points the banking is interpolated linearly over the same chord-length
parameter as :class:`track_curve.TrackCurve`, so a point's banking applies
exactly where the curve passes through it.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

try:  # pragma: no cover - import shim
    from .track_curve import chord_knots
except ImportError:  # pragma: no cover - direct execution support
    from track_curve import chord_knots


@dataclass
class TrackPoint:
    """A single control point of the coaster track.

    ``y`` is the height above ground.  ``tilt_deg`` is the banking angle in
    degrees, positive values roll the rider's up vector clockwise when viewed
    along the direction of travel.
    """

    x: float
    y: float
    z: float
    tilt_deg: float = 0.0


def positions(points: Sequence[TrackPoint]) -> np.ndarray:
    """Return the ``(n, 3)`` array of control point coordinates."""
    if not points:
        return np.empty((0, 3), dtype=float)
    return np.array([[p.x, p.y, p.z] for p in points], dtype=float)


def tilt_at(points: Sequence[TrackPoint], t: float, closed: bool) -> float:
    """Return the banking angle in degrees at progress ``t``.

    Parameters
    ----------
    points:
        Ordered track control points.
    t:
        Normalised progress along the track.
    closed:
        Whether the last point connects back to the first.  For closed tracks
        the final segment interpolates from the last tilt back to the first.

    Notes
    -----
    Points dropped by the curve (consecutive duplicates and a closing point
    that repeats the start) contribute no banking of their own.
    """
    n = len(points)
    if n == 0:
        return 0.0
    if n == 1:
        return float(points[0].tilt_deg)

    try:
        index, knots = chord_knots(positions(points), closed)
    except ValueError:
        return float(points[0].tilt_deg)

    values = np.array([points[i].tilt_deg for i in index], dtype=float)
    if closed:
        values = np.r_[values, values[0]]
        t = float(t) % 1.0
    else:
        t = float(np.clip(t, 0.0, 1.0))
    return float(np.interp(t, knots, values))
