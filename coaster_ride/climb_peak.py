from __future__ import annotations

"""Locate the top of the first climb.

The chain lift pulls the train up the first hill and releases it at the
crest.  The crest is found once per track by scanning the first half of the
curve for the highest point reached after the track starts climbing.
"""

import logging
import math

try:  # pragma: no cover - import shim
    from .track_curve import TrackCurve
except ImportError:  # pragma: no cover - direct execution support
    from track_curve import TrackCurve

logger = logging.getLogger(__name__)

FALLBACK_PEAK = 0.2


def find_first_peak(
    curve: TrackCurve,
    step: float = 0.01,
    end: float = 0.5,
    climb_threshold: float = 0.1,
    fallback: float = FALLBACK_PEAK,
) -> float:
    """Return the progress of the first crest on ``curve``.

    Parameters
    ----------
    curve:
        Track curve to scan.
    step:
        Progress increment between samples.
    end:
        Last progress value sampled (inclusive).
    climb_threshold:
        Vertical tangent component above which the track counts as climbing
        and below whose negative it counts as descending.
    fallback:
        Value returned when no climb is found.

    Returns
    -------
    float
        Progress of the highest sample seen after climbing starts and before
        the first descent that follows it, or ``fallback``.
    """
    # Tolerance keeps exact multiples such as 0.5 / 0.01 inside the scan.
    n_samples = int(math.floor(end / step + 1e-9))
    max_height = float("-inf")
    peak_t = 0.0
    found_climb = False

    for i in range(n_samples + 1):
        t = i * step
        height = curve.point_at(t)[1]
        slope = curve.tangent_at(t)[1]

        if slope > climb_threshold:
            found_climb = True
        if not found_climb:
            continue

        if height > max_height:
            max_height = height
            peak_t = t
        if slope < -climb_threshold and t > peak_t:
            break

    return peak_t if peak_t > 0 else fallback


def first_peak_progress(curve: TrackCurve | None, **kwargs: float) -> float:
    """Return the first crest progress, or ``0.0`` when there is no curve."""
    if curve is None:
        return 0.0
    peak = find_first_peak(curve, **kwargs)
    logger.info("First peak at progress %.3f", peak)
    return peak
