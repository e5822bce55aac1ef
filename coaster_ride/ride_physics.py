r"""Per-frame speed integration along the track.

While the chain lift is engaged the train climbs at a constant rate.  After
the crest the speed follows from conservation of energy,
:math:`v = \sqrt{2 g \Delta h}`, where :math:`\Delta h` is the height lost
since the highest point reached.  A speed floor keeps the train moving over
crests and flat sections.  The resulting speed is converted into a change of
normalised progress using the curve's arc length.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

try:  # pragma: no cover - import shim
    from .ride_config import RideConfig
    from .track_curve import TrackCurve
except ImportError:  # pragma: no cover - direct execution support
    from ride_config import RideConfig
    from track_curve import TrackCurve


@dataclass
class StepResult:
    """Outcome of a single integration step."""

    progress: float
    max_height: float
    speed: float
    lapped: bool = False
    finished: bool = False


def energy_speed(max_height: float, current_height: float, g: float = 9.8) -> float:
    """Return the speed gained by falling from ``max_height`` to ``current_height``.

    Height gains are treated as zero drop so the result is never negative.
    """
    height_drop = max(0.0, max_height - current_height)
    return math.sqrt(2.0 * g * height_drop)


def ride_speed(
    progress: float,
    current_height: float,
    max_height: float,
    first_peak: float,
    speed_scale: float,
    has_chain_lift: bool,
    config: RideConfig | None = None,
) -> tuple[float, float]:
    """Return the instantaneous speed and the updated maximum height."""
    if config is None:
        config = RideConfig()

    max_height = max(max_height, current_height)
    if has_chain_lift and progress < first_peak:
        return config.chain_lift_speed * speed_scale, max_height

    v = energy_speed(max_height, current_height, config.gravity)
    return max(config.min_speed, v) * speed_scale, max_height


def advance_progress(
    curve: TrackCurve,
    progress: float,
    delta_time: float,
    max_height: float,
    first_peak: float,
    speed_scale: float,
    looped: bool,
    has_chain_lift: bool,
    config: RideConfig | None = None,
) -> StepResult:
    """Advance ``progress`` by one frame of ``delta_time`` seconds.

    Parameters
    ----------
    curve:
        Track curve being ridden.
    progress:
        Current normalised progress.
    delta_time:
        Frame time in seconds.  Values above ``config.max_delta_time`` are
        clamped.
    max_height:
        Highest point reached so far in this traversal.
    first_peak:
        Progress at which the chain lift releases.
    speed_scale:
        Designer speed multiplier.
    looped, has_chain_lift:
        Track topology flags.

    Returns
    -------
    StepResult
        New progress and height reference.  ``finished`` is set when an open
        track reaches its end, in which case ``progress`` is left unchanged.
    """
    if config is None:
        config = RideConfig()
    if delta_time < 0:
        raise ValueError("delta_time must be non-negative")
    if config.max_delta_time is not None:
        delta_time = min(delta_time, config.max_delta_time)

    current_height = float(curve.point_at(progress)[1])
    speed, max_height = ride_speed(
        progress,
        current_height,
        max_height,
        first_peak,
        speed_scale,
        has_chain_lift,
        config,
    )

    new_progress = progress + speed * delta_time / curve.arc_length()
    if new_progress < 1.0:
        return StepResult(new_progress, max_height, speed)

    if not looped:
        return StepResult(progress, max_height, speed, finished=True)

    new_progress %= 1.0
    if has_chain_lift or config.reset_height_each_lap:
        max_height = float(curve.point_at(0.0)[1])
    return StepResult(new_progress, max_height, speed, lapped=True)
