from __future__ import annotations

"""Tunable constants for the ride simulation.

All values default to the standard ride tuning.  A
:class:`RideConfig` may also be built from a ``key,value`` parameter file via
:meth:`RideConfig.from_params`.
"""

from dataclasses import dataclass, fields
from typing import Mapping


@dataclass
class RideConfig:
    """Physics, camera and peak-detection parameters.

    Parameters
    ----------
    gravity:
        Gravitational acceleration used for the energy speed in ``m/s^2``.
    chain_lift_speed:
        Constant climb speed before scaling by the ride speed.
    min_speed:
        Speed floor in the gravity phase before scaling.
    camera_height:
        Offset of the camera along the banked up vector.
    look_at_height_ratio:
        Fraction of ``camera_height`` applied to the look-at point.
    look_ahead, look_ahead_limit:
        Progress offset of the look-at point and its cap on open tracks.
    smoothing_factor:
        Fixed per-frame blend towards the new camera pose.
    smoothing_rate:
        If set, replaces ``smoothing_factor`` with the frame-rate independent
        blend ``1 - exp(-smoothing_rate * dt)``.
    max_delta_time:
        Upper bound applied to frame time before integration.  ``None``
        disables the clamp.
    reset_height_each_lap:
        Reset the energy reference height on every lap, not only when the
        track has a chain lift.
    peak_scan_step, peak_scan_end, climb_threshold, fallback_peak:
        Parameters of the first-peak scan.
    """

    gravity: float = 9.8
    chain_lift_speed: float = 0.9
    min_speed: float = 1.0
    camera_height: float = 1.5
    look_at_height_ratio: float = 0.8
    look_ahead: float = 0.03
    look_ahead_limit: float = 0.999
    smoothing_factor: float = 0.25
    smoothing_rate: float | None = None
    max_delta_time: float | None = 0.1
    reset_height_each_lap: bool = False
    peak_scan_step: float = 0.01
    peak_scan_end: float = 0.5
    climb_threshold: float = 0.1
    fallback_peak: float = 0.2

    def __post_init__(self) -> None:
        if self.gravity <= 0:
            raise ValueError("gravity must be positive")
        if self.chain_lift_speed <= 0 or self.min_speed <= 0:
            raise ValueError("chain_lift_speed and min_speed must be positive")
        if not 0.0 < self.smoothing_factor <= 1.0:
            raise ValueError("smoothing_factor must be in (0, 1]")
        if self.smoothing_rate is not None and self.smoothing_rate <= 0:
            raise ValueError("smoothing_rate must be positive")
        if self.max_delta_time is not None and self.max_delta_time <= 0:
            raise ValueError("max_delta_time must be positive")
        if not 0.0 <= self.look_ahead < 1.0:
            raise ValueError("look_ahead must be in [0, 1)")
        if not 0.0 < self.look_ahead_limit <= 1.0:
            raise ValueError("look_ahead_limit must be in (0, 1]")
        if self.peak_scan_step <= 0 or self.peak_scan_end <= 0:
            raise ValueError("peak scan step and end must be positive")

    @classmethod
    def from_params(cls, params: Mapping[str, float | bool | None]) -> "RideConfig":
        """Create a config from ``params`` ignoring keys that are not fields.

        ``None`` is accepted only for ``smoothing_rate`` and ``max_delta_time``.
        """
        names = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in params.items() if k in names}
        for key, value in kwargs.items():
            if value is None and key not in ("smoothing_rate", "max_delta_time"):
                raise ValueError(f"{key} cannot be none")
        if "reset_height_each_lap" in kwargs:
            kwargs["reset_height_each_lap"] = bool(kwargs["reset_height_each_lap"])
        return cls(**kwargs)
