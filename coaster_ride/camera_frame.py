"""Rider camera orientation.

The camera frame is rebuilt every frame from the track tangent and the world
up axis rather than transported along the curve, so long rides accumulate no
roll drift.  Banking is applied by rotating the frame's up vector about the
tangent.  The resulting pose is blended with the previous frame's pose to
hide high-frequency jitter.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np
from scipy.spatial.transform import Rotation

try:  # pragma: no cover - import shim
    from .ride_config import RideConfig
    from .track_curve import TrackCurve
except ImportError:  # pragma: no cover - direct execution support
    from ride_config import RideConfig
    from track_curve import TrackCurve

WORLD_UP = np.array([0.0, 1.0, 0.0])
FALLBACK_RIGHT = np.array([1.0, 0.0, 0.0])


@dataclass
class CameraPose:
    """Camera position, look-at target and up direction in world space."""

    position: np.ndarray
    look_at: np.ndarray
    up: np.ndarray


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v
    return v / norm


def orientation_basis(tangent: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Return the ``right`` and unbanked ``up`` vectors for ``tangent``.

    When the tangent is nearly vertical the cross product with world up
    vanishes and ``right`` falls back to the world ``x`` axis.
    """
    tangent = _normalize(np.asarray(tangent, dtype=float))
    right = np.cross(tangent, WORLD_UP)
    if np.dot(right, right) < 1e-3:
        right = FALLBACK_RIGHT.copy()
    right = _normalize(right)
    base_up = _normalize(np.cross(right, tangent))
    return right, base_up


def banked_up(tangent: np.ndarray, base_up: np.ndarray, tilt_deg: float) -> np.ndarray:
    """Rotate ``base_up`` about ``tangent`` by ``tilt_deg`` degrees."""
    axis = _normalize(np.asarray(tangent, dtype=float))
    rotation = Rotation.from_rotvec(axis * math.radians(tilt_deg))
    return rotation.apply(base_up)


def look_ahead_progress(
    progress: float,
    closed: bool,
    look_ahead: float = 0.03,
    limit: float = 0.999,
) -> float:
    """Return the progress sampled for the look-at point."""
    if closed:
        return (progress + look_ahead) % 1.0
    return min(progress + look_ahead, limit)


def camera_targets(
    curve: TrackCurve,
    progress: float,
    tilt_deg: float,
    closed: bool,
    config: RideConfig | None = None,
) -> CameraPose:
    """Return the unsmoothed camera pose at ``progress``."""
    if config is None:
        config = RideConfig()

    position = curve.point_at(progress)
    tangent = _normalize(curve.tangent_at(progress))
    _, base_up = orientation_basis(tangent)
    up = banked_up(tangent, base_up, tilt_deg)

    target_position = position + up * config.camera_height

    look_t = look_ahead_progress(
        progress, closed, config.look_ahead, config.look_ahead_limit
    )
    target_look_at = curve.point_at(look_t) + up * (
        config.camera_height * config.look_at_height_ratio
    )
    return CameraPose(target_position, target_look_at, up)


class CameraSmoother:
    """Exponential smoothing of the camera pose between frames.

    Parameters
    ----------
    factor:
        Fixed blend applied every frame.
    rate:
        Optional decay rate in ``1/s``.  When given the blend becomes
        ``1 - exp(-rate * dt)`` and no longer depends on the frame rate.
    """

    def __init__(self, factor: float = 0.25, rate: float | None = None) -> None:
        self.factor = factor
        self.rate = rate
        self.position = np.zeros(3)
        self.look_at = np.zeros(3)
        self.up = WORLD_UP.copy()

    @classmethod
    def from_config(cls, config: RideConfig) -> "CameraSmoother":
        return cls(config.smoothing_factor, config.smoothing_rate)

    def blend(self, delta_time: float) -> float:
        """Return the interpolation weight for a frame of ``delta_time``."""
        if self.rate is None:
            return self.factor
        return 1.0 - math.exp(-self.rate * max(delta_time, 0.0))

    def reset(self, pose: CameraPose) -> None:
        """Snap the smoothed state to ``pose``."""
        self.position = np.array(pose.position, dtype=float)
        self.look_at = np.array(pose.look_at, dtype=float)
        self.up = np.array(pose.up, dtype=float)

    def update(self, target: CameraPose, delta_time: float = 0.0) -> CameraPose:
        """Move the smoothed pose towards ``target`` and return it."""
        alpha = self.blend(delta_time)
        self.position = self.position + (target.position - self.position) * alpha
        self.look_at = self.look_at + (target.look_at - self.look_at) * alpha
        self.up = target.up.copy()
        return CameraPose(self.position.copy(), self.look_at.copy(), self.up.copy())
