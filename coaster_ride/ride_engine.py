"""Frame-driven ride progression.

:class:`RideEngine` ties the pieces together.  A track change rebuilds the
curve and the cached first-peak progress.  While a ride is active every call
to :meth:`RideEngine.update` integrates the speed, advances the shared
:class:`ride_state.RideState` and returns the smoothed camera pose.
"""

from __future__ import annotations

import logging
from typing import Sequence

try:  # pragma: no cover - import shim
    from .camera_frame import CameraPose, CameraSmoother, camera_targets
    from .climb_peak import first_peak_progress
    from .ride_config import RideConfig
    from .ride_physics import advance_progress
    from .ride_state import RideState
    from .track_curve import TrackCurve, build_track_curve
    from .track_tilt import TrackPoint, positions, tilt_at
except ImportError:  # pragma: no cover - direct execution support
    from camera_frame import CameraPose, CameraSmoother, camera_targets
    from climb_peak import first_peak_progress
    from ride_config import RideConfig
    from ride_physics import advance_progress
    from ride_state import RideState
    from track_curve import TrackCurve, build_track_curve
    from track_tilt import TrackPoint, positions, tilt_at

logger = logging.getLogger(__name__)


class RideEngine:
    """Advance a rider along the track and orient the camera.

    Parameters
    ----------
    state:
        Ride context read and written every frame.
    config:
        Physics and camera constants.  Defaults to :class:`ride_config.RideConfig`.
    """

    def __init__(self, state: RideState, config: RideConfig | None = None) -> None:
        self.state = state
        self.config = config if config is not None else RideConfig()
        self.points: list[TrackPoint] = []
        self.curve: TrackCurve | None = None
        self.first_peak_progress = 0.0
        self.max_height = 0.0
        self.last_speed = 0.0
        self.laps = 0
        self.smoother = CameraSmoother.from_config(self.config)
        self._built_looped = state.is_looped

    # ------------------------------------------------------------------
    # Track and lifecycle
    def set_track(self, points: Sequence[TrackPoint]) -> None:
        """Rebuild the curve and first-peak cache for ``points``.

        The curve is closed when ``state.is_looped`` is set.  A later change
        of that flag is picked up by :meth:`start_ride` and :meth:`update`,
        which rebuild the track.
        """
        self.points = list(points)
        self._built_looped = self.state.is_looped
        self.curve = build_track_curve(positions(self.points), self.state.is_looped)
        if self.curve is None:
            self.first_peak_progress = 0.0
            logger.info("Track has fewer than two distinct points; ride disabled")
            return

        cfg = self.config
        self.first_peak_progress = first_peak_progress(
            self.curve,
            step=cfg.peak_scan_step,
            end=cfg.peak_scan_end,
            climb_threshold=cfg.climb_threshold,
            fallback=cfg.fallback_peak,
        )
        logger.info(
            "Track rebuilt: %d points, looped=%s, length %.1f",
            len(self.points),
            self.state.is_looped,
            self.curve.arc_length(),
        )

    def _sync_loop_flag(self) -> None:
        if self.state.is_looped != self._built_looped:
            logger.debug("Loop flag changed to %s", self.state.is_looped)
            self.set_track(self.points)

    def start_ride(self) -> None:
        """Begin a ride from the start of the track."""
        self._sync_loop_flag()
        self.state.start_ride()
        self.laps = 0
        self.last_speed = 0.0
        if self.curve is None:
            return
        self.max_height = float(self.curve.point_at(0.0)[1])
        self.smoother.reset(self._targets(0.0))
        logger.debug("Ride started at height %.2f", self.max_height)

    def _targets(self, progress: float) -> CameraPose:
        tilt = tilt_at(self.points, progress, self.state.is_looped)
        return camera_targets(
            self.curve, progress, tilt, self.state.is_looped, self.config
        )

    # ------------------------------------------------------------------
    # Per-frame update
    def update(self, delta_time: float) -> CameraPose | None:
        """Advance the ride by ``delta_time`` seconds.

        Returns
        -------
        CameraPose or None
            The smoothed pose, or ``None`` when nothing was updated: no ride
            is active, no curve is available, or an open track has just been
            completed.
        """
        state = self.state
        if not state.is_riding:
            return None
        self._sync_loop_flag()
        if self.curve is None:
            return None

        step = advance_progress(
            self.curve,
            state.progress,
            delta_time,
            self.max_height,
            self.first_peak_progress,
            state.speed_scale,
            state.is_looped,
            state.has_chain_lift,
            self.config,
        )
        self.max_height = step.max_height
        self.last_speed = step.speed

        if step.finished:
            state.stop_ride()
            logger.info("Ride finished")
            return None
        if step.lapped:
            self.laps += 1
            logger.debug("Lap %d completed", self.laps)

        state.progress = step.progress
        return self.smoother.update(self._targets(step.progress), delta_time)
