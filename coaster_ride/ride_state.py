"""Ride parameters shared between the ride engine and its caller."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RideState:
    """Mutable ride context passed to :class:`ride_engine.RideEngine`.

    ``progress`` is the normalised position along the track.  The engine
    writes it every frame and calls :meth:`stop_ride` when an open track is
    completed.
    """

    progress: float = 0.0
    speed_scale: float = 1.0
    is_looped: bool = False
    has_chain_lift: bool = True
    is_riding: bool = False

    def start_ride(self) -> None:
        self.progress = 0.0
        self.is_riding = True

    def stop_ride(self) -> None:
        self.is_riding = False
