"""Rate gate turning a stream of animation frames into at most one step per interval."""

from __future__ import annotations

import time
from typing import Callable


class FrameGate:
    """Accepts a frame once ``1/speed`` seconds have passed since the last accepted one.

    Frames arriving early are dropped, never queued, so a slow consumer cannot
    build up a backlog of steps.
    """

    def __init__(self, speed: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._last: float | None = None
        self.accepted = 0
        self.dropped = 0
        self.speed = 1.0
        self.set_speed(speed)

    @property
    def interval(self) -> float:
        """Seconds between accepted frames."""
        return 1.0 / self.speed

    def set_speed(self, speed: float) -> None:
        if speed <= 0:
            raise ValueError(f"Speed must be positive, got {speed}.")
        self.speed = float(speed)

    def restart(self, now: float | None = None) -> None:
        """Start timing from ``now``; the next frame must wait a full interval."""
        self._last = self._clock() if now is None else now

    def ready(self, now: float | None = None) -> bool:
        """Return True when this frame should advance the simulation."""
        now = self._clock() if now is None else now
        if self._last is None:
            self._last = now
            self.dropped += 1
            return False
        if now - self._last >= self.interval:
            self._last = now
            self.accepted += 1
            return True
        self.dropped += 1
        return False
