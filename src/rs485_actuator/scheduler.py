"""Periodic scheduling for the status poll."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from .config import STATUS_POLL_INTERVAL_MS

T = TypeVar("T")


@dataclass
class PollScheduler:
    """Tracks when the next periodic poll is due.

    Times are in milliseconds on any monotonic clock.
    """

    interval_ms: int = STATUS_POLL_INTERVAL_MS
    last_tick_ms: float = 0.0

    def due(self, now_ms: float) -> bool:
        return now_ms - self.last_tick_ms >= self.interval_ms

    def mark(self, now_ms: float) -> None:
        self.last_tick_ms = now_ms

    def remaining_ms(self, now_ms: float) -> float:
        """Milliseconds until the next poll, never negative."""
        return max(0.0, self.interval_ms - (now_ms - self.last_tick_ms))

    def run_if_due(self, now_ms: float, callback: Callable[[], T]) -> T | None:
        """Call *callback* and record the tick if the interval has elapsed."""
        if not self.due(now_ms):
            return None
        result = callback()
        self.mark(now_ms)
        return result
