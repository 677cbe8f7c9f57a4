from __future__ import annotations

from dataclasses import dataclass


DEFAULT_RENDER_INTERVAL_S = 0.010


@dataclass
class FrameClock:
    """Fixed-interval render cadence.

    A tick that overruns its interval delays the next one; missed ticks are
    dropped instead of replayed.
    """

    interval_s: float = DEFAULT_RENDER_INTERVAL_S
    _next_tick_at: float | None = None
    ticks: int = 0
    overruns: int = 0

    def __post_init__(self) -> None:
        if self.interval_s <= 0:
            raise ValueError("interval_s must be > 0")

    @property
    def rate_hz(self) -> float:
        return 1.0 / self.interval_s

    def due(self, now: float) -> bool:
        if self._next_tick_at is None:
            self._next_tick_at = now
        return now >= self._next_tick_at

    def remaining(self, now: float) -> float:
        if self._next_tick_at is None:
            return 0.0
        return min(self.interval_s, max(0.0, self._next_tick_at - now))

    def mark(self, started_at: float, finished_at: float) -> float:
        """Record a tick and return how long to sleep before the next one."""
        self.ticks += 1
        elapsed = max(0.0, finished_at - started_at)
        if elapsed >= self.interval_s:
            self.overruns += 1
            self._next_tick_at = finished_at
            return 0.0
        self._next_tick_at = started_at + self.interval_s
        return min(self.interval_s, max(0.0, self._next_tick_at - finished_at))

    def reset(self) -> None:
        self._next_tick_at = None
        self.ticks = 0
        self.overruns = 0
