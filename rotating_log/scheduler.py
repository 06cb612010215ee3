"""Time-based rotation decisions driven by a monotonic clock."""

import time

from rotating_log.config import require_positive_int


class RotationScheduler:
    """Tracks the instant of the last rotation and reports when the next one is due.

    The default clock is ``time.monotonic`` so wall-clock adjustments never
    shorten or stretch the interval. ``time_func`` can be swapped for a fake
    clock in tests; it must return seconds as a float.
    """

    def __init__(self, interval_seconds: int, time_func=None):
        self._interval = require_positive_int("rotation_interval_seconds", interval_seconds)
        self._time_func = time_func or time.monotonic
        self._last_rotation = self._time_func()

    @property
    def interval_seconds(self) -> int:
        return self._interval

    @property
    def last_rotation(self) -> float:
        return self._last_rotation

    def now(self) -> float:
        return self._time_func()

    def should_rotate(self, now: float | None = None) -> bool:
        """Return True once the interval has fully elapsed since the last rotation."""
        if now is None:
            now = self._time_func()
        return now - self._last_rotation >= self._interval

    def record_rotation(self, now: float | None = None):
        self._last_rotation = self._time_func() if now is None else now

    def seconds_until_rotation(self, now: float | None = None) -> float:
        if now is None:
            now = self._time_func()
        return max(0.0, self._interval - (now - self._last_rotation))
