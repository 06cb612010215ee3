import os
from datetime import datetime, timedelta, timezone

import pytest

from rotating_log.config import Config


class FakeClock:
    """Drives both the wall clock and the monotonic clock from one offset."""

    def __init__(self, start: datetime):
        self._start = start
        self.offset = 0.0

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self.offset)

    def monotonic(self) -> float:
        return 1000.0 + self.offset

    def advance(self, seconds: float):
        self.offset += seconds

    def set(self, seconds: float):
        self.offset = seconds


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def log_dir(tmp_path):
    return str(tmp_path / "logs")


@pytest.fixture
def make_config(log_dir):
    def _make(**overrides):
        defaults = dict(
            log_dir=log_dir,
            max_retained_files=3,
            rotation_interval_seconds=2,
        )
        defaults.update(overrides)
        return Config(**defaults)
    return _make


def read_lines(path: str) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def messages(path: str) -> list[str]:
    """Strip the ``YYYY-MM-DD HH:MM:SS UTC`` prefix from every line."""
    return [line.split(" UTC ", 1)[1] for line in read_lines(path)]


def log_files(directory: str) -> list[str]:
    return sorted(
        name for name in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, name))
    )
