"""Append-only log writer with time-based rotation and a retention cap."""

import logging
import os
import threading
from enum import Enum

from rotating_log.config import Config, validate_config
from rotating_log.retention import enforce_retention
from rotating_log.scheduler import RotationScheduler
from rotating_log.timestamps import format_entry_timestamp, rotation_filename, utc_now

logger = logging.getLogger(__name__)


class LogIOError(OSError):
    """Raised when the active log file cannot be opened or written."""


class WriterClosedError(LogIOError):
    """Raised when writing to a writer that has been closed."""


def _escape_line_breaks(message: str) -> str:
    """Keep one entry on one line by escaping embedded CR/LF."""
    return message.replace("\r", "\\r").replace("\n", "\\n")


class WriterState(Enum):
    WRITING = "writing"
    ROTATING = "rotating"
    CLOSED = "closed"


class LogWriter:
    """Owns one open log file and rolls it over every ``rotation_interval_seconds``.

    A single lock covers "check rotation, maybe rotate, write the line", so
    an entry submitted at a rotation boundary lands in exactly one file.

    ``time_func`` returns the wall-clock datetime used for file names and
    line timestamps; ``monotonic_func`` drives the rotation schedule.
    """

    def __init__(self, config: Config, time_func=None, monotonic_func=None):
        self._config = validate_config(config)
        self._time_func = time_func or utc_now
        self._scheduler = RotationScheduler(config.rotation_interval_seconds, monotonic_func)
        self._lock = threading.Lock()
        self._file = None
        self._filepath = None
        self._state = WriterState.CLOSED

        try:
            os.makedirs(config.log_dir, exist_ok=True)
            enforce_retention(config.log_dir, config.max_retained_files)
            self._open(self._next_path())
        except OSError as exc:
            raise LogIOError(f"Could not open log file in {config.log_dir}: {exc}") from exc

        self._scheduler.record_rotation()
        self._state = WriterState.WRITING

    def _next_path(self) -> str:
        return os.path.join(self._config.log_dir, rotation_filename(self._time_func()))

    def _open(self, path: str):
        self._file = open(path, "a", encoding="utf-8")
        self._filepath = path

    def _close(self):
        f, self._file = self._file, None
        if f is not None and not f.closed:
            try:
                f.flush()
            finally:
                f.close()

    def _rotate(self, now: float) -> str:
        """Close, prune, reopen. Returns the path of the file rotated out."""
        rotated_path = self._filepath
        self._state = WriterState.ROTATING
        try:
            self._close()
            next_path = self._next_path()
            # Same-second rotation reopens the file just closed; nothing new to make room for
            if next_path != rotated_path:
                enforce_retention(self._config.log_dir, self._config.max_retained_files)
            self._open(next_path)
        except OSError as exc:
            self._close()
            self._state = WriterState.CLOSED
            logger.error("Rotation of %s failed, writer closed: %s", rotated_path, exc)
            raise LogIOError(f"Rotation failed, log writer closed: {exc}") from exc

        self._scheduler.record_rotation(now)
        self._state = WriterState.WRITING
        logger.info("Rotated %s -> %s", rotated_path, self._filepath)
        return rotated_path

    def write(self, entry: str) -> str | None:
        """Append a timestamped line. Returns the rotated-out file path if rotation occurred."""
        with self._lock:
            if self._state is WriterState.CLOSED:
                raise WriterClosedError("Log writer is closed")

            rotated_path = None
            now = self._scheduler.now()
            if self._scheduler.should_rotate(now):
                rotated_path = self._rotate(now)

            message = _escape_line_breaks(entry.rstrip("\r\n"))
            line = f"{format_entry_timestamp(self._time_func())} {message}\n"
            try:
                self._file.write(line)
                self._file.flush()
            except (OSError, UnicodeEncodeError) as exc:
                raise LogIOError(f"Write to {self._filepath} failed: {exc}") from exc
            return rotated_path

    def check_rotation(self) -> str | None:
        """Rotate if the interval has elapsed. No-op on a closed writer."""
        with self._lock:
            if self._state is WriterState.CLOSED:
                return None
            now = self._scheduler.now()
            if self._scheduler.should_rotate(now):
                return self._rotate(now)
            return None

    def rotate(self) -> str:
        """Force a rotation now, regardless of the schedule."""
        with self._lock:
            if self._state is WriterState.CLOSED:
                raise WriterClosedError("Log writer is closed")
            return self._rotate(self._scheduler.now())

    def close(self):
        with self._lock:
            if self._state is WriterState.CLOSED:
                return
            try:
                self._close()
            finally:
                self._state = WriterState.CLOSED

    @property
    def config(self) -> Config:
        return self._config

    @property
    def state(self) -> WriterState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is WriterState.CLOSED

    @property
    def current_path(self) -> str | None:
        """Path of the active file, or of the last one if the writer is closed."""
        return self._filepath

    @property
    def scheduler(self) -> RotationScheduler:
        return self._scheduler

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
