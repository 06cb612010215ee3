"""Background thread that keeps an idle writer rotating on schedule."""

import logging
import threading

logger = logging.getLogger(__name__)

_MIN_WAIT = 0.01


class RotationTimer:
    """Polls ``writer.check_rotation()`` at most ``poll_interval`` seconds apart.

    Without it, rotation only happens as a side effect of ``write``. The
    thread exits on ``stop()`` or once the writer has been closed.
    """

    def __init__(self, writer, poll_interval: float = 1.0):
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self._writer = writer
        self._poll_interval = poll_interval
        self._shutdown = threading.Event()
        self._thread = None

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._shutdown.clear()
        self._thread = threading.Thread(
            target=self._run, name="rotation-timer", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5):
        self._shutdown.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _next_wait(self) -> float:
        """Sleep no longer than the time left before the next rotation is due."""
        remaining = self._writer.scheduler.seconds_until_rotation()
        return min(self._poll_interval, max(remaining, _MIN_WAIT))

    def _run(self):
        while not self._shutdown.wait(timeout=self._next_wait()):
            if self._writer.closed:
                logger.debug("Writer closed, rotation timer exiting")
                break
            try:
                rotated = self._writer.check_rotation()
            except Exception:
                logger.exception("Scheduled rotation check failed")
                continue
            if rotated:
                logger.debug("Timer rotated out %s", rotated)
