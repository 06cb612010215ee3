"""UTC timestamp formatting for log lines and rotated file names."""

from datetime import datetime, timezone

ENTRY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"
FILENAME_TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"
LOG_SUFFIX = ".log"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime) -> datetime:
    # Naive datetimes are taken to already be UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_entry_timestamp(dt: datetime) -> str:
    """Render ``dt`` as ``YYYY-MM-DD HH:MM:SS UTC``."""
    return _as_utc(dt).strftime(ENTRY_TIMESTAMP_FORMAT)


def rotation_filename(dt: datetime) -> str:
    """File name for a log opened at ``dt``, e.g. ``2025-01-15-12-00-00.log``."""
    return _as_utc(dt).strftime(FILENAME_TIMESTAMP_FORMAT) + LOG_SUFFIX
