"""Retention enforcement: keep the log directory within the configured file cap."""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogFileDescriptor:
    path: str
    name: str
    mtime: float


def list_log_files(log_dir: str) -> list[LogFileDescriptor]:
    """Snapshot the regular files directly in log_dir, oldest first.

    Ordering is by modification time, ties broken by file name. Files that
    disappear between listing and stat are skipped.
    """
    files = []
    with os.scandir(log_dir) as it:
        for entry in it:
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                mtime = entry.stat(follow_symlinks=False).st_mtime
            except FileNotFoundError:
                continue
            files.append(LogFileDescriptor(path=entry.path, name=entry.name, mtime=mtime))
    files.sort(key=lambda f: (f.mtime, f.name))
    return files


def enforce_retention(log_dir: str, max_retained_files: int) -> int:
    """Delete the oldest files so that a new file can be opened without exceeding the cap.

    Leaves at most ``max_retained_files - 1`` files behind. Deletion failures
    are logged and skipped. Returns the number of files actually deleted.
    """
    files = list_log_files(log_dir)
    logger.debug("Retention snapshot of %s: %d file(s), cap %d", log_dir, len(files), max_retained_files)
    if len(files) < max_retained_files:
        return 0

    excess = len(files) - (max_retained_files - 1)
    deleted = 0
    for descriptor in files[:excess]:
        try:
            os.remove(descriptor.path)
        except FileNotFoundError:
            logger.warning("Log file %s already removed, skipping", descriptor.path)
            continue
        except OSError as exc:
            logger.warning("Could not delete log file %s: %s", descriptor.path, exc)
            continue
        deleted += 1

    if deleted:
        logger.info("Purged %d file(s) from %s", deleted, log_dir)
    return deleted
