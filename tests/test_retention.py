"""Tests for retention enforcement."""

import logging
import os

import pytest

from conftest import log_files
from rotating_log import retention
from rotating_log.retention import enforce_retention, list_log_files


@pytest.fixture
def populated(tmp_path):
    """Five log files with strictly increasing mtimes, oldest first."""
    names = [f"2025-01-1{i}-10-00-00.log" for i in range(5)]
    for i, name in enumerate(names):
        path = tmp_path / name
        path.write_text(f"entry {i}\n")
        os.utime(path, (1_700_000_000 + i * 60, 1_700_000_000 + i * 60))
    return str(tmp_path), names


class TestListLogFiles:
    def test_sorted_oldest_first(self, populated):
        directory, names = populated
        result = list_log_files(directory)
        assert [f.name for f in result] == names
        assert all(f.path == os.path.join(directory, f.name) for f in result)

    def test_mtime_beats_name(self, tmp_path):
        (tmp_path / "a.log").write_text("")
        (tmp_path / "b.log").write_text("")
        os.utime(tmp_path / "a.log", (2000, 2000))
        os.utime(tmp_path / "b.log", (1000, 1000))
        assert [f.name for f in list_log_files(str(tmp_path))] == ["b.log", "a.log"]

    def test_ties_broken_by_name(self, tmp_path):
        for name in ("c.log", "a.log", "b.log"):
            (tmp_path / name).write_text("")
            os.utime(tmp_path / name, (1000, 1000))
        assert [f.name for f in list_log_files(str(tmp_path))] == ["a.log", "b.log", "c.log"]

    def test_subdirectories_ignored(self, tmp_path):
        (tmp_path / "archive").mkdir()
        (tmp_path / "archive" / "old.log").write_text("")
        (tmp_path / "current.log").write_text("")
        assert [f.name for f in list_log_files(str(tmp_path))] == ["current.log"]

    def test_empty_directory(self, tmp_path):
        assert list_log_files(str(tmp_path)) == []


class TestEnforceRetention:
    def test_leaves_room_for_new_file(self, populated):
        directory, names = populated
        deleted = enforce_retention(directory, 3)
        assert deleted == 3
        assert log_files(directory) == names[3:]

    def test_below_cap_deletes_nothing(self, populated):
        directory, names = populated
        assert enforce_retention(directory, 6) == 0
        assert log_files(directory) == names

    def test_at_cap_deletes_one(self, populated):
        directory, names = populated
        assert enforce_retention(directory, 5) == 1
        assert log_files(directory) == names[1:]

    def test_cap_of_one_clears_directory(self, populated):
        directory, _ = populated
        assert enforce_retention(directory, 1) == 5
        assert log_files(directory) == []

    def test_idempotent(self, populated):
        directory, names = populated
        assert enforce_retention(directory, 3) == 3
        assert enforce_retention(directory, 3) == 0
        assert log_files(directory) == names[3:]

    def test_subdirectories_not_counted_or_deleted(self, populated):
        directory, names = populated
        os.mkdir(os.path.join(directory, "nested"))
        assert enforce_retention(directory, 5) == 1
        assert os.path.isdir(os.path.join(directory, "nested"))

    def test_delete_failure_is_skipped(self, populated, monkeypatch, caplog):
        directory, names = populated
        real_remove = os.remove
        protected = os.path.join(directory, names[0])

        def flaky_remove(path):
            if path == protected:
                raise PermissionError("read-only")
            real_remove(path)

        monkeypatch.setattr(retention.os, "remove", flaky_remove)
        with caplog.at_level(logging.WARNING, logger="rotating_log.retention"):
            deleted = enforce_retention(directory, 3)

        assert deleted == 2
        assert log_files(directory) == [names[0]] + names[3:]
        assert "Could not delete" in caplog.text

    def test_concurrently_removed_file_is_skipped(self, populated, monkeypatch):
        directory, names = populated
        real_remove = os.remove
        vanished = os.path.join(directory, names[1])

        def racing_remove(path):
            if path == vanished:
                real_remove(path)
                raise FileNotFoundError(path)
            real_remove(path)

        monkeypatch.setattr(retention.os, "remove", racing_remove)
        deleted = enforce_retention(directory, 3)

        assert deleted == 2
        assert log_files(directory) == names[3:]
