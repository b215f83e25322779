"""Test composite file discovery."""

import logging
from datetime import datetime
from pathlib import Path

import pytest

from raincell.radar.locator import (
    locate_radar_files,
    parse_file_timestamp,
    radar_file_path,
)

pytestmark = pytest.mark.unit

START = datetime(2025, 6, 2, 18, 0)
END = datetime(2025, 6, 2, 18, 30)


def _touch(base, when):
    path = radar_file_path(base, when)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_radar_file_path_layout():
    path = radar_file_path("/data", datetime(2025, 6, 2, 18, 25))

    assert path == Path("/data/202506/20250602/cumul_france_1536-1km-5min_202506021825.nc")


def test_parse_file_timestamp_roundtrip():
    when = datetime(2025, 12, 31, 23, 55)

    assert parse_file_timestamp(radar_file_path("/data", when)) == when


def test_parse_file_timestamp_rejects_other_names():
    with pytest.raises(ValueError):
        parse_file_timestamp("/data/other_202506021825.nc")


def test_only_existing_files_are_returned(temp_dir):
    """7 steps, 3 files present: exactly those 3, in time order."""
    present = [datetime(2025, 6, 2, 18, m) for m in (25, 0, 10)]
    for when in present:
        _touch(temp_dir, when)

    files = locate_radar_files(temp_dir, START, END, 5)

    assert len(files) == 3
    assert files == [radar_file_path(temp_dir, w) for w in sorted(present)]
    assert all(f.is_file() for f in files)


def test_window_end_is_inclusive(temp_dir):
    _touch(temp_dir, END)

    assert locate_radar_files(temp_dir, START, END, 5) == [radar_file_path(temp_dir, END)]


def test_missing_files_logged_as_warnings(temp_dir, caplog):
    _touch(temp_dir, START)

    with caplog.at_level(logging.WARNING, logger="raincell.radar.locator"):
        locate_radar_files(temp_dir, START, END, 5)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 6
    assert "File not found" in warnings[0].getMessage()


def test_empty_archive_returns_empty_list(temp_dir):
    assert locate_radar_files(temp_dir, START, END, 5) == []


def test_start_after_end_yields_nothing(temp_dir):
    _touch(temp_dir, START)

    assert locate_radar_files(temp_dir, END, START, 5) == []


def test_window_crosses_midnight(temp_dir):
    before = datetime(2025, 6, 2, 23, 55)
    after = datetime(2025, 6, 3, 0, 0)
    _touch(temp_dir, before)
    _touch(temp_dir, after)

    files = locate_radar_files(temp_dir, before, after, 5)

    assert [f.parent.name for f in files] == ["20250602", "20250603"]


@pytest.mark.parametrize("step", [0, -5, 2.5, True])
def test_invalid_step_rejected(temp_dir, step):
    with pytest.raises(ValueError):
        locate_radar_files(temp_dir, START, END, step)
