"""Locate Météo-France 5-minute accumulation composites on disk.

Files follow a dated directory layout (YYYYMM/YYYYMMDD) with the
accumulation start time in the file name:

    <base>/202506/20250602/cumul_france_1536-1km-5min_202506021825.nc

Missing files are expected (radar outages, partial downloads) and are
logged and skipped. An empty result is not an error here; the caller
decides whether "no data" is fatal.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import List

__all__ = [
    "FILENAME_PREFIX",
    "radar_file_path",
    "parse_file_timestamp",
    "locate_radar_files",
]

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "cumul_france_1536-1km-5min_"
FILENAME_SUFFIX = ".nc"
TIMESTAMP_FORMAT = "%Y%m%d%H%M"


def radar_file_path(base_dir: Path | str, when: datetime) -> Path:
    """Expected path of the composite starting at ``when``.

    Examples
    --------
    >>> radar_file_path("/data", datetime(2025, 6, 2, 18, 25))
    PosixPath('/data/202506/20250602/cumul_france_1536-1km-5min_202506021825.nc')
    """
    filename = f"{FILENAME_PREFIX}{when.strftime(TIMESTAMP_FORMAT)}{FILENAME_SUFFIX}"
    return Path(base_dir) / when.strftime("%Y%m") / when.strftime("%Y%m%d") / filename


def parse_file_timestamp(path: Path | str) -> datetime:
    """Recover the accumulation start time from a composite file name.

    Raises
    ------
    ValueError
        If the name does not follow the composite naming scheme.
    """
    name = Path(path).name
    if not (name.startswith(FILENAME_PREFIX) and name.endswith(FILENAME_SUFFIX)):
        raise ValueError(f"Not a composite file name: {name}")
    stamp = name[len(FILENAME_PREFIX):-len(FILENAME_SUFFIX)]
    return datetime.strptime(stamp, TIMESTAMP_FORMAT)


def locate_radar_files(base_dir: Path | str, start: datetime, end: datetime,
                       step_minutes: int) -> List[Path]:
    """List existing composite files between ``start`` and ``end`` inclusive.

    One candidate path is derived per ``step_minutes`` from ``start``; only
    candidates that exist on disk are returned, in time order.

    Parameters
    ----------
    base_dir : Path or str
        Root of the dated directory tree.
    start, end : datetime
        Inclusive time window (accumulation start times).
    step_minutes : int
        Positive step between candidates, in minutes.

    Returns
    -------
    list of Path
        Existing files, at most one per step. Empty if nothing was found.

    Raises
    ------
    ValueError
        If ``step_minutes`` is not a positive integer.
    """
    if not isinstance(step_minutes, int) or isinstance(step_minutes, bool) or step_minutes <= 0:
        raise ValueError(f"step_minutes must be a positive integer, got {step_minutes!r}")

    step = timedelta(minutes=step_minutes)
    found = []
    missing = 0
    current = start
    while current <= end:
        filepath = radar_file_path(base_dir, current)
        if filepath.is_file():
            found.append(filepath)
        else:
            missing += 1
            logger.warning("File not found: %s", filepath)
        current += step

    logger.info("Located %d files (%d missing) between %s and %s",
                len(found), missing, start, end)
    return found
