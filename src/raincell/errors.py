"""Per-file ingestion errors.

Every error raised while reading one radar file carries the file path and
the offending variable or attribute, so the caller can log it and decide
whether to skip the file or abort the batch.

Key distinction:
- RadarIngestError: the input file is unusable (fatal for that file)
- NoDataAvailableError: nothing to process in the requested window (fatal for the batch)
- ContractViolation: pipeline bug (see raincell.contracts)
"""

from pathlib import Path
from typing import Optional

__all__ = [
    "RadarIngestError",
    "MissingFileError",
    "MissingVariableError",
    "DuplicateTimestampError",
    "MissingGeoreferencingError",
    "MalformedGeoreferencingError",
    "ShapeMismatchError",
    "NoDataAvailableError",
]


class RadarIngestError(Exception):
    """Base class for errors that make a single radar file unusable."""

    def __init__(self, message: str, path: Optional[Path | str] = None):
        self.path = Path(path) if path is not None else None
        self.detail = message
        if self.path is not None:
            message = f"{message} [{self.path}]"
        super().__init__(message)


class MissingFileError(RadarIngestError):
    """A located file is no longer on disk when it is read."""

    def __init__(self, path: Path | str):
        super().__init__("Radar file not found", path)


class MissingVariableError(RadarIngestError):
    """A required variable (ACRR, QUALITY, X, Y, time) is absent."""

    def __init__(self, variable: str, path: Optional[Path | str] = None):
        self.variable = variable
        super().__init__(f"Required variable '{variable}' not found", path)


class MissingGeoreferencingError(RadarIngestError):
    """The file has no grid-mapping record, so it cannot be placed on a map."""


class MalformedGeoreferencingError(RadarIngestError):
    """Grid-mapping attributes produce a projection that does not validate."""

    def __init__(self, message: str, path: Optional[Path | str] = None,
                 proj_string: Optional[str] = None):
        self.proj_string = proj_string
        super().__init__(message, path)


class ShapeMismatchError(RadarIngestError):
    """Variable length is inconsistent with the coordinate grid."""

    def __init__(self, message: str, path: Optional[Path | str] = None,
                 expected=None, actual=None):
        self.expected = expected
        self.actual = actual
        super().__init__(message, path)


class DuplicateTimestampError(RadarIngestError):
    """A file carries the same valid time as a file already processed."""

    def __init__(self, timestamp, path: Optional[Path | str] = None,
                 first: Optional[Path | str] = None):
        self.timestamp = timestamp
        self.first = Path(first) if first is not None else None
        super().__init__(f"Time {timestamp} already read from {self.first}", path)


class NoDataAvailableError(RuntimeError):
    """No radar file exists for the requested time window."""
