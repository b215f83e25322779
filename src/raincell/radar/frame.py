"""Data model shared by the ingestion and cell-extraction stages.

- ProjectionDescriptor: resolved polar-stereographic CRS of a source file
- RadarFrame: one time step of georeferenced ACRR + QUALITY layers
- PrecipitationCell: one connected region of above-threshold precipitation

All three are frozen dataclasses. A RadarFrame owns its xarray stack and
projection; a PrecipitationCell only keeps the timestamp and grid indices of
its parent frame, never a reference to the frame itself.
"""

from dataclasses import dataclass, replace
from functools import cached_property
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import xarray as xr
from pyproj import CRS

__all__ = [
    "ACRR",
    "QUALITY",
    "ProjectionDescriptor",
    "RadarFrame",
    "PrecipitationCell",
]

ACRR = "ACRR"
QUALITY = "QUALITY"


@dataclass(frozen=True)
class ProjectionDescriptor:
    """Parametrized polar-stereographic projection on the WGS84 ellipsoid.

    Parameters follow PROJ naming: ``lat_0`` (latitude of origin), ``lon_0``
    (central longitude), ``lat_ts`` (latitude of true scale), ``x_0`` and
    ``y_0`` (false easting/northing, metres).

    Examples
    --------
    >>> ProjectionDescriptor().proj_string
    '+proj=stere +lat_0=90.0 +lon_0=0.0 +lat_ts=45.0 +x_0=0.0 +y_0=0.0 +ellps=WGS84 +units=m +no_defs'
    """

    lat_0: float = 90.0
    lon_0: float = 0.0
    lat_ts: float = 45.0
    x_0: float = 0.0
    y_0: float = 0.0
    kind: str = "stere"
    ellps: str = "WGS84"
    units: str = "m"

    @property
    def proj_string(self) -> str:
        return (
            f"+proj={self.kind} +lat_0={self.lat_0} +lon_0={self.lon_0} "
            f"+lat_ts={self.lat_ts} +x_0={self.x_0} +y_0={self.y_0} "
            f"+ellps={self.ellps} +units={self.units} +no_defs"
        )

    @cached_property
    def crs(self) -> CRS:
        return CRS.from_proj4(self.proj_string)


def _read_only(values: np.ndarray) -> np.ndarray:
    view = values.view()
    view.flags.writeable = False
    return view


@dataclass(frozen=True)
class RadarFrame:
    """One time step of radar data on the native projected grid.

    The ``stack`` dataset holds the ``ACRR`` (hundredths of mm) and
    ``QUALITY`` (0-100) layers with dims ``(y, x, time)``; ``time`` has a
    single element. Nulls are NaN, already resolved from each layer's own
    missing-value sentinel at ingestion.

    Coordinates ``x`` and ``y`` are in projection metres and need not be
    uniformly spaced. A frame with zero rows or columns is valid and means
    "nothing to analyse in this time step".
    """

    timestamp: pd.Timestamp
    projection: ProjectionDescriptor
    stack: xr.Dataset
    source: Optional[Path] = None

    @property
    def x(self) -> np.ndarray:
        return _read_only(self.stack["x"].values)

    @property
    def y(self) -> np.ndarray:
        return _read_only(self.stack["y"].values)

    @property
    def accumulation(self) -> np.ndarray:
        """2D (y, x) accumulation in hundredths of mm, NaN where null."""
        return _read_only(self.stack[ACRR].values[..., 0])

    @property
    def quality(self) -> np.ndarray:
        """2D (y, x) quality code, NaN where null."""
        return _read_only(self.stack[QUALITY].values[..., 0])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.stack.sizes["y"], self.stack.sizes["x"])

    @property
    def is_empty(self) -> bool:
        return 0 in self.shape

    @property
    def crs(self) -> CRS:
        return self.projection.crs

    def with_stack(self, stack: xr.Dataset) -> "RadarFrame":
        """Return a new frame sharing timestamp and projection."""
        return replace(self, stack=stack)


@dataclass(frozen=True)
class PrecipitationCell:
    """A maximal 8-connected region of precipitating pixels in one frame.

    ``id`` is only unique within its frame. ``pixels`` lists the member
    ``(row, col)`` grid indices in row-major order. Centroids are in the
    frame's native projection metres, with the WGS84 equivalent alongside.
    Intensities are in mm.
    """

    id: int
    timestamp: pd.Timestamp
    pixels: tuple[tuple[int, int], ...]
    area_km2: float
    centroid_x: float
    centroid_y: float
    centroid_lon: float
    centroid_lat: float
    mean_mm: float
    max_mm: float
    max_row: int
    max_col: int

    @property
    def npixels(self) -> int:
        return len(self.pixels)

    @property
    def rows(self) -> np.ndarray:
        return np.array([p[0] for p in self.pixels], dtype=np.intp)

    @property
    def cols(self) -> np.ndarray:
        return np.array([p[1] for p in self.pixels], dtype=np.intp)
