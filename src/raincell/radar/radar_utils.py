"""Utility functions for grid geometry and coordinate conversion.

Centralized helper functions for:
- Per-pixel grid spacing and area on irregular coordinate axes
- Native projection <-> WGS84 longitude/latitude transformation

These utilities support the ROI selector and the cell analyzer, so that
"pixel area" and "reproject to lon/lat" have a single definition across
the pipeline.
"""

import logging
from functools import lru_cache
from typing import Tuple

import numpy as np
from pyproj import Transformer

from raincell.radar.frame import ProjectionDescriptor

__all__ = [
    'coordinate_spacing',
    'pixel_areas_km2',
    'native_to_lonlat',
    'lonlat_to_native',
]

logger = logging.getLogger(__name__)

GEOGRAPHIC_CRS = "EPSG:4326"


def coordinate_spacing(coords: np.ndarray) -> np.ndarray:
    """Absolute spacing around each point of a 1D coordinate axis.

    Uses central differences inside the axis and one-sided differences at
    the edges, so irregular axes get a per-point spacing. An axis with a
    single point has no defined spacing (NaN).

    Examples
    --------
    >>> coordinate_spacing(np.array([0.0, 1000.0, 3000.0]))
    array([1000., 1500., 2000.])
    """
    coords = np.asarray(coords, dtype=np.float64)
    if coords.size < 2:
        return np.full(coords.shape, np.nan)
    return np.abs(np.gradient(coords))


def pixel_areas_km2(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Area of every grid pixel in km², shape (len(y), len(x)).

    Areas are in the projection plane (native metres); polar-stereographic
    scale distortion away from the true-scale latitude is not corrected.
    """
    return np.outer(coordinate_spacing(y), coordinate_spacing(x)) / 1e6


@lru_cache(maxsize=16)
def _transformer(proj_string: str, inverse: bool) -> Transformer:
    if inverse:
        return Transformer.from_crs(GEOGRAPHIC_CRS, proj_string, always_xy=True)
    return Transformer.from_crs(proj_string, GEOGRAPHIC_CRS, always_xy=True)


def native_to_lonlat(projection: ProjectionDescriptor, x, y) -> Tuple[np.ndarray, np.ndarray]:
    """Transform native projection coordinates (metres) to (lon, lat) degrees.

    Parameters
    ----------
    projection : ProjectionDescriptor
        Projection of the input coordinates.
    x, y : array_like
        Native coordinates, broadcastable to the same shape.

    Returns
    -------
    tuple of np.ndarray
        ``(lon, lat)`` with the broadcast shape of ``x`` and ``y``.
    """
    x, y = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    lon, lat = _transformer(projection.proj_string, False).transform(x, y)
    return np.asarray(lon), np.asarray(lat)


def lonlat_to_native(projection: ProjectionDescriptor, lon, lat) -> Tuple[np.ndarray, np.ndarray]:
    """Transform (lon, lat) degrees to native projection coordinates (metres)."""
    lon, lat = np.broadcast_arrays(np.asarray(lon, dtype=np.float64), np.asarray(lat, dtype=np.float64))
    x, y = _transformer(projection.proj_string, True).transform(lon, lat)
    return np.asarray(x), np.asarray(y)
