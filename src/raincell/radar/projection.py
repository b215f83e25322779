"""Rebuild the map projection of a composite from its grid-mapping record.

The composites embed their polar-stereographic parameters as attributes of
a dedicated grid-mapping variable, in a form the automatic CF readers do
not recognise. The descriptor is therefore rebuilt explicitly from the raw
attributes and validated by an independent pyproj parse.

Input (attribute mapping) and output (ProjectionDescriptor) are plain
values, so ``projection_from_attrs`` can be tested without any file.
"""

import logging
import math
from pathlib import Path
from typing import Any, Mapping, Optional

import numpy as np
import xarray as xr
from pyproj import CRS
from pyproj.exceptions import CRSError

from raincell.errors import MalformedGeoreferencingError, MissingGeoreferencingError
from raincell.radar.frame import ACRR, ProjectionDescriptor

__all__ = [
    "GRID_MAPPING_VARIABLE",
    "GRID_MAPPING_DEFAULTS",
    "find_grid_mapping",
    "projection_from_attrs",
    "validate_projection",
    "resolve_projection",
]

logger = logging.getLogger(__name__)

GRID_MAPPING_VARIABLE = "grid_mapping"

# Attribute name -> (ProjectionDescriptor field, default when absent)
GRID_MAPPING_DEFAULTS = {
    "latitude_of_projection_origin": ("lat_0", 90.0),
    "straight_vertical_longitude_from_pole": ("lon_0", 0.0),
    "standard_parallel": ("lat_ts", 45.0),
    "false_easting": ("x_0", 0.0),
    "false_northing": ("y_0", 0.0),
}


def find_grid_mapping(ds: xr.Dataset) -> Optional[xr.Variable]:
    """Return the grid-mapping variable of ``ds``, or None if there is none.

    The variable named by the ACRR ``grid_mapping`` attribute wins; a
    variable literally called ``grid_mapping`` is the fallback.
    """
    if ACRR in ds.variables:
        acrr = ds.variables[ACRR]
        name = acrr.attrs.get("grid_mapping", acrr.encoding.get("grid_mapping"))
        if isinstance(name, str) and name in ds.variables:
            return ds.variables[name]
    if GRID_MAPPING_VARIABLE in ds.variables:
        return ds.variables[GRID_MAPPING_VARIABLE]
    return None


def _as_float(attr: str, value: Any, path: Optional[Path]) -> float:
    values = np.asarray(value).ravel()
    if values.size != 1:
        raise MalformedGeoreferencingError(
            f"Grid-mapping attribute '{attr}' must be a single number, got {value!r}", path
        )
    try:
        number = float(values[0])
    except (TypeError, ValueError):
        raise MalformedGeoreferencingError(
            f"Grid-mapping attribute '{attr}' is not numeric: {value!r}", path
        ) from None
    if not math.isfinite(number):
        raise MalformedGeoreferencingError(
            f"Grid-mapping attribute '{attr}' is not finite: {value!r}", path
        )
    return number


def projection_from_attrs(attrs: Mapping[str, Any],
                          path: Optional[Path | str] = None) -> ProjectionDescriptor:
    """Build and validate a descriptor from grid-mapping attributes.

    Absent attributes take the defaults in ``GRID_MAPPING_DEFAULTS``.

    Raises
    ------
    MalformedGeoreferencingError
        If an attribute is not a finite number or the assembled projection
        is rejected by pyproj.

    Examples
    --------
    >>> projection_from_attrs({"standard_parallel": 60}).lat_ts
    60.0
    """
    path = Path(path) if path is not None else None
    params = {}
    for attr, (field, default) in GRID_MAPPING_DEFAULTS.items():
        if attr in attrs:
            params[field] = _as_float(attr, attrs[attr], path)
        else:
            logger.debug("Grid-mapping attribute '%s' absent, using %s", attr, default)
            params[field] = default

    descriptor = ProjectionDescriptor(**params)
    validate_projection(descriptor, path)
    return descriptor


def validate_projection(descriptor: ProjectionDescriptor,
                        path: Optional[Path | str] = None) -> CRS:
    """Parse the descriptor's projection string with pyproj.

    A string that pyproj cannot parse, or that does not describe a projected
    CRS, makes the descriptor unusable.
    """
    proj_string = descriptor.proj_string
    try:
        crs = CRS.from_proj4(proj_string)
    except CRSError as e:
        raise MalformedGeoreferencingError(
            f"Projection rejected by pyproj: {e}", path, proj_string=proj_string
        ) from e
    if not crs.is_projected:
        raise MalformedGeoreferencingError(
            "Projection is not a projected CRS", path, proj_string=proj_string
        )
    return crs


def resolve_projection(ds: xr.Dataset, path: Optional[Path | str] = None) -> ProjectionDescriptor:
    """Resolve the projection of an open composite dataset.

    Raises
    ------
    MissingGeoreferencingError
        If the dataset has no grid-mapping record.
    MalformedGeoreferencingError
        If the record does not yield a valid projection.
    """
    grid_mapping = find_grid_mapping(ds)
    if grid_mapping is None:
        raise MissingGeoreferencingError(
            "No grid-mapping variable, cannot georeference the file", path
        )
    descriptor = projection_from_attrs(grid_mapping.attrs, path)
    logger.debug("Resolved projection: %s", descriptor.proj_string)
    return descriptor
