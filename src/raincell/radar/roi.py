"""Restrict a RadarFrame to a geographic bounding box.

The native grid is polar stereographic, so a longitude/latitude box is not
a rectangle in native X/Y. Every pixel centre is reprojected to WGS84 and
tested against the box:

- a pixel is inside iff its centre lies in the closed box
- the frame is cut to the smallest row/column window containing every
  inside pixel
- pixels of that window whose centre is outside the box are set to null in
  both layers, so they can never become part of a cell

A box that contains no pixel centre yields an empty frame (zero rows and
columns), not an error.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import xarray as xr

from raincell.radar.frame import RadarFrame
from raincell.radar.radar_utils import native_to_lonlat

if TYPE_CHECKING:
    from raincell.schemas.internal import InternalRegionConfig

__all__ = ['BoundingBox', 'region_mask', 'select_region']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """Geographic box in WGS84 degrees (closed on all sides)."""

    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    def __post_init__(self):
        if self.lon_min > self.lon_max or self.lat_min > self.lat_max:
            raise ValueError(f"Invalid bounding box: {self}")

    @classmethod
    def from_config(cls, region: "InternalRegionConfig") -> "BoundingBox":
        return cls(region.lon_min, region.lon_max, region.lat_min, region.lat_max)

    def contains(self, lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
        with np.errstate(invalid="ignore"):
            return ((lon >= self.lon_min) & (lon <= self.lon_max)
                    & (lat >= self.lat_min) & (lat <= self.lat_max))


def region_mask(frame: RadarFrame, bbox: BoundingBox) -> np.ndarray:
    """Boolean (y, x) map of pixels whose centre falls inside ``bbox``."""
    xx, yy = np.meshgrid(frame.x, frame.y)
    lon, lat = native_to_lonlat(frame.projection, xx, yy)
    return bbox.contains(lon, lat)


def select_region(frame: RadarFrame, bbox: BoundingBox) -> RadarFrame:
    """Cut ``frame`` to the pixels inside ``bbox``.

    Parameters
    ----------
    frame : RadarFrame
        Frame on its native grid.
    bbox : BoundingBox
        Region of interest in longitude/latitude.

    Returns
    -------
    RadarFrame
        New frame on the smallest row/column window covering the region;
        outside pixels of that window are null. Empty if no pixel centre
        falls inside the box.
    """
    if frame.is_empty:
        return frame

    inside = region_mask(frame, bbox)
    rows = np.flatnonzero(inside.any(axis=1))
    cols = np.flatnonzero(inside.any(axis=0))

    if rows.size == 0:
        logger.info("No grid cell of %s inside %s, frame is empty",
                    frame.timestamp, bbox)
        return frame.with_stack(frame.stack.isel(y=slice(0, 0), x=slice(0, 0)))

    row_slice = slice(int(rows[0]), int(rows[-1]) + 1)
    col_slice = slice(int(cols[0]), int(cols[-1]) + 1)
    window = frame.stack.isel(y=row_slice, x=col_slice)
    mask = xr.DataArray(
        inside[row_slice, col_slice],
        dims=("y", "x"),
        coords={"y": window["y"], "x": window["x"]},
    )

    with xr.set_options(keep_attrs=True):
        stack = window.where(mask).transpose("y", "x", "time")
    stack.attrs = {
        **frame.stack.attrs,
        "roi_bbox": [bbox.lon_min, bbox.lon_max, bbox.lat_min, bbox.lat_max],
    }

    logger.debug("ROI %s: kept %dx%d of %dx%d pixels (%d inside)",
                 frame.timestamp, stack.sizes["y"], stack.sizes["x"],
                 frame.shape[0], frame.shape[1], int(inside.sum()))
    return frame.with_stack(stack)
