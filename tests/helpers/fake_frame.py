from pathlib import Path

import numpy as np
import pandas as pd

from raincell.radar.frame import ProjectionDescriptor, RadarFrame
from raincell.radar.loader import RadarFrameBuilder
from tests.helpers.fake_netcdf import alps_grid


def make_frame(acrr, quality=None, x=None, y=None,
               timestamp="2025-06-02T18:00", projection=None, spacing=1000.0):
    """In-memory RadarFrame on a grid centred in the Alps.

    ``quality`` defaults to 100 everywhere. Use ``np.nan`` for nulls.
    """
    acrr = np.asarray(acrr, dtype=np.float64)
    quality = np.full(acrr.shape, 100.0) if quality is None else np.asarray(quality, dtype=np.float64)
    ny, nx = acrr.shape
    if x is None or y is None:
        x, y = alps_grid(nx, ny, spacing)
    projection = projection or ProjectionDescriptor()
    timestamp = pd.Timestamp(timestamp)

    stack = RadarFrameBuilder._assemble_stack(
        acrr.ravel(), quality.ravel(), np.asarray(x, dtype=np.float64),
        np.asarray(y, dtype=np.float64), timestamp, projection, Path("memory.nc"),
    )
    return RadarFrame(timestamp=timestamp, projection=projection, stack=stack)
