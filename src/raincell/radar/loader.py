"""Read composite NetCDF files into georeferenced RadarFrame objects.

This module turns one Météo-France accumulation composite into a
RadarFrame: an xarray.Dataset with ACRR and QUALITY layers on the native
polar-stereographic grid, tagged with the projection rebuilt from the
file's grid-mapping record.

Key capabilities:
- Reads flat (or already gridded) ACRR/QUALITY arrays and reshapes them
  row-major to (Y, X), with a trailing singleton time axis
- Shape-checks every variable against the coordinate grid (no inference)
- Maps each layer's own missing_value and _FillValue sentinels to NaN, once
- Always closes the file, on success and on failure
"""

from pathlib import Path
from typing import TYPE_CHECKING, Optional
import logging

import numpy as np
import pandas as pd
import xarray as xr

from raincell.errors import (
    MissingFileError,
    MissingVariableError,
    RadarIngestError,
    ShapeMismatchError,
)
from raincell.radar.frame import ACRR, QUALITY, ProjectionDescriptor, RadarFrame
from raincell.radar.projection import resolve_projection

if TYPE_CHECKING:
    from raincell.schemas import InternalConfig

__all__ = ['RadarFrameBuilder', 'load_radar_frame', 'REQUIRED_VARIABLES']

logger = logging.getLogger(__name__)

REQUIRED_VARIABLES = (ACRR, QUALITY, "X", "Y", "time")

_LAYER_ATTRS = {
    ACRR: {"long_name": "Accumulated precipitation", "units": "1e-2 mm"},
    QUALITY: {"long_name": "Composite quality code", "units": "percent"},
}


class RadarFrameBuilder:
    """Build RadarFrame objects from composite NetCDF files.

    The build is a four-stage process:

    1. **Read**: ACRR, QUALITY, X, Y and time are read with xarray, without
       CF masking, so the sentinels can be resolved per layer.
    2. **Check**: ``len(ACRR) == len(QUALITY) == len(X) * len(Y)``.
    3. **Georeference**: the projection is rebuilt from the grid-mapping
       record (see ``raincell.radar.projection``).
    4. **Assemble**: both layers are reshaped to (y, x, time) and combined
       into one Dataset.

    Notes
    -----
    - All failures raise a ``RadarIngestError`` subclass carrying the path;
      skipping or aborting is the caller's decision
    - The file handle is scoped to ``build()``; nothing stays open
    - Arrays are float64 so that NaN can mark nulls in both layers

    Examples
    --------
    >>> builder = RadarFrameBuilder()
    >>> frame = builder.build("cumul_france_1536-1km-5min_202506021825.nc")
    >>> frame.accumulation.shape
    (1536, 1536)
    """

    def __init__(self, config: Optional["InternalConfig"] = None):
        """Initialize builder.

        Parameters
        ----------
        config : InternalConfig, optional
            Runtime configuration; only ``reader.engine`` is used. Without
            a config, xarray picks the NetCDF engine.
        """
        self.engine = config.reader.engine if config is not None else None

    def build(self, filepath: Path | str) -> RadarFrame:
        """Read one composite file into a RadarFrame.

        Parameters
        ----------
        filepath : Path or str
            Path to a composite NetCDF file.

        Returns
        -------
        RadarFrame
            Frame with ``ACRR`` and ``QUALITY`` layers of shape
            ``(len(Y), len(X), 1)``.

        Raises
        ------
        MissingFileError
            If the file does not exist (for example removed after it was located).
        MissingVariableError
            If ACRR, QUALITY, X, Y or time is absent.
        MissingGeoreferencingError, MalformedGeoreferencingError
            If the projection cannot be rebuilt.
        ShapeMismatchError
            If variable lengths disagree with the coordinate grid.
        """
        path = Path(filepath)
        if not path.is_file():
            raise MissingFileError(path)

        with xr.open_dataset(path, engine=self.engine, mask_and_scale=False) as ds:
            self._require_variables(ds, path)
            x = np.asarray(ds["X"].values, dtype=np.float64).ravel()
            y = np.asarray(ds["Y"].values, dtype=np.float64).ravel()
            timestamp = self._read_timestamp(ds, path)
            projection = resolve_projection(ds, path)
            acrr = self._read_layer(ds[ACRR])
            quality = self._read_layer(ds[QUALITY])

        self._check_shapes(acrr, quality, x, y, path)
        stack = self._assemble_stack(acrr, quality, x, y, timestamp, projection, path)
        logger.debug("Loaded %s: grid %dx%d, time %s", path.name, len(y), len(x), timestamp)
        return RadarFrame(timestamp=timestamp, projection=projection, stack=stack, source=path)

    @staticmethod
    def _require_variables(ds: xr.Dataset, path: Path) -> None:
        for name in REQUIRED_VARIABLES:
            if name not in ds.variables:
                raise MissingVariableError(name, path)

    @staticmethod
    def _read_timestamp(ds: xr.Dataset, path: Path) -> pd.Timestamp:
        times = np.asarray(ds["time"].values).ravel()
        if times.size == 0:
            raise ShapeMismatchError("Variable 'time' is empty", path, expected=1, actual=0)
        if not np.issubdtype(times.dtype, np.datetime64):
            raise RadarIngestError(
                f"Variable 'time' could not be decoded to datetimes (dtype {times.dtype})", path
            )
        if times.size > 1:
            logger.debug("%s has %d time steps, using the first", path.name, times.size)
        return pd.Timestamp(times[0])

    @staticmethod
    def _missing_values(var: xr.DataArray) -> np.ndarray:
        """Every sentinel a layer declares (``missing_value`` and ``_FillValue``)."""
        sentinels = [
            np.asarray(source[key]).ravel()
            for key in ("missing_value", "_FillValue")
            for source in (var.attrs, var.encoding)
            if key in source
        ]
        if not sentinels:
            return np.empty(0)
        return np.unique(np.concatenate(sentinels))

    def _read_layer(self, var: xr.DataArray) -> np.ndarray:
        """Flatten a layer (C order) and map its sentinels to NaN."""
        raw = np.asarray(var.values).ravel()
        data = raw.astype(np.float64)
        sentinels = self._missing_values(var)
        if sentinels.size:
            data[np.isin(raw, sentinels)] = np.nan
            logger.debug("%s: %d values equal to missing values %s",
                         var.name, int(np.isnan(data).sum()), sentinels.tolist())
        return data

    @staticmethod
    def _check_shapes(acrr, quality, x, y, path) -> None:
        expected = len(x) * len(y)
        for name, layer in ((ACRR, acrr), (QUALITY, quality)):
            if layer.size != expected:
                raise ShapeMismatchError(
                    f"Variable '{name}' has {layer.size} values, expected "
                    f"len(X) * len(Y) = {len(x)} * {len(y)} = {expected}",
                    path, expected=expected, actual=layer.size,
                )

    @staticmethod
    def _assemble_stack(acrr, quality, x, y, timestamp: pd.Timestamp,
                        projection: ProjectionDescriptor, path: Path) -> xr.Dataset:
        """Reshape row-major: element k -> (k // len(x), k % len(x)), then add time."""
        shape = (len(y), len(x), 1)
        dims = ("y", "x", "time")
        data_vars = {
            name: (dims, layer.reshape(shape), dict(_LAYER_ATTRS[name]))
            for name, layer in ((ACRR, acrr), (QUALITY, quality))
        }
        coords = {
            "y": ("y", y, {"units": "m", "standard_name": "projection_y_coordinate"}),
            "x": ("x", x, {"units": "m", "standard_name": "projection_x_coordinate"}),
            "time": ("time", [timestamp.to_datetime64()]),
        }
        return xr.Dataset(
            data_vars=data_vars,
            coords=coords,
            attrs={
                "crs_proj4": projection.proj_string,
                "source_file": str(path),
            },
        )


def load_radar_frame(filepath: Path | str, config: Optional["InternalConfig"] = None) -> RadarFrame:
    """Read one composite file (convenience wrapper around RadarFrameBuilder)."""
    return RadarFrameBuilder(config).build(filepath)
