"""ParamConfig: Expert defaults for the raincell pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here; runtime code defines no fallback
values of its own.

Runtime code NEVER reads from ParamConfig directly - it only receives
InternalConfig.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, model_validator

from raincell.contracts.failure import FailurePolicy
from raincell.schemas.base import RaincellBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ReaderConfig(RaincellBaseModel):
    """NetCDF reader configuration."""
    engine: Optional[Literal["netcdf4", "h5netcdf", "scipy"]] = Field(
        None, description="xarray backend; None lets xarray choose"
    )


class LocatorConfig(RaincellBaseModel):
    """Input archive and time window."""
    base_dir: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    step_minutes: int = Field(5, ge=1, description="Spacing of composites in minutes")


class BinarizerConfig(RaincellBaseModel):
    """Quality mask and precipitation threshold."""
    quality_threshold: int = Field(10, ge=0, le=100, description="Minimum QUALITY code")
    precipitation_threshold: int = Field(50, ge=0, description="Minimum ACRR, hundredths of mm")


class RegionConfig(RaincellBaseModel):
    """Region of interest in WGS84 degrees (default: the Alps)."""
    lon_min: float = Field(-3.0, ge=-180.0, le=180.0)
    lon_max: float = Field(9.0, ge=-180.0, le=180.0)
    lat_min: float = Field(43.0, ge=-90.0, le=90.0)
    lat_max: float = Field(49.0, ge=-90.0, le=90.0)

    @model_validator(mode="after")
    def check_ordering(self):
        if self.lon_min > self.lon_max:
            raise ValueError(f"lon_min ({self.lon_min}) > lon_max ({self.lon_max})")
        if self.lat_min > self.lat_max:
            raise ValueError(f"lat_min ({self.lat_min}) > lat_max ({self.lat_max})")
        return self


class ExtractorConfig(RaincellBaseModel):
    """Cell extraction configuration."""
    min_cell_pixels: int = Field(1, ge=1, description="1 keeps every component")


class ProcessorConfig(RaincellBaseModel):
    """Per-file processing configuration."""
    failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST


class LoggingConfig(RaincellBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_file: Optional[str] = None


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(RaincellBaseModel):
    """Complete expert configuration with all defaults.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg)

    Runtime code only sees InternalConfig.
    """

    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    locator: LocatorConfig = Field(default_factory=LocatorConfig)
    binarizer: BinarizerConfig = Field(default_factory=BinarizerConfig)
    roi: RegionConfig = Field(default_factory=RegionConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    processor: ProcessorConfig = Field(default_factory=ProcessorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
