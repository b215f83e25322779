"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully
validated and normalized; runtime modules read fields directly, without
.get() calls or fallback defaults.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict, Field, model_validator

from raincell.contracts.failure import FailurePolicy
from raincell.schemas.base import RaincellBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalReaderConfig(RaincellBaseModel):
    """Runtime reader configuration."""
    engine: Optional[Literal["netcdf4", "h5netcdf", "scipy"]]


class InternalLocatorConfig(RaincellBaseModel):
    """Runtime locator configuration.

    Note: base_dir, start_time and end_time may be None while configs are
    merged; the orchestrator requires them before a run.
    """
    base_dir: Optional[str]
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    step_minutes: int = Field(ge=1)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time is not None and self.end_time is not None:
            if self.start_time > self.end_time:
                raise ValueError(
                    f"start_time ({self.start_time}) is after end_time ({self.end_time})"
                )
        return self


class InternalBinarizerConfig(RaincellBaseModel):
    """Runtime binarizer configuration."""
    quality_threshold: int = Field(ge=0, le=100)
    precipitation_threshold: int = Field(ge=0)


class InternalRegionConfig(RaincellBaseModel):
    """Runtime region of interest."""
    lon_min: float
    lon_max: float
    lat_min: float
    lat_max: float

    @model_validator(mode="after")
    def check_ordering(self):
        if self.lon_min > self.lon_max or self.lat_min > self.lat_max:
            raise ValueError(
                f"Empty region: lon [{self.lon_min}, {self.lon_max}], "
                f"lat [{self.lat_min}, {self.lat_max}]"
            )
        return self


class InternalExtractorConfig(RaincellBaseModel):
    """Runtime cell extraction configuration."""
    min_cell_pixels: int = Field(ge=1)


class InternalProcessorConfig(RaincellBaseModel):
    """Runtime processor configuration."""
    failure_policy: FailurePolicy


class InternalLoggingConfig(RaincellBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    log_file: Optional[str]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(RaincellBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.quality_threshold = config.binarizer.quality_threshold  # NOT .get()

    All validation happens during config resolution, not in runtime code.
    """

    reader: InternalReaderConfig
    locator: InternalLocatorConfig
    binarizer: InternalBinarizerConfig
    roi: InternalRegionConfig
    extractor: InternalExtractorConfig
    processor: InternalProcessorConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
