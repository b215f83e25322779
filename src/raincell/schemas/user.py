"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with flat upper-case aliases for the common
settings (e.g., BASE_DIR -> locator.base_dir, QUALITY_THRESHOLD ->
binarizer.quality_threshold), plus nested sections for advanced users.

UserConfig is intentionally minimal - users only specify what they want to
override from the expert defaults. Times may be given as strings in any
format pandas understands.
"""

from datetime import datetime
from typing import Literal, Optional

import pandas as pd
from pydantic import Field, field_validator

from raincell.schemas.base import RaincellBaseModel


def _coerce_datetime(v):
    """Accept strings and timestamps for datetime fields."""
    if v is None or isinstance(v, datetime):
        return v
    return pd.Timestamp(v).to_pydatetime()


class UserReaderConfig(RaincellBaseModel):
    """User-facing reader config."""
    engine: Optional[str] = None


class UserLocatorConfig(RaincellBaseModel):
    """User-facing locator config."""
    base_dir: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    step_minutes: Optional[int] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_times(cls, v):
        return _coerce_datetime(v)


class UserBinarizerConfig(RaincellBaseModel):
    """User-facing binarizer config."""
    quality_threshold: Optional[int] = None
    precipitation_threshold: Optional[int] = None


class UserRegionConfig(RaincellBaseModel):
    """User-facing region of interest."""
    lon_min: Optional[float] = None
    lon_max: Optional[float] = None
    lat_min: Optional[float] = None
    lat_max: Optional[float] = None


class UserExtractorConfig(RaincellBaseModel):
    """User-facing extractor config."""
    min_cell_pixels: Optional[int] = None


class UserProcessorConfig(RaincellBaseModel):
    """User-facing processor config."""
    failure_policy: Optional[str] = None

    @field_validator("failure_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        """Normalize policy names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserLoggingConfig(RaincellBaseModel):
    """User-facing logging config."""
    level: Optional[str] = None
    log_file: Optional[str] = None


class UserConfig(RaincellBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify what
    they want to override from ParamConfig defaults.

    Usage
    -----
        user_cfg = UserConfig(
            BASE_DIR="/data/radar/composites",
            START_TIME="2025-06-02 15:00",
            END_TIME="2025-06-02 23:00",
            ROI=(-3.0, 9.0, 43.0, 49.0),
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    # Archive and time window (flat aliases)
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    start_time: Optional[datetime] = Field(None, alias="START_TIME")
    end_time: Optional[datetime] = Field(None, alias="END_TIME")
    step_minutes: Optional[int] = Field(None, alias="TIME_STEP_MINUTES")

    # Thresholds (flat aliases)
    quality_threshold: Optional[int] = Field(None, alias="QUALITY_THRESHOLD")
    precipitation_threshold: Optional[int] = Field(None, alias="PRECIPITATION_THRESHOLD")

    # Region: mapping or (lon_min, lon_max, lat_min, lat_max)
    roi: Optional[UserRegionConfig] = Field(None, alias="ROI")

    # Extraction and operation (flat aliases)
    min_cell_pixels: Optional[int] = Field(None, alias="MIN_CELL_PIXELS")
    failure_policy: Optional[Literal["fail_fast", "skip_file"]] = Field(None, alias="FAILURE_POLICY")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(
        None, alias="LOG_LEVEL"
    )
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    # Nested overrides (advanced users)
    reader: Optional[UserReaderConfig] = None
    locator: Optional[UserLocatorConfig] = None
    binarizer: Optional[UserBinarizerConfig] = None
    extractor: Optional[UserExtractorConfig] = None
    processor: Optional[UserProcessorConfig] = None
    logging: Optional[UserLoggingConfig] = None

    model_config = RaincellBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_times(cls, v):
        return _coerce_datetime(v)

    @field_validator("roi", mode="before")
    @classmethod
    def coerce_roi(cls, v):
        """Accept a 4-sequence (lon_min, lon_max, lat_min, lat_max)."""
        if isinstance(v, (list, tuple)):
            if len(v) != 4:
                raise ValueError(f"ROI needs 4 values (lon_min, lon_max, lat_min, lat_max), got {v!r}")
            return dict(zip(("lon_min", "lon_max", "lat_min", "lat_max"), v))
        return v

    @field_validator("failure_policy", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v, info):
        if isinstance(v, str):
            v = v.strip()
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        flat_sections = {
            "locator": {
                "base_dir": self.base_dir,
                "start_time": self.start_time,
                "end_time": self.end_time,
                "step_minutes": self.step_minutes,
            },
            "binarizer": {
                "quality_threshold": self.quality_threshold,
                "precipitation_threshold": self.precipitation_threshold,
            },
            "extractor": {"min_cell_pixels": self.min_cell_pixels},
            "processor": {"failure_policy": self.failure_policy},
            "logging": {"level": self.log_level, "log_file": self.log_file},
        }

        overrides = {}
        for section, values in flat_sections.items():
            section_overrides = {k: v for k, v in values.items() if v is not None}
            # Explicit nested config wins over the flat aliases
            nested = getattr(self, section)
            if nested is not None:
                section_overrides.update(nested.model_dump(exclude_none=True))
            if section_overrides:
                overrides[section] = section_overrides

        if self.reader is not None:
            reader = self.reader.model_dump(exclude_none=True)
            if reader:
                overrides["reader"] = reader

        if self.roi is not None:
            roi = self.roi.model_dump(exclude_none=True)
            if roi:
                overrides["roi"] = roi

        return overrides
