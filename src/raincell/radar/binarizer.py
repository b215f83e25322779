"""Quality mask and precipitation threshold.

A pixel precipitates iff both layers are present and pass their thresholds:

    quality >= quality_threshold  and  accumulation >= precipitation_threshold

Null (NaN) in either layer always means "no precipitation". The one
exception is documented: accumulations over windows longer than 15
minutes treat null as 0. That substitution belongs to whoever builds the
long window (see ``accumulate_frames``); single 5-minute frames never
trigger it.
"""

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from raincell.errors import ShapeMismatchError
from raincell.radar.frame import ACRR, QUALITY, RadarFrame

if TYPE_CHECKING:
    from raincell.schemas import InternalConfig

__all__ = [
    'LONG_WINDOW_MINUTES',
    'FRAME_MINUTES',
    'RadarBinarizer',
    'binarize',
    'binarize_arrays',
    'fill_long_window_nulls',
    'accumulate_frames',
]

logger = logging.getLogger(__name__)

LONG_WINDOW_MINUTES = 15
FRAME_MINUTES = 5


def _check_thresholds(quality_threshold: int, precipitation_threshold: int) -> None:
    if not 0 <= quality_threshold <= 100:
        raise ValueError(f"quality_threshold must be in [0, 100], got {quality_threshold}")
    if precipitation_threshold < 0:
        raise ValueError(f"precipitation_threshold must be >= 0, got {precipitation_threshold}")


def binarize_arrays(accumulation: np.ndarray, quality: np.ndarray,
                    quality_threshold: int, precipitation_threshold: int) -> np.ndarray:
    """Boolean precipitation map from 2D accumulation and quality arrays."""
    _check_thresholds(quality_threshold, precipitation_threshold)
    accumulation = np.asarray(accumulation, dtype=np.float64)
    quality = np.asarray(quality, dtype=np.float64)
    if accumulation.shape != quality.shape:
        raise ShapeMismatchError(
            f"Accumulation {accumulation.shape} and quality {quality.shape} differ in shape",
            expected=accumulation.shape, actual=quality.shape,
        )
    # NaN compares False, so nulls never pass.
    with np.errstate(invalid="ignore"):
        return (quality >= quality_threshold) & (accumulation >= precipitation_threshold)


def binarize(frame: RadarFrame, quality_threshold: int,
             precipitation_threshold: int) -> np.ndarray:
    """Boolean (y, x) precipitation map of a frame.

    Parameters
    ----------
    frame : RadarFrame
        Frame to threshold (may be empty).
    quality_threshold : int
        Minimum quality code, 0-100.
    precipitation_threshold : int
        Minimum accumulation, hundredths of mm.

    Examples
    --------
    >>> mask = binarize(frame, quality_threshold=10, precipitation_threshold=50)
    >>> mask.shape == frame.shape
    True
    """
    return binarize_arrays(frame.accumulation, frame.quality,
                           quality_threshold, precipitation_threshold)


def fill_long_window_nulls(accumulation: np.ndarray, window_minutes: int) -> np.ndarray:
    """Treat null accumulation as 0 for windows longer than 15 minutes.

    Returns a new array when the substitution applies, the input otherwise.
    """
    if window_minutes <= LONG_WINDOW_MINUTES:
        return accumulation
    return np.where(np.isnan(accumulation), 0.0, accumulation)


def accumulate_frames(frames: Sequence[RadarFrame],
                      frame_minutes: int = FRAME_MINUTES) -> RadarFrame:
    """Sum consecutive frames into one longer accumulation window.

    The result keeps the first frame's timestamp (window start), sums
    accumulation and keeps the lowest quality of each pixel. When the
    window exceeds 15 minutes, null accumulation counts as 0 before
    summing; null quality stays null.

    Raises
    ------
    ValueError
        If ``frames`` is empty.
    ShapeMismatchError
        If frames do not share the same grid and projection.
    """
    if not frames:
        raise ValueError("accumulate_frames needs at least one frame")

    first = frames[0]
    for frame in frames[1:]:
        same_grid = (
            frame.shape == first.shape
            and np.array_equal(frame.x, first.x)
            and np.array_equal(frame.y, first.y)
        )
        if not same_grid or frame.projection != first.projection:
            raise ShapeMismatchError(
                f"Frame {frame.timestamp} is not on the grid of {first.timestamp}",
                frame.source, expected=first.shape, actual=frame.shape,
            )

    window_minutes = frame_minutes * len(frames)
    accumulation = sum(fill_long_window_nulls(f.accumulation, window_minutes) for f in frames)
    quality = np.min(np.stack([f.quality for f in frames]), axis=0)

    stack = first.stack.copy(data={
        ACRR: accumulation[..., np.newaxis],
        QUALITY: quality[..., np.newaxis],
    })
    stack.attrs = {**first.stack.attrs, "accumulation_minutes": window_minutes}
    logger.debug("Accumulated %d frames from %s (%d min)",
                 len(frames), first.timestamp, window_minutes)
    return first.with_stack(stack)


class RadarBinarizer:
    """Config-driven binarizer for the per-file processor."""

    def __init__(self, config: "InternalConfig"):
        self.quality_threshold = config.binarizer.quality_threshold
        self.precipitation_threshold = config.binarizer.precipitation_threshold
        _check_thresholds(self.quality_threshold, self.precipitation_threshold)
        logger.info("RadarBinarizer initialized: quality>=%d, precipitation>=%d",
                    self.quality_threshold, self.precipitation_threshold)

    def binarize(self, frame: RadarFrame) -> np.ndarray:
        return binarize(frame, self.quality_threshold, self.precipitation_threshold)
