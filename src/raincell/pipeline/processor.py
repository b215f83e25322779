"""Per-file precipitation-cell processing.

Processes one composite file through the ingestion and extraction stages:
build the frame, cut it to the region of interest, binarize, and extract
cells. Stage contracts run between the stages.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
import pandas as pd

from raincell.contracts import assert_binary_map, assert_cells, assert_frame
from raincell.radar.binarizer import RadarBinarizer
from raincell.radar.cell_analyzer import CELL_COLUMNS, RadarCellAnalyzer, cells_to_dataframe
from raincell.radar.frame import PrecipitationCell, RadarFrame
from raincell.radar.loader import RadarFrameBuilder
from raincell.radar.roi import BoundingBox, select_region

if TYPE_CHECKING:
    from raincell.schemas import InternalConfig

__all__ = ['FrameResult', 'FrameProcessor', 'results_to_dataframe']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Output of one time step: the ROI frame and its cells."""

    timestamp: pd.Timestamp
    frame: RadarFrame
    binary: np.ndarray
    cells: List[PrecipitationCell]
    source: Optional[Path] = None

    @property
    def num_cells(self) -> int:
        return len(self.cells)


class FrameProcessor:
    """Processes composite files through the complete cell-extraction pipeline.

    **Processing Pipeline:**

    For each file, the processor performs (in order):

    1. **Build**: read ACRR and QUALITY into a georeferenced RadarFrame.
    2. **ROI**: cut the frame to the configured longitude/latitude box.
    3. **Binarize**: quality mask and precipitation threshold.
    4. **Extract**: label 8-connected cells and compute their properties.

    Ingestion errors (``RadarIngestError`` subclasses) propagate to the
    caller, which applies the failure policy. Contract violations always
    propagate.

    Example usage (typically called by orchestrator)::

        processor = FrameProcessor(config)
        result = processor.process_file(path)
        print(result.timestamp, result.num_cells)
    """

    def __init__(self, config: "InternalConfig"):
        """Initialize processor with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        """
        self.config = config
        self.builder = RadarFrameBuilder(config)
        self.bbox = BoundingBox.from_config(config.roi)
        self.binarizer = RadarBinarizer(config)
        self.analyzer = RadarCellAnalyzer(config)
        self.min_cell_pixels = config.extractor.min_cell_pixels

    def process_frame(self, frame: RadarFrame) -> FrameResult:
        """Run ROI, binarize and extract on an already built frame."""
        assert_frame(frame)

        roi_frame = select_region(frame, self.bbox)
        assert_frame(roi_frame)

        binary = self.binarizer.binarize(roi_frame)
        assert_binary_map(binary, roi_frame)

        cells = self.analyzer.extract(binary, roi_frame)
        assert_cells(cells, binary, self.min_cell_pixels)

        return FrameResult(
            timestamp=roi_frame.timestamp,
            frame=roi_frame,
            binary=binary,
            cells=cells,
            source=frame.source,
        )

    def process_file(self, filepath: Path | str) -> FrameResult:
        """Process single file: build -> ROI -> binarize -> extract."""
        path = Path(filepath)
        logger.info("Processing: %s", path.name)

        frame = self.builder.build(path)
        result = self.process_frame(frame)

        self._log_cell_statistics(result)
        return result

    def _log_cell_statistics(self, result: FrameResult) -> None:
        if not result.cells:
            logger.info("No cells at %s (ROI grid %dx%d)",
                        result.timestamp, *result.frame.shape)
            return

        areas = [c.area_km2 for c in result.cells]
        logger.info("Cells at %s: %d, total area %.1f km², largest %.1f km², max %.2f mm",
                    result.timestamp, len(result.cells), float(np.nansum(areas)),
                    float(np.nanmax(areas)), max(c.max_mm for c in result.cells))


def results_to_dataframe(results: Sequence[FrameResult]) -> pd.DataFrame:
    """Concatenate the per-cell tables of all frames (columns ``CELL_COLUMNS``)."""
    frames = [cells_to_dataframe(r.cells) for r in results if r.cells]
    if not frames:
        return pd.DataFrame(columns=CELL_COLUMNS)
    return pd.concat(frames, ignore_index=True)
