"""Connected-component labelling of binary precipitation maps."""

import logging
from typing import TYPE_CHECKING, Optional

import numpy as np
from skimage.measure import label

if TYPE_CHECKING:
    from raincell.schemas import InternalConfig

__all__ = ['RadarCellSegmenter', 'label_cells', 'CONNECTIVITY']

logger = logging.getLogger(__name__)

# skimage connectivity 2 on a 2D grid: the 8 orthogonal and diagonal neighbours
CONNECTIVITY = 2


class RadarCellSegmenter:
    """Config-driven labelling for the per-file processor."""

    def __init__(self, config: Optional["InternalConfig"] = None, min_pixels: int = 1):
        """Store config.

        Parameters
        ----------
        config : InternalConfig, optional
            Only ``extractor.min_cell_pixels`` is used; it overrides
            ``min_pixels`` when given.
        min_pixels : int
            Smallest component kept, in pixels (default 1, keep all).
        """
        self.min_pixels = config.extractor.min_cell_pixels if config is not None else min_pixels
        if self.min_pixels < 1:
            raise ValueError(f"min_cell_pixels must be >= 1, got {self.min_pixels}")

        logger.info("RadarCellSegmenter initialized: connectivity=8, min_pixels=%d",
                    self.min_pixels)

    def segment(self, binary: np.ndarray) -> np.ndarray:
        """Label 8-connected components of a 2D boolean map.

        Returns an int32 array of the same shape: 0 is background and cells
        are numbered 1..n in row-major order of their first pixel.
        """
        binary = np.asarray(binary, dtype=bool)
        if binary.ndim != 2:
            raise ValueError(f"Expected a 2D binary map, got shape {binary.shape}")
        if binary.size == 0 or not binary.any():
            return np.zeros(binary.shape, dtype=np.int32)

        labels = label(binary, connectivity=CONNECTIVITY)
        labels = self._filter_and_relabel(labels)
        logger.debug("Labelled %d cells in %s grid", int(labels.max()), binary.shape)
        return labels.astype(np.int32)

    def _filter_and_relabel(self, labels: np.ndarray) -> np.ndarray:
        """Drop components under min_pixels, renumber by first occurrence."""
        labels_unique, first_index, counts = np.unique(
            labels.ravel(), return_index=True, return_counts=True
        )
        keep_mask = labels_unique > 0

        if self.min_pixels > 1:
            keep_mask &= (counts >= self.min_pixels)
            num_small = int(np.sum((labels_unique > 0) & (counts < self.min_pixels)))
            if num_small > 0:
                logger.debug("Removed %d small (< %d)", num_small, self.min_pixels)

        labels_kept = labels_unique[keep_mask]
        order = np.argsort(first_index[keep_mask], kind="stable")

        old_to_new = np.zeros(labels.max() + 1, dtype=np.int32)
        old_to_new[labels_kept[order]] = np.arange(1, len(labels_kept) + 1)
        return old_to_new[labels]


def label_cells(binary: np.ndarray, min_cell_pixels: int = 1) -> np.ndarray:
    """Label a binary map without a config object."""
    return RadarCellSegmenter(min_pixels=min_cell_pixels).segment(binary)
