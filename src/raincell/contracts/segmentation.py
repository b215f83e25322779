"""Binarization stage contract."""

import numpy as np

from raincell.contracts.base import require
from raincell.radar.frame import RadarFrame


def assert_binary_map(binary: np.ndarray, frame: RadarFrame) -> None:
    """Enforce binarization stage contract.

    Called immediately after binarization: the map is boolean, on the
    frame grid, and has no true pixel where either layer is null.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        binary.dtype == np.bool_,
        f"Binary contract violated: dtype is {binary.dtype}, expected bool"
    )
    require(
        binary.shape == frame.shape,
        f"Binary contract violated: shape {binary.shape} differs from frame {frame.shape}"
    )
    if binary.size:
        null = np.isnan(frame.accumulation) | np.isnan(frame.quality)
        require(
            not np.any(binary & null),
            "Binary contract violated: true pixel where a layer is null"
        )
