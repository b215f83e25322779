"""Frame stage contract.

Enforces the guarantee that after building (and after ROI selection) a
frame holds two aligned layers on a consistent grid.
"""

import numpy as np

from raincell.contracts.base import require
from raincell.radar.frame import ACRR, QUALITY, RadarFrame


def assert_frame(frame: RadarFrame) -> None:
    """Enforce frame stage contract.

    Parameters
    ----------
    frame : RadarFrame
        Frame from the builder or the ROI selector.

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    stack = frame.stack
    for name in (ACRR, QUALITY):
        require(
            name in stack.data_vars,
            f"Frame contract violated: missing '{name}' layer"
        )
        require(
            stack[name].dims == ("y", "x", "time"),
            f"Frame contract violated: '{name}' dims are {stack[name].dims}, expected ('y', 'x', 'time')"
        )
        require(
            stack[name].dtype.kind == "f",
            f"Frame contract violated: '{name}' dtype is {stack[name].dtype}, expected float"
        )

    require(
        stack.sizes["time"] == 1,
        f"Frame contract violated: {stack.sizes['time']} time steps, expected 1"
    )
    ny, nx = frame.shape
    require(
        frame.accumulation.size == ny * nx == frame.quality.size,
        "Frame contract violated: layer size differs from len(y) * len(x)"
    )
    if not frame.is_empty:
        quality = frame.quality[np.isfinite(frame.quality)]
        require(
            quality.size == 0 or (quality.min() >= 0 and quality.max() <= 100),
            "Frame contract violated: QUALITY outside [0, 100]"
        )
