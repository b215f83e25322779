"""Cell extraction stage contract.

Enforces the structural guarantees of the extracted cells: ids 1..N,
disjoint membership and full coverage of the binary map. Scientific
correctness of the statistics is the analyzer's responsibility.
"""

from typing import Sequence

import numpy as np

from raincell.contracts.base import require
from raincell.radar.frame import PrecipitationCell


def assert_cells(cells: Sequence[PrecipitationCell], binary: np.ndarray,
                 min_cell_pixels: int = 1) -> None:
    """Enforce cell extraction stage contract.

    Parameters
    ----------
    cells : sequence of PrecipitationCell
        Output from analyzer.extract()
    binary : np.ndarray
        Map the cells were extracted from
    min_cell_pixels : int, optional
        Size filter in effect; with the default 1 every true pixel must be
        covered by a cell.

    Raises
    ------
    ContractViolation
        If structural requirements are violated
    """
    require(
        [c.id for c in cells] == list(range(1, len(cells) + 1)),
        "Cell contract violated: ids are not 1..N in order"
    )

    covered = np.zeros(binary.shape, dtype=np.int64)
    for cell in cells:
        require(
            cell.npixels >= min_cell_pixels,
            f"Cell contract violated: cell {cell.id} has {cell.npixels} pixels, "
            f"fewer than {min_cell_pixels}"
        )
        require(
            bool(binary[cell.rows, cell.cols].all()),
            f"Cell contract violated: cell {cell.id} contains a false pixel"
        )
        np.add.at(covered, (cell.rows, cell.cols), 1)

    require(
        covered.max(initial=0) <= 1,
        "Cell contract violated: cells overlap"
    )
    if min_cell_pixels <= 1:
        require(
            np.array_equal(covered.astype(bool), binary),
            "Cell contract violated: true pixels not covered by any cell"
        )
