"""Output ordering contract."""

from typing import Sequence

import pandas as pd

from raincell.contracts.base import require


def assert_time_ordered(timestamps: Sequence[pd.Timestamp]) -> None:
    """Enforce strictly ascending timestamps before results leave the pipeline.

    Raises
    ------
    ContractViolation
        If two consecutive timestamps are equal or decreasing.
    """
    for previous, current in zip(timestamps, timestamps[1:]):
        require(
            previous < current,
            f"Ordering contract violated: {current} does not follow {previous}"
        )
