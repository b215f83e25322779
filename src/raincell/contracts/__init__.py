"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- RadarIngestError reports unusable input files
- Contracts validate pipeline correctness
"""

from raincell.contracts.failure import ContractViolation, FailurePolicy
from raincell.contracts.base import require
from raincell.contracts.grid import assert_frame
from raincell.contracts.segmentation import assert_binary_map
from raincell.contracts.analysis import assert_cells
from raincell.contracts.ordering import assert_time_ordered
from raincell.contracts.invariants import PIPELINE_INVARIANTS

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "require",
    "assert_frame",
    "assert_binary_map",
    "assert_cells",
    "assert_time_ordered",
    "PIPELINE_INVARIANTS",
]
