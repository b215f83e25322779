"""Failure policy for per-file errors and contract violations.

Contract violations always propagate. Per-file ingestion errors
(``RadarIngestError``) are handled by the orchestrator according to the
configured policy.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """What the orchestrator does when one file cannot be processed.

    FAIL_FAST (default): re-raise, the batch stops
    SKIP_FILE: log the error with its traceback and continue with the next file
    """
    FAIL_FAST = "fail_fast"
    SKIP_FILE = "skip_file"


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not a bad input file. It means a
    pipeline stage did not produce the invariants it promised, and it is
    never skipped, whatever the failure policy.

    Key distinction:
    - ValueError: User/config error (handled by Pydantic)
    - RadarIngestError: unusable input file (subject to FailurePolicy)
    - ContractViolation: Pipeline bug (programmer error)
    """
