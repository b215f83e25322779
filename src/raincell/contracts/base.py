"""Base contract enforcement utility."""

from raincell.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Enforce a pipeline contract.

    Called at stage boundaries to verify the preceding stage produced the
    guaranteed invariants.

    Raises
    ------
    ContractViolation
        If condition is False.

    Examples
    --------
    >>> require(frame.shape == binary.shape, "Binary contract: shape mismatch")
    """
    if not condition:
        raise ContractViolation(message)
