"""
⚠️ DRAFT — requires crypto review before production use

Custom exceptions for the commitment layer.

Each error class carries a ``retryable`` flag. Invariant failures
(degenerate output, subgroup violation) are never retryable: they point to
a defect in the parameters or the primitive, not in the caller's input.
"""


class CommitmentError(Exception):
    """Base exception for commitment errors."""

    retryable = False


class InputTooLargeError(CommitmentError):
    """Message exceeds the capacity of the window layout."""

    pass


class InvalidRandomnessError(CommitmentError, ValueError):
    """Randomness is not a scalar in [0, group order)."""

    pass


class DegenerateCommitmentError(CommitmentError):
    """Commitment evaluated to the point at infinity."""

    pass


class SubgroupViolationError(CommitmentError):
    """Point is not a member of the prime-order subgroup."""

    pass


class PersistenceError(CommitmentError):
    """Parameters could not be written, read or parsed."""

    retryable = True


class ConfigurationError(CommitmentError):
    """Configuration error."""

    pass
