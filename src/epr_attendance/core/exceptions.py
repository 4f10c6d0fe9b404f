class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input datasets are structurally invalid (fatal, before compute)."""


class InvariantViolation(DomainError):
    """Raised when an accumulator leaves the finite range; halts the whole run."""
