class DomainError(Exception):
    """Base exception for classroom ledger rule violations."""


class ValidationError(DomainError):
    """Invalid input (grade out of range, presences above classes, bad month...).

    Raised before any state is changed.
    """


class ImportFormatError(DomainError):
    """Raised when a backup payload cannot be restored."""
