"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A request was malformed or a business rule was violated."""


class EntityNotFoundError(DomainException):
    """A referenced entity does not exist or has been soft-deleted."""


class InsufficientStockError(DomainException):
    """A reservation's precondition failed at a (size, location) pair.

    Retryable by the user with a different quantity or location; it is
    not a transient failure.
    """

    def __init__(
        self,
        size_id: str,
        location: str,
        requested: int = 0,
        available: int = 0,
    ) -> None:
        super().__init__(f"Insufficient stock for size {size_id} at {location}")
        self.size_id = size_id
        self.location = location
        self.requested = requested
        self.available = available


class InvariantViolationError(DomainException):
    """A ledger row would have gone negative."""
