"""
Domain error taxonomy.

Every rule violation in the domain layer raises one of the classes
below before any state is mutated.  The HTTP layer translates them into
status codes; the domain itself never retries or swallows them.

``ValidationError`` carries the full list of ``(field, message)`` pairs
collected by the validators in :mod:`.validation`, so callers can report
every problem at once instead of only the first.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple


class DomainError(Exception):
    """Base class for all domain rule violations."""


class ValidationError(DomainError):
    """Input failed one or more validation rules.

    Parameters
    ----------
    errors : iterable of (field, message)
        The collected violations.  At least one is expected.
    """

    def __init__(self, errors: Iterable[Tuple[str, str]]):
        self.errors: List[Tuple[str, str]] = list(errors)
        summary = "; ".join(f"{field}: {message}" for field, message in self.errors)
        super().__init__(summary or "validation failed")

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([(field, message)])

    def as_dict(self) -> List[dict]:
        return [{"field": field, "message": message} for field, message in self.errors]


class InvalidStateError(DomainError):
    """Operation is not allowed in the aggregate's current state."""


class AlreadyPaidError(InvalidStateError):
    """Penalty has already been paid."""


class AlreadyArchivedError(InvalidStateError):
    """Penalty has already been archived."""


class CurrencyMismatchError(DomainError):
    """Arithmetic between amounts of different currencies."""


class NegativeAmountError(ValidationError):
    """A monetary amount would drop below zero."""

    def __init__(self, message: str):
        super().__init__([("amount", message)])


class NotFoundError(DomainError):
    """Raised by repositories when an identifier does not resolve."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
