"""
Penalty aggregate and its catalogue of penalty types.

A penalty moves through two independent flags:

    Unpaid+Active --pay--> Paid+Active --archive--> Paid+Archived
    Unpaid+Active --archive--> Unpaid+Archived

Archiving is one-way.  Both transitions are guarded and raise before
touching any state when they have already happened.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from .enums import CurrencyEnum, PenaltyTypeEnum
from .event_journal import EventJournal
from .events import DomainEvent, PenaltyArchived, PenaltyCreated, PenaltyPaid
from .exceptions import AlreadyArchivedError, AlreadyPaidError, InvalidStateError
from .ids import ensure_utc, new_id, utc_now
from .validation import Violations
from .value_objects import Money

if TYPE_CHECKING:
    from .team import TeamUser


class PenaltyType:
    """Catalogue entry describing a kind of penalty and its default amount."""

    def __init__(
        self,
        id: str,
        name: str,
        type: PenaltyTypeEnum,
        default_amount: int,
        description: Optional[str] = None,
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.type = PenaltyTypeEnum(type)
        self.default_amount = default_amount
        self.description = description
        self.active = active
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(
        cls,
        name: str,
        type: PenaltyTypeEnum,
        description: Optional[str] = None,
        default_amount: Optional[int] = None,
    ) -> "PenaltyType":
        violations = Violations()
        violations.require_text("name", name)
        if default_amount is not None:
            violations.check(default_amount >= 0, "default_amount", "default amount cannot be negative")
        violations.raise_if_any()
        type = PenaltyTypeEnum(type)
        amount = type.default_amount if default_amount is None else default_amount
        return cls(new_id(), name.strip(), type, amount, description)

    @property
    def is_drink(self) -> bool:
        return self.type.is_drink

    def default_money(self, currency: CurrencyEnum = CurrencyEnum.EUR) -> Money:
        return Money(self.default_amount, currency)

    def update(self, name: Optional[str] = None, description: Optional[str] = None,
               default_amount: Optional[int] = None) -> None:
        violations = Violations()
        if name is not None:
            violations.require_text("name", name)
        if default_amount is not None:
            violations.check(default_amount >= 0, "default_amount", "default amount cannot be negative")
        violations.raise_if_any()
        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if default_amount is not None:
            self.default_amount = default_amount
        self.updated_at = utc_now()

    def activate(self) -> None:
        if self.active:
            raise InvalidStateError(f"penalty type {self.id} is already active")
        self.active = True
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        if not self.active:
            raise InvalidStateError(f"penalty type {self.id} is already inactive")
        self.active = False
        self.updated_at = utc_now()


class Penalty:
    """A monetary penalty charged to one team membership."""

    def __init__(
        self,
        id: str,
        team_user_id: str,
        user_id: str,
        team_id: str,
        penalty_type_id: str,
        reason: str,
        money: Money,
        archived: bool = False,
        paid_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.team_user_id = team_user_id
        self.user_id = user_id
        self.team_id = team_id
        self.penalty_type_id = penalty_type_id
        self.reason = reason
        self.money = money
        self.archived = archived
        self.paid_at = ensure_utc(paid_at)
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @classmethod
    def create(cls, team_user: "TeamUser", type: PenaltyType, reason: str, money: Money) -> "Penalty":
        """Validate and build a new unpaid penalty, recording ``PenaltyCreated``.

        Raises
        ------
        ValidationError
            If ``reason`` is blank or ``money`` is not a ``Money`` value.
        """
        violations = Violations()
        violations.require_text("reason", reason, "reason cannot be empty")
        violations.check(isinstance(money, Money), "money", "money must be a Money value")
        violations.raise_if_any()

        penalty = cls(
            id=new_id(),
            team_user_id=team_user.id,
            user_id=team_user.user_id,
            team_id=team_user.team_id,
            penalty_type_id=type.id,
            reason=reason.strip(),
            money=money,
        )
        penalty._journal.record(PenaltyCreated(
            penalty_id=penalty.id,
            user_id=penalty.user_id,
            team_id=penalty.team_id,
            reason=penalty.reason,
            money=money,
        ))
        return penalty

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None

    @property
    def formatted_amount(self) -> str:
        return self.money.format()

    def pay(self, paid_at: Optional[datetime] = None) -> None:
        if self.is_paid:
            raise AlreadyPaidError(f"penalty {self.id} is already paid")
        self.paid_at = ensure_utc(paid_at) or utc_now()
        self.updated_at = utc_now()
        self._journal.record(PenaltyPaid(penalty_id=self.id, paid_at=self.paid_at))

    def archive(self) -> None:
        if self.archived:
            raise AlreadyArchivedError(f"penalty {self.id} is already archived")
        self.archived = True
        self.updated_at = utc_now()
        self._journal.record(PenaltyArchived(penalty_id=self.id))

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()
