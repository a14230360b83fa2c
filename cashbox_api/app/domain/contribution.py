"""Contributions (membership fees and similar dues), their types, team
templates for issuing them in bulk and the payments recorded against them."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Iterable, List, Optional

from .enums import PaymentTypeEnum, RecurrencePatternEnum
from .event_journal import EventJournal
from .events import (
    ContributionCreated,
    ContributionPaid,
    ContributionPaymentRecorded,
    ContributionTemplateApplied,
    ContributionTemplateCreated,
    DomainEvent,
)
from .exceptions import InvalidStateError
from .ids import ensure_utc, new_id, utc_now
from .validation import Violations
from .value_objects import Money

if TYPE_CHECKING:
    from .team import Team, TeamUser


class ContributionType:
    def __init__(
        self,
        id: str,
        name: str,
        description: Optional[str] = None,
        recurring: bool = False,
        recurrence_pattern: Optional[RecurrencePatternEnum] = None,
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.description = description
        self.recurring = recurring
        self.recurrence_pattern = RecurrencePatternEnum(recurrence_pattern) if recurrence_pattern else None
        self.active = active
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(
        cls,
        name: str,
        description: Optional[str] = None,
        recurring: bool = False,
        recurrence_pattern: Optional[RecurrencePatternEnum] = None,
    ) -> "ContributionType":
        violations = Violations()
        violations.require_text("name", name)
        if recurring:
            violations.check(
                recurrence_pattern is not None,
                "recurrence_pattern",
                "recurring contribution types need a recurrence pattern",
            )
        violations.raise_if_any()
        return cls(new_id(), name.strip(), description, recurring, recurrence_pattern if recurring else None)

    def next_due_date(self, base: date) -> Optional[date]:
        if not self.recurring or self.recurrence_pattern is None:
            return None
        return self.recurrence_pattern.next_date(base)


class Contribution:
    def __init__(
        self,
        id: str,
        team_user_id: str,
        user_id: str,
        team_id: str,
        contribution_type_id: str,
        description: str,
        money: Money,
        due_date: date,
        paid_at: Optional[datetime] = None,
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.team_user_id = team_user_id
        self.user_id = user_id
        self.team_id = team_id
        self.contribution_type_id = contribution_type_id
        self.description = description
        self.money = money
        self.due_date = due_date
        self.paid_at = ensure_utc(paid_at)
        self.active = active
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @classmethod
    def create(
        cls,
        team_user: "TeamUser",
        type: ContributionType,
        description: str,
        money: Money,
        due_date: date,
    ) -> "Contribution":
        violations = Violations()
        violations.require_text("description", description)
        violations.check(money.amount > 0, "amount", "contribution amount must be positive")
        violations.raise_if_any()

        contribution = cls(
            new_id(),
            team_user.id,
            team_user.user_id,
            team_user.team_id,
            type.id,
            description.strip(),
            money,
            due_date,
        )
        contribution._journal.record(ContributionCreated(
            contribution_id=contribution.id,
            user_id=contribution.user_id,
            team_id=contribution.team_id,
            money=money,
        ))
        return contribution

    @property
    def is_paid(self) -> bool:
        return self.paid_at is not None

    def is_overdue(self, today: Optional[date] = None) -> bool:
        today = today or utc_now().date()
        return not self.is_paid and self.active and self.due_date < today

    def pay(self, paid_at: Optional[datetime] = None) -> None:
        if self.is_paid:
            raise InvalidStateError(f"contribution {self.id} is already paid")
        self.paid_at = ensure_utc(paid_at) or utc_now()
        self.updated_at = utc_now()
        self._journal.record(ContributionPaid(
            contribution_id=self.id,
            user_id=self.user_id,
            paid_at=self.paid_at,
        ))

    def deactivate(self) -> None:
        self.active = False
        self.updated_at = utc_now()

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()


def _check_template(violations: Violations, name: str, money: Money, recurring: bool,
                    recurrence_pattern: Optional[RecurrencePatternEnum], due_days: Optional[int]) -> None:
    violations.require_text("name", name, "template name cannot be empty")
    violations.check(money.amount > 0, "amount", "template amount must be positive")
    if due_days is not None:
        violations.check(due_days >= 0, "due_days", "due days cannot be negative")
    if recurring:
        violations.check(
            recurrence_pattern is not None,
            "recurrence_pattern",
            "recurring templates need a recurrence pattern",
        )


class ContributionTemplate:
    """A team's preset for issuing the same contribution to many members."""

    def __init__(
        self,
        id: str,
        team_id: str,
        name: str,
        money: Money,
        description: Optional[str] = None,
        recurring: bool = False,
        recurrence_pattern: Optional[RecurrencePatternEnum] = None,
        due_days: Optional[int] = None,
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.team_id = team_id
        self.name = name
        self.money = money
        self.description = description
        self.recurring = recurring
        self.recurrence_pattern = RecurrencePatternEnum(recurrence_pattern) if recurrence_pattern else None
        self.due_days = due_days
        self.active = active
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @classmethod
    def create(
        cls,
        team: "Team",
        name: str,
        money: Money,
        description: Optional[str] = None,
        recurring: bool = False,
        recurrence_pattern: Optional[RecurrencePatternEnum] = None,
        due_days: Optional[int] = None,
    ) -> "ContributionTemplate":
        if not team.active:
            raise InvalidStateError(f"cannot create templates for inactive team {team.id}")
        violations = Violations()
        _check_template(violations, name, money, recurring, recurrence_pattern, due_days)
        violations.raise_if_any()
        template = cls(
            new_id(),
            team.id,
            name.strip(),
            money,
            description,
            recurring,
            recurrence_pattern if recurring else None,
            due_days,
        )
        template._record_created()
        return template

    def _record_created(self) -> None:
        self._journal.record(ContributionTemplateCreated(
            template_id=self.id,
            team_id=self.team_id,
            template_name=self.name,
            money=self.money,
        ))

    def update(
        self,
        name: str,
        money: Money,
        description: Optional[str] = None,
        recurring: bool = False,
        recurrence_pattern: Optional[RecurrencePatternEnum] = None,
        due_days: Optional[int] = None,
    ) -> None:
        violations = Violations()
        _check_template(violations, name, money, recurring, recurrence_pattern, due_days)
        violations.raise_if_any()
        self.name = name.strip()
        self.money = money
        self.description = description
        self.recurring = recurring
        self.recurrence_pattern = RecurrencePatternEnum(recurrence_pattern) if recurring else None
        self.due_days = due_days
        self.updated_at = utc_now()

    def duplicate(self, new_name: str) -> "ContributionTemplate":
        violations = Violations()
        _check_template(violations, new_name, self.money, self.recurring, self.recurrence_pattern, self.due_days)
        violations.raise_if_any()
        copy = ContributionTemplate(
            new_id(),
            self.team_id,
            new_name.strip(),
            self.money,
            self.description,
            self.recurring,
            self.recurrence_pattern,
            self.due_days,
        )
        copy._record_created()
        return copy

    def deactivate(self) -> None:
        if not self.active:
            raise InvalidStateError(f"contribution template {self.id} is already inactive")
        self.active = False
        self.updated_at = utc_now()

    def due_date_from(self, today: date) -> Optional[date]:
        if self.due_days is None:
            return None
        return today + timedelta(days=self.due_days)

    def apply_to(
        self,
        members: Iterable["TeamUser"],
        contribution_type: ContributionType,
        due_date: date,
        amount: Optional[int] = None,
        description: Optional[str] = None,
    ) -> List[Contribution]:
        """Issue one contribution per eligible member.

        Members of other teams and inactive memberships are skipped.
        ``amount`` replaces the template amount, in the template currency.
        Records ``ContributionTemplateApplied`` with the number created.

        Raises
        ------
        InvalidStateError
            If the template is inactive.
        ValidationError
            If ``amount`` or the description is invalid.
        """
        if not self.active:
            raise InvalidStateError(f"contribution template {self.id} is inactive")
        money = Money(amount, self.money.currency) if amount is not None else self.money
        text = description if description is not None else self.name
        contributions = [
            Contribution.create(member, contribution_type, text, money, due_date)
            for member in members
            if member.team_id == self.team_id and member.active
        ]
        self._journal.record(ContributionTemplateApplied(
            template_id=self.id,
            team_id=self.team_id,
            applied_count=len(contributions),
        ))
        return contributions

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()


class ContributionPayment:
    """A payment, possibly partial, recorded against one contribution."""

    def __init__(
        self,
        id: str,
        contribution_id: str,
        user_id: str,
        money: Money,
        payment_method: Optional[PaymentTypeEnum] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.contribution_id = contribution_id
        self.user_id = user_id
        self.money = money
        self.payment_method = PaymentTypeEnum(payment_method) if payment_method else None
        self.reference = reference
        self.notes = notes
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @staticmethod
    def _check_details(violations: Violations, payment_method: Optional[PaymentTypeEnum],
                       reference: Optional[str], notes: Optional[str]) -> None:
        if payment_method is not None and payment_method.requires_reference:
            violations.require_text("reference", reference, f"{payment_method.label} payments require a reference")
        violations.check(reference is None or len(reference) <= 255, "reference", "reference is too long")
        violations.check(notes is None or len(notes) <= 1000, "notes", "notes are too long")

    @classmethod
    def create(
        cls,
        contribution: Contribution,
        money: Money,
        payment_method: Optional[PaymentTypeEnum] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> "ContributionPayment":
        if not contribution.active:
            raise InvalidStateError(f"contribution {contribution.id} is inactive")
        if contribution.is_paid:
            raise InvalidStateError(f"contribution {contribution.id} is already paid")
        payment_method = PaymentTypeEnum(payment_method) if payment_method else None
        violations = Violations()
        violations.check(money.amount > 0, "amount", "payment amount must be positive")
        violations.check(
            money.currency == contribution.money.currency,
            "currency",
            f"payment currency must be {contribution.money.currency.value}",
        )
        cls._check_details(violations, payment_method, reference, notes)
        violations.raise_if_any()

        payment = cls(
            new_id(),
            contribution.id,
            contribution.user_id,
            money,
            payment_method,
            (reference.strip() or None) if reference else None,
            notes,
        )
        payment._journal.record(ContributionPaymentRecorded(
            payment_id=payment.id,
            contribution_id=contribution.id,
            user_id=contribution.user_id,
            money=money,
        ))
        return payment

    def update(
        self,
        payment_method: Optional[PaymentTypeEnum] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> None:
        payment_method = PaymentTypeEnum(payment_method) if payment_method else None
        violations = Violations()
        self._check_details(violations, payment_method, reference, notes)
        violations.raise_if_any()
        self.payment_method = payment_method
        self.reference = (reference.strip() or None) if reference else None
        self.notes = notes
        self.updated_at = utc_now()

    def is_partial_for(self, contribution: Contribution) -> bool:
        return self.money.amount < contribution.money.amount

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()
