"""
Business logic for contributions.

``ContributionService`` covers one-off dues and their payment;
``RecurringContributionService`` creates the next instalment of every
recurring contribution type for every active team member.  The
recurring run is meant to be triggered once a day, either through
``POST /contributions/recurring/run`` or from a scheduler.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from ..core.config import settings
from ..domain.contribution import Contribution, ContributionType
from ..domain.enums import CurrencyEnum
from ..domain.exceptions import InvalidStateError
from ..domain.ids import utc_now
from ..domain.team import TeamUser
from ..domain.value_objects import Money
from ..repositories import (
    ContributionRepository,
    ContributionTypeRepository,
    TeamRepository,
    TeamUserRepository,
)
from ..schemas.common import MoneyRead
from ..schemas.contribution import (
    ContributionCreate,
    ContributionRead,
    ContributionTypeCreate,
    ContributionTypeRead,
)

logger = logging.getLogger(__name__)


def contribution_type_to_read(contribution_type: ContributionType) -> ContributionTypeRead:
    return ContributionTypeRead(
        id=contribution_type.id,
        name=contribution_type.name,
        description=contribution_type.description,
        recurring=contribution_type.recurring,
        recurrence_pattern=contribution_type.recurrence_pattern,
        active=contribution_type.active,
        created_at=contribution_type.created_at,
    )


def contribution_to_read(contribution: Contribution, today: Optional[date] = None) -> ContributionRead:
    return ContributionRead(
        id=contribution.id,
        team_user_id=contribution.team_user_id,
        user_id=contribution.user_id,
        team_id=contribution.team_id,
        contribution_type_id=contribution.contribution_type_id,
        description=contribution.description,
        money=MoneyRead.from_money(contribution.money),
        due_date=contribution.due_date,
        paid=contribution.is_paid,
        overdue=contribution.is_overdue(today),
        paid_at=contribution.paid_at,
        active=contribution.active,
        created_at=contribution.created_at,
    )


class ContributionService:
    # -- types -------------------------------------------------------------

    @classmethod
    async def create_type(cls, data: ContributionTypeCreate) -> ContributionTypeRead:
        contribution_type = ContributionType.create(
            data.name, data.description, data.recurring, data.recurrence_pattern
        )
        ContributionTypeRepository().save(contribution_type)
        return contribution_type_to_read(contribution_type)

    @classmethod
    async def get_type(cls, type_id: str) -> ContributionTypeRead:
        return contribution_type_to_read(ContributionTypeRepository().get(type_id))

    @classmethod
    async def list_types(cls) -> List[ContributionTypeRead]:
        return [contribution_type_to_read(t) for t in ContributionTypeRepository().all()]

    # -- contributions -----------------------------------------------------

    @classmethod
    async def create_contribution(cls, data: ContributionCreate) -> ContributionRead:
        member = TeamUserRepository().get(data.team_user_id)
        if not member.active:
            raise InvalidStateError(f"team membership {member.id} is inactive")
        contribution_type = ContributionTypeRepository().get(data.contribution_type_id)
        currency = data.currency or CurrencyEnum(settings.default_currency)
        contribution = Contribution.create(
            member, contribution_type, data.description, Money(data.amount, currency), data.due_date
        )
        ContributionRepository().save(contribution)
        return contribution_to_read(contribution)

    @classmethod
    async def get_contribution(cls, contribution_id: str) -> ContributionRead:
        return contribution_to_read(ContributionRepository().get(contribution_id))

    @classmethod
    async def list_contributions(
        cls,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        paid: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ContributionRead]:
        contributions = ContributionRepository().search(team_id, user_id, paid, limit=limit, offset=offset)
        return [contribution_to_read(c) for c in contributions]

    @classmethod
    async def pay_contribution(cls, contribution_id: str, paid_at: Optional[datetime] = None) -> ContributionRead:
        repository = ContributionRepository()
        contribution = repository.get(contribution_id)
        contribution.pay(paid_at)
        repository.save(contribution)
        logger.info("Contribution %s paid", contribution.id)
        return contribution_to_read(contribution)

    @classmethod
    async def deactivate_contribution(cls, contribution_id: str) -> None:
        repository = ContributionRepository()
        contribution = repository.get(contribution_id)
        contribution.deactivate()
        repository.save(contribution)

    @classmethod
    async def outstanding_for_member(cls, team_user_id: str) -> List[ContributionRead]:
        member = TeamUserRepository().get(team_user_id)
        contributions = ContributionRepository().search(team_id=member.team_id, user_id=member.user_id, paid=False)
        return [contribution_to_read(c) for c in contributions]

    @classmethod
    async def overdue(cls, today: Optional[date] = None, team_id: Optional[str] = None) -> List[ContributionRead]:
        today = today or utc_now().date()
        contributions = ContributionRepository().search(team_id=team_id, paid=False, due_before=today)
        return [contribution_to_read(c, today) for c in contributions]

    @classmethod
    async def total_outstanding(
        cls,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        currency: Optional[CurrencyEnum] = None,
    ) -> MoneyRead:
        """Sum of unpaid contributions in one currency (the configured default if omitted)."""
        currency = CurrencyEnum(currency or settings.default_currency)
        unpaid = ContributionRepository().search(team_id, user_id, paid=False)
        total = Money.total((c.money for c in unpaid if c.money.currency == currency), currency)
        return MoneyRead.from_money(total)


class RecurringContributionService:
    """Creates due instalments of recurring contribution types."""

    def __init__(
        self,
        types: Optional[ContributionTypeRepository] = None,
        contributions: Optional[ContributionRepository] = None,
        members: Optional[TeamUserRepository] = None,
        teams: Optional[TeamRepository] = None,
    ):
        self.types = types or ContributionTypeRepository()
        self.contributions = contributions or ContributionRepository()
        self.members = members or TeamUserRepository()
        self.teams = teams or TeamRepository()

    def process_recurring(self, now: Optional[datetime] = None) -> int:
        """Create the next contribution wherever one is due; returns how many were created.

        A member gets a contribution of a recurring type when they have
        none yet (due one interval after ``now``) or when the interval
        after their latest one has been reached.  The amount is copied
        from the latest contribution, falling back to
        ``settings.recurring_contribution_amount``.
        """
        today = (now or utc_now()).date()
        members = self._active_members()
        created = 0
        for contribution_type in self.types.find_active_recurring():
            for member in members:
                if self._process_member(contribution_type, member, today):
                    created += 1
        logger.info("Recurring contribution run for %s created %d contribution(s)", today.isoformat(), created)
        return created

    def _active_members(self) -> List[TeamUser]:
        active_teams = {t.id for t in self.teams.list(active=True)}
        return [m for m in self.members.all() if m.active and m.team_id in active_teams]

    def _process_member(self, contribution_type: ContributionType, member: TeamUser, today: date) -> bool:
        latest = self.contributions.find_latest_for(member.id, contribution_type.id)
        if latest is None:
            due_date = contribution_type.next_due_date(today)
            money = Money(settings.recurring_contribution_amount, CurrencyEnum(settings.default_currency))
        else:
            due_date = contribution_type.next_due_date(latest.due_date)
            if due_date is None or due_date > today:
                return False
            money = latest.money
        if due_date is None:
            return False
        description = f"Recurring {contribution_type.name} for {due_date.strftime('%B %Y')}"
        self.contributions.save(Contribution.create(member, contribution_type, description, money, due_date))
        return True

    @classmethod
    async def run(cls, now: Optional[datetime] = None) -> int:
        return cls().process_recurring(now)
