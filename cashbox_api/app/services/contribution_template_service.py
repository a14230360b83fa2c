"""
Business logic for contribution templates.

A template stores the amount, currency, recurrence and payment window a
team uses for a recurring kind of due.  Applying it to a list of
memberships issues one contribution per member in a single call.
"""

import logging
from typing import List, Optional

from ..core.config import settings
from ..domain.contribution import ContributionTemplate, ContributionType
from ..domain.enums import CurrencyEnum
from ..domain.exceptions import InvalidStateError, ValidationError
from ..domain.ids import utc_now
from ..domain.team import TeamUser
from ..domain.value_objects import Money
from ..repositories import (
    ContributionRepository,
    ContributionTemplateRepository,
    ContributionTypeRepository,
    TeamRepository,
    TeamUserRepository,
)
from ..schemas.common import MoneyRead
from ..schemas.contribution import (
    ContributionTemplateApplied,
    ContributionTemplateApply,
    ContributionTemplateCreate,
    ContributionTemplateRead,
    ContributionTemplateUpdate,
)
from .contribution_service import contribution_to_read

logger = logging.getLogger(__name__)


def template_to_read(template: ContributionTemplate) -> ContributionTemplateRead:
    return ContributionTemplateRead(
        id=template.id,
        team_id=template.team_id,
        name=template.name,
        description=template.description,
        money=MoneyRead.from_money(template.money),
        recurring=template.recurring,
        recurrence_pattern=template.recurrence_pattern,
        due_days=template.due_days,
        active=template.active,
        created_at=template.created_at,
        updated_at=template.updated_at,
    )


class ContributionTemplateService:
    @classmethod
    async def create(cls, data: ContributionTemplateCreate) -> ContributionTemplateRead:
        team = TeamRepository().get(data.team_id)
        currency = data.currency or CurrencyEnum(settings.default_currency)
        template = ContributionTemplate.create(
            team,
            data.name,
            Money(data.amount, currency),
            data.description,
            data.recurring,
            data.recurrence_pattern,
            data.due_days,
        )
        ContributionTemplateRepository().save(template)
        logger.info("Contribution template %s created for team %s", template.id, team.id)
        return template_to_read(template)

    @classmethod
    async def get(cls, template_id: str) -> ContributionTemplateRead:
        return template_to_read(ContributionTemplateRepository().get(template_id))

    @classmethod
    async def list(cls, team_id: Optional[str] = None, active: Optional[bool] = None) -> List[ContributionTemplateRead]:
        """Templates, newest first, optionally for one team and by state."""
        if team_id:
            TeamRepository().get(team_id)
        return [template_to_read(t) for t in ContributionTemplateRepository().search(team_id, active)]

    @classmethod
    async def update(cls, template_id: str, data: ContributionTemplateUpdate) -> ContributionTemplateRead:
        """Apply a partial update; an explicit ``null`` clears an optional field."""
        repository = ContributionTemplateRepository()
        template = repository.get(template_id)
        given = data.model_fields_set
        currency = data.currency or template.money.currency
        amount = data.amount if data.amount is not None else template.money.amount
        template.update(
            name=data.name if data.name is not None else template.name,
            money=Money(amount, currency),
            description=data.description if "description" in given else template.description,
            recurring=data.recurring if data.recurring is not None else template.recurring,
            recurrence_pattern=(
                data.recurrence_pattern if "recurrence_pattern" in given else template.recurrence_pattern
            ),
            due_days=data.due_days if "due_days" in given else template.due_days,
        )
        repository.save(template)
        return template_to_read(template)

    @classmethod
    async def duplicate(cls, template_id: str, new_name: str) -> ContributionTemplateRead:
        repository = ContributionTemplateRepository()
        copy = repository.get(template_id).duplicate(new_name)
        repository.save(copy)
        logger.info("Contribution template %s duplicated as %s", template_id, copy.id)
        return template_to_read(copy)

    @classmethod
    async def deactivate(cls, template_id: str) -> None:
        repository = ContributionTemplateRepository()
        template = repository.get(template_id)
        template.deactivate()
        repository.save(template)

    @classmethod
    async def apply(cls, template_id: str, data: ContributionTemplateApply) -> ContributionTemplateApplied:
        """Issue the template's contribution to every listed membership.

        Unknown membership ids are skipped, as are members of other teams
        and inactive memberships.  Without ``contribution_type_id`` a
        one-off type named after the template is created.

        Raises
        ------
        NotFoundError
            If the template or the given contribution type is unknown.
        InvalidStateError
            If the template is inactive.
        ValidationError
            If no membership ids are given or no due date can be derived.
        """
        templates = ContributionTemplateRepository()
        template = templates.get(template_id)
        if not data.team_user_ids:
            raise ValidationError.single("team_user_ids", "at least one membership id is required")
        due_date = data.due_date or template.due_date_from(utc_now().date())
        if due_date is None:
            raise ValidationError.single("due_date", "due date is required when the template has no due days")
        if not template.active:
            raise InvalidStateError(f"contribution template {template.id} is inactive")

        types = ContributionTypeRepository()
        if data.contribution_type_id:
            contribution_type = types.get(data.contribution_type_id)
        else:
            contribution_type = ContributionType.create(
                template.name, template.description, template.recurring, template.recurrence_pattern
            )
            types.save(contribution_type)

        members: List[TeamUser] = []
        memberships = TeamUserRepository()
        for team_user_id in data.team_user_ids:
            member = memberships.find(team_user_id)
            if member is None:
                logger.warning("Skipping unknown membership %s for template %s", team_user_id, template.id)
                continue
            members.append(member)

        contributions = template.apply_to(members, contribution_type, due_date, data.amount, data.description)
        repository = ContributionRepository()
        for contribution in contributions:
            repository.save(contribution)
        templates.save(template)
        logger.info("Template %s applied to %d member(s)", template.id, len(contributions))
        return ContributionTemplateApplied(
            template=template_to_read(template),
            contributions=[contribution_to_read(c) for c in contributions],
            count=len(contributions),
        )
