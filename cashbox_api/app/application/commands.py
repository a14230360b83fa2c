"""
Write side of the team and penalty use cases.

Commands are plain frozen dataclasses dispatched on ``command_bus``.
Each handler loads the aggregates it needs, calls one domain operation,
saves through the repository (which releases the recorded events) and
returns the identifier of the affected aggregate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.config import settings
from ..domain.enums import CurrencyEnum, UserRoleEnum
from ..domain.exceptions import InvalidStateError, ValidationError
from ..domain.penalty import Penalty
from ..domain.team import Team, TeamUser
from ..domain.value_objects import Money
from ..messaging.bus import MessageBus
from ..repositories import (
    PenaltyRepository,
    PenaltyTypeRepository,
    TeamRepository,
    TeamUserRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CreateTeamCommand:
    name: str
    external_id: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RenameTeamCommand:
    team_id: str
    name: str


@dataclass(frozen=True)
class SetTeamActiveCommand:
    team_id: str
    active: bool


@dataclass(frozen=True)
class AddTeamMemberCommand:
    team_id: str
    user_id: str
    roles: Optional[List[UserRoleEnum]] = None


@dataclass(frozen=True)
class CreatePenaltyCommand:
    team_user_id: str
    penalty_type_id: str
    reason: str
    amount: Optional[int] = None
    currency: Optional[CurrencyEnum] = None


@dataclass(frozen=True)
class PayPenaltyCommand:
    penalty_id: str
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class ArchivePenaltyCommand:
    penalty_id: str


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class CreateTeamHandler:
    def __init__(self, teams: Optional[TeamRepository] = None):
        self.teams = teams or TeamRepository()

    def __call__(self, command: CreateTeamCommand) -> str:
        name = (command.name or "").strip()
        if name and self.teams.find_by_name(name) is not None:
            raise ValidationError.single("name", f"a team named {name!r} already exists")
        external_id = (command.external_id or "").strip()
        if external_id and self.teams.find_by_external_id(external_id) is not None:
            raise ValidationError.single("external_id", f"external id {external_id!r} is already in use")
        team = Team.create(command.name, command.external_id, command.metadata)
        self.teams.save(team)
        logger.info("Team %s created: %s", team.id, team.name)
        return team.id


class RenameTeamHandler:
    def __init__(self, teams: Optional[TeamRepository] = None):
        self.teams = teams or TeamRepository()

    def __call__(self, command: RenameTeamCommand) -> str:
        team = self.teams.get(command.team_id)
        existing = self.teams.find_by_name((command.name or "").strip())
        if existing is not None and existing.id != team.id:
            raise ValidationError.single("name", f"a team named {command.name.strip()!r} already exists")
        team.rename(command.name)
        self.teams.save(team)
        return team.id


class SetTeamActiveHandler:
    def __init__(self, teams: Optional[TeamRepository] = None):
        self.teams = teams or TeamRepository()

    def __call__(self, command: SetTeamActiveCommand) -> str:
        team = self.teams.get(command.team_id)
        if command.active:
            team.activate()
        else:
            team.deactivate()
        self.teams.save(team)
        return team.id


class AddTeamMemberHandler:
    def __init__(self, teams: Optional[TeamRepository] = None, members: Optional[TeamUserRepository] = None,
                 users: Optional[UserRepository] = None):
        self.teams = teams or TeamRepository()
        self.members = members or TeamUserRepository()
        self.users = users or UserRepository()

    def __call__(self, command: AddTeamMemberCommand) -> str:
        team = self.teams.get(command.team_id)
        self.users.get(command.user_id)
        if self.members.find_membership(team.id, command.user_id) is not None:
            raise InvalidStateError(f"user {command.user_id} is already a member of team {team.id}")
        member = TeamUser.create(team, command.user_id, command.roles)
        self.members.save(member)
        logger.info("User %s joined team %s", member.user_id, team.id)
        return member.id


class CreatePenaltyHandler:
    def __init__(self, penalties: Optional[PenaltyRepository] = None,
                 penalty_types: Optional[PenaltyTypeRepository] = None,
                 members: Optional[TeamUserRepository] = None,
                 default_currency: Optional[CurrencyEnum] = None):
        self.penalties = penalties or PenaltyRepository()
        self.penalty_types = penalty_types or PenaltyTypeRepository()
        self.members = members or TeamUserRepository()
        self.default_currency = default_currency

    def __call__(self, command: CreatePenaltyCommand) -> str:
        member = self.members.get(command.team_user_id)
        if not member.active:
            raise InvalidStateError(f"team membership {member.id} is inactive")
        penalty_type = self.penalty_types.get(command.penalty_type_id)
        if not penalty_type.active:
            raise InvalidStateError(f"penalty type {penalty_type.id} is inactive")
        currency = command.currency or self.default_currency or _configured_currency()
        if command.amount is None:
            money = penalty_type.default_money(currency)
        else:
            money = Money(command.amount, currency)
        penalty = Penalty.create(member, penalty_type, command.reason, money)
        self.penalties.save(penalty)
        logger.info("Penalty %s (%s) charged to user %s", penalty.id, money.format(), penalty.user_id)
        return penalty.id


class PayPenaltyHandler:
    def __init__(self, penalties: Optional[PenaltyRepository] = None):
        self.penalties = penalties or PenaltyRepository()

    def __call__(self, command: PayPenaltyCommand) -> str:
        penalty = self.penalties.get(command.penalty_id)
        penalty.pay(command.paid_at)
        self.penalties.save(penalty)
        return penalty.id


class ArchivePenaltyHandler:
    def __init__(self, penalties: Optional[PenaltyRepository] = None):
        self.penalties = penalties or PenaltyRepository()

    def __call__(self, command: ArchivePenaltyCommand) -> str:
        penalty = self.penalties.get(command.penalty_id)
        penalty.archive()
        self.penalties.save(penalty)
        return penalty.id


def _configured_currency() -> CurrencyEnum:
    return CurrencyEnum(settings.default_currency)


def register_command_handlers(bus: MessageBus) -> None:
    bus.register(CreateTeamCommand, CreateTeamHandler())
    bus.register(RenameTeamCommand, RenameTeamHandler())
    bus.register(SetTeamActiveCommand, SetTeamActiveHandler())
    bus.register(AddTeamMemberCommand, AddTeamMemberHandler())
    bus.register(CreatePenaltyCommand, CreatePenaltyHandler())
    bus.register(PayPenaltyCommand, PayPenaltyHandler())
    bus.register(ArchivePenaltyCommand, ArchivePenaltyHandler())
