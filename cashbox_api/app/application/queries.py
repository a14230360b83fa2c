"""
Read side of the team and penalty use cases.

Query handlers never modify state; they return pydantic read models
built by the ``*_to_read`` converters below, which the application
services reuse for their own responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..domain.penalty import Penalty, PenaltyType
from ..domain.team import Team, TeamUser
from ..messaging.bus import MessageBus
from ..repositories import PenaltyRepository, TeamRepository, TeamUserRepository
from ..schemas.common import MoneyRead
from ..schemas.penalty import PenaltyRead, PenaltyTypeRead
from ..schemas.team import TeamMemberRead, TeamRead


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------

def team_to_read(team: Team, member_count: int = 0) -> TeamRead:
    return TeamRead(
        id=team.id,
        name=team.name,
        external_id=team.external_id,
        active=team.active,
        metadata=team.metadata,
        member_count=member_count,
        created_at=team.created_at,
        updated_at=team.updated_at,
    )


def member_to_read(member: TeamUser) -> TeamMemberRead:
    permissions = sorted({p for role in member.roles for p in role.permissions})
    return TeamMemberRead(
        id=member.id,
        team_id=member.team_id,
        user_id=member.user_id,
        roles=member.roles,
        highest_role=member.highest_role,
        permissions=permissions,
        active=member.active,
        created_at=member.created_at,
    )


def penalty_to_read(penalty: Penalty) -> PenaltyRead:
    return PenaltyRead(
        id=penalty.id,
        team_user_id=penalty.team_user_id,
        user_id=penalty.user_id,
        team_id=penalty.team_id,
        penalty_type_id=penalty.penalty_type_id,
        reason=penalty.reason,
        money=MoneyRead.from_money(penalty.money),
        paid=penalty.is_paid,
        archived=penalty.archived,
        paid_at=penalty.paid_at,
        created_at=penalty.created_at,
        updated_at=penalty.updated_at,
    )


def penalty_type_to_read(penalty_type: PenaltyType) -> PenaltyTypeRead:
    return PenaltyTypeRead(
        id=penalty_type.id,
        name=penalty_type.name,
        type=penalty_type.type,
        description=penalty_type.description,
        label=penalty_type.type.label,
        default_amount=penalty_type.default_amount,
        is_drink=penalty_type.is_drink,
        active=penalty_type.active,
        created_at=penalty_type.created_at,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GetTeamByIdQuery:
    team_id: str


@dataclass(frozen=True)
class ListTeamsQuery:
    active: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class GetPenaltyByIdQuery:
    penalty_id: str


@dataclass(frozen=True)
class ListPenaltiesQuery:
    team_id: Optional[str] = None
    user_id: Optional[str] = None
    paid: Optional[bool] = None
    archived: Optional[bool] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class _TeamQueryHandler:
    def __init__(self, teams: Optional[TeamRepository] = None, members: Optional[TeamUserRepository] = None):
        self.teams = teams or TeamRepository()
        self.members = members or TeamUserRepository()

    def _read(self, team: Team) -> TeamRead:
        return team_to_read(team, len(self.members.find_by_team(team.id, active_only=True)))


class GetTeamByIdHandler(_TeamQueryHandler):
    def __call__(self, query: GetTeamByIdQuery) -> TeamRead:
        return self._read(self.teams.get(query.team_id))


class ListTeamsHandler(_TeamQueryHandler):
    def __call__(self, query: ListTeamsQuery) -> List[TeamRead]:
        return [self._read(t) for t in self.teams.list(query.active, query.limit, query.offset)]


class GetPenaltyByIdHandler:
    def __init__(self, penalties: Optional[PenaltyRepository] = None):
        self.penalties = penalties or PenaltyRepository()

    def __call__(self, query: GetPenaltyByIdQuery) -> PenaltyRead:
        return penalty_to_read(self.penalties.get(query.penalty_id))


class ListPenaltiesHandler:
    def __init__(self, penalties: Optional[PenaltyRepository] = None):
        self.penalties = penalties or PenaltyRepository()

    def __call__(self, query: ListPenaltiesQuery) -> List[PenaltyRead]:
        penalties = self.penalties.search(
            team_id=query.team_id,
            user_id=query.user_id,
            paid=query.paid,
            archived=query.archived,
            limit=query.limit,
            offset=query.offset,
        )
        return [penalty_to_read(p) for p in penalties]


def register_query_handlers(bus: MessageBus) -> None:
    bus.register(GetTeamByIdQuery, GetTeamByIdHandler())
    bus.register(ListTeamsQuery, ListTeamsHandler())
    bus.register(GetPenaltyByIdQuery, GetPenaltyByIdHandler())
    bus.register(ListPenaltiesQuery, ListPenaltiesHandler())
