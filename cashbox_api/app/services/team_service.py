"""
Business logic for teams and team memberships.

Team state changes go through ``command_bus`` and reads through
``query_bus``; membership role management works on the repositories
directly since memberships record no events.
"""

import logging
from typing import List, Optional

from ..application.commands import (
    AddTeamMemberCommand,
    CreateTeamCommand,
    RenameTeamCommand,
    SetTeamActiveCommand,
)
from ..application.queries import GetTeamByIdQuery, ListTeamsQuery, member_to_read
from ..domain.exceptions import NotFoundError
from ..messaging.bus import command_bus, query_bus
from ..repositories import TeamRepository, TeamUserRepository
from ..schemas.team import TeamCreate, TeamMemberCreate, TeamMemberRead, TeamRead

logger = logging.getLogger(__name__)


class TeamService:
    @classmethod
    async def create_team(cls, data: TeamCreate) -> TeamRead:
        team_id = command_bus.dispatch(CreateTeamCommand(data.name, data.external_id, data.metadata))
        return query_bus.dispatch(GetTeamByIdQuery(team_id))

    @classmethod
    async def get_team(cls, team_id: str) -> TeamRead:
        return query_bus.dispatch(GetTeamByIdQuery(team_id))

    @classmethod
    async def list_teams(cls, active: Optional[bool] = None, limit: Optional[int] = None,
                         offset: Optional[int] = None) -> List[TeamRead]:
        return query_bus.dispatch(ListTeamsQuery(active, limit, offset))

    @classmethod
    async def rename_team(cls, team_id: str, name: str) -> TeamRead:
        command_bus.dispatch(RenameTeamCommand(team_id, name))
        return query_bus.dispatch(GetTeamByIdQuery(team_id))

    @classmethod
    async def set_active(cls, team_id: str, active: bool) -> TeamRead:
        command_bus.dispatch(SetTeamActiveCommand(team_id, active))
        logger.info("Team %s %s", team_id, "activated" if active else "deactivated")
        return query_bus.dispatch(GetTeamByIdQuery(team_id))

    @classmethod
    async def set_metadata(cls, team_id: str, key: str, value) -> TeamRead:
        repository = TeamRepository()
        team = repository.get(team_id)
        if value is None:
            team.remove_metadata(key)
        else:
            team.set_metadata(key, value)
        repository.save(team)
        return query_bus.dispatch(GetTeamByIdQuery(team_id))

    # -- members -----------------------------------------------------------

    @classmethod
    async def add_member(cls, team_id: str, data: TeamMemberCreate) -> TeamMemberRead:
        member_id = command_bus.dispatch(AddTeamMemberCommand(team_id, data.user_id, data.roles))
        return member_to_read(TeamUserRepository().get(member_id))

    @classmethod
    async def list_members(cls, team_id: str, active_only: bool = False) -> List[TeamMemberRead]:
        TeamRepository().get(team_id)
        return [member_to_read(m) for m in TeamUserRepository().find_by_team(team_id, active_only)]

    @classmethod
    def _membership(cls, team_id: str, member_id: str):
        repository = TeamUserRepository()
        member = repository.get(member_id)
        if member.team_id != team_id:
            raise NotFoundError("TeamUser", member_id)
        return repository, member

    @classmethod
    async def set_member_roles(cls, team_id: str, member_id: str, roles) -> TeamMemberRead:
        """Replace the roles of a membership.

        New roles are added before old ones are removed, so the
        membership never passes through an empty role list.
        """
        repository, member = cls._membership(team_id, member_id)
        for role in roles:
            member.add_role(role)
        for role in list(member.roles):
            if role not in roles:
                member.remove_role(role)
        repository.save(member)
        return member_to_read(member)

    @classmethod
    async def set_member_active(cls, team_id: str, member_id: str, active: bool) -> TeamMemberRead:
        repository, member = cls._membership(team_id, member_id)
        if active:
            member.activate()
        else:
            member.deactivate()
        repository.save(member)
        return member_to_read(member)
