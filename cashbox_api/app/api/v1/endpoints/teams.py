"""
Team endpoints for API v1.

Team names are unique.  Members are managed below
``/teams/{team_id}/members``; a membership always keeps at least one
role.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Path, status

from ....domain.exceptions import DomainError
from ....schemas.team import (
    TeamCreate,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberRoles,
    TeamRead,
    TeamRename,
)
from ....services.team_service import TeamService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def create_team(team: TeamCreate) -> TeamRead:
    try:
        return await TeamService.create_team(team)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[TeamRead])
async def list_teams(active: Optional[bool] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None) -> List[TeamRead]:
    return await TeamService.list_teams(active, limit, offset)


@router.get("/{team_id}", response_model=TeamRead)
async def get_team(team_id: str = Path(..., description="Team ID")) -> TeamRead:
    try:
        return await TeamService.get_team(team_id)
    except DomainError as e:
        raise http_error(e)


@router.put("/{team_id}/name", response_model=TeamRead)
async def rename_team(data: TeamRename, team_id: str = Path(..., description="Team ID")) -> TeamRead:
    """Rename a team.  The new name must differ from the current one and be unused."""
    try:
        return await TeamService.rename_team(team_id, data.name)
    except DomainError as e:
        raise http_error(e)


@router.post("/{team_id}/activate", response_model=TeamRead)
async def activate_team(team_id: str = Path(..., description="Team ID")) -> TeamRead:
    try:
        return await TeamService.set_active(team_id, True)
    except DomainError as e:
        raise http_error(e)


@router.post("/{team_id}/deactivate", response_model=TeamRead)
async def deactivate_team(team_id: str = Path(..., description="Team ID")) -> TeamRead:
    """Deactivate a team.  Returns 409 if it is already inactive."""
    try:
        return await TeamService.set_active(team_id, False)
    except DomainError as e:
        raise http_error(e)


@router.put("/{team_id}/metadata/{key}", response_model=TeamRead)
async def set_team_metadata(
    team_id: str = Path(..., description="Team ID"),
    key: str = Path(..., description="Metadata key"),
    value: Any = Body(..., embed=True),
) -> TeamRead:
    """Set one metadata entry; a ``null`` value removes it."""
    try:
        return await TeamService.set_metadata(team_id, key, value)
    except DomainError as e:
        raise http_error(e)


@router.post("/{team_id}/members", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(data: TeamMemberCreate, team_id: str = Path(..., description="Team ID")) -> TeamMemberRead:
    try:
        return await TeamService.add_member(team_id, data)
    except DomainError as e:
        raise http_error(e)


@router.get("/{team_id}/members", response_model=List[TeamMemberRead])
async def list_members(team_id: str = Path(..., description="Team ID"),
                       active_only: bool = False) -> List[TeamMemberRead]:
    try:
        return await TeamService.list_members(team_id, active_only)
    except DomainError as e:
        raise http_error(e)


@router.put("/{team_id}/members/{member_id}/roles", response_model=TeamMemberRead)
async def set_member_roles(
    data: TeamMemberRoles,
    team_id: str = Path(..., description="Team ID"),
    member_id: str = Path(..., description="Membership ID"),
) -> TeamMemberRead:
    try:
        return await TeamService.set_member_roles(team_id, member_id, data.roles)
    except DomainError as e:
        raise http_error(e)


@router.post("/{team_id}/members/{member_id}/activate", response_model=TeamMemberRead)
async def activate_member(team_id: str = Path(..., description="Team ID"),
                          member_id: str = Path(..., description="Membership ID")) -> TeamMemberRead:
    try:
        return await TeamService.set_member_active(team_id, member_id, True)
    except DomainError as e:
        raise http_error(e)


@router.post("/{team_id}/members/{member_id}/deactivate", response_model=TeamMemberRead)
async def deactivate_member(team_id: str = Path(..., description="Team ID"),
                            member_id: str = Path(..., description="Membership ID")) -> TeamMemberRead:
    try:
        return await TeamService.set_member_active(team_id, member_id, False)
    except DomainError as e:
        raise http_error(e)
