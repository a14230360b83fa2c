"""Pydantic models for teams and team memberships."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..domain.enums import UserRoleEnum


class TeamBase(BaseModel):
    name: str = Field(..., examples=["FC Kneipe 1. Herren"])
    external_id: str = Field(..., examples=["fck-1"], description="Identifier in the club's own system")


class TeamCreate(TeamBase):
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TeamRename(BaseModel):
    name: str = Field(..., examples=["FC Kneipe 2. Herren"])


class TeamRead(TeamBase):
    id: str
    active: bool
    metadata: Dict[str, Any] = {}
    member_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class TeamMemberCreate(BaseModel):
    user_id: str
    roles: Optional[List[UserRoleEnum]] = Field(None, examples=[["member"]])


class TeamMemberRoles(BaseModel):
    roles: List[UserRoleEnum] = Field(..., min_length=1, examples=[["member", "treasurer"]])


class TeamMemberRead(BaseModel):
    id: str
    team_id: str
    user_id: str
    roles: List[UserRoleEnum]
    highest_role: UserRoleEnum
    permissions: List[str]
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
