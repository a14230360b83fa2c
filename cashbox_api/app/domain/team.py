"""Team aggregate and team membership."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .enums import UserRoleEnum
from .event_journal import EventJournal
from .events import DomainEvent, TeamActivated, TeamCreated, TeamDeactivated, TeamRenamed
from .exceptions import InvalidStateError, ValidationError
from .ids import new_id, utc_now
from .validation import Violations


class Team:
    def __init__(
        self,
        id: str,
        name: str,
        external_id: str,
        active: bool = True,
        metadata: Optional[Dict[str, Any]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.name = name
        self.external_id = external_id
        self.active = active
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @classmethod
    def create(cls, name: str, external_id: str, metadata: Optional[Dict[str, Any]] = None) -> "Team":
        violations = Violations()
        violations.require_text("name", name, "team name cannot be empty")
        violations.require_text("external_id", external_id, "external id cannot be empty")
        violations.raise_if_any()

        team = cls(new_id(), name.strip(), external_id.strip(), metadata=metadata)
        team._journal.record(TeamCreated(team_id=team.id, team_name=team.name, external_id=team.external_id))
        return team

    def rename(self, new_name: str) -> None:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError.single("name", "team name cannot be empty")
        if new_name == self.name:
            raise ValidationError.single("name", "new name must differ from the current name")
        old_name = self.name
        self.name = new_name
        self.updated_at = utc_now()
        self._journal.record(TeamRenamed(team_id=self.id, old_name=old_name, new_name=new_name))

    def deactivate(self) -> None:
        if not self.active:
            raise InvalidStateError(f"team {self.id} is already inactive")
        self.active = False
        self.updated_at = utc_now()
        self._journal.record(TeamDeactivated(team_id=self.id))

    def activate(self) -> None:
        if self.active:
            raise InvalidStateError(f"team {self.id} is already active")
        self.active = True
        self.updated_at = utc_now()
        self._journal.record(TeamActivated(team_id=self.id))

    def set_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value
        self.updated_at = utc_now()

    def remove_metadata(self, key: str) -> None:
        if self.metadata.pop(key, None) is not None:
            self.updated_at = utc_now()

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()


class TeamUser:
    """Membership of one user in one team, with the roles held there."""

    def __init__(
        self,
        id: str,
        team_id: str,
        user_id: str,
        roles: Optional[Iterable[UserRoleEnum]] = None,
        active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.team_id = team_id
        self.user_id = user_id
        self.roles: List[UserRoleEnum] = [UserRoleEnum(role) for role in (roles or [UserRoleEnum.MEMBER])]
        self.active = active
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at

    @classmethod
    def create(cls, team: Team, user_id: str, roles: Optional[Iterable[UserRoleEnum]] = None) -> "TeamUser":
        if not team.active:
            raise InvalidStateError(f"cannot add members to inactive team {team.id}")
        return cls(new_id(), team.id, user_id, roles)

    def has_role(self, role: UserRoleEnum) -> bool:
        return UserRoleEnum(role) in self.roles

    def add_role(self, role: UserRoleEnum) -> None:
        role = UserRoleEnum(role)
        if role not in self.roles:
            self.roles.append(role)
            self.updated_at = utc_now()

    def remove_role(self, role: UserRoleEnum) -> None:
        role = UserRoleEnum(role)
        if role not in self.roles:
            return
        if len(self.roles) == 1:
            raise InvalidStateError("a team member must keep at least one role")
        self.roles.remove(role)
        self.updated_at = utc_now()

    def has_permission(self, permission: str) -> bool:
        return any(role.has_permission(permission) for role in self.roles)

    @property
    def highest_role(self) -> UserRoleEnum:
        return max(self.roles, key=lambda role: role.priority)

    def activate(self) -> None:
        self.active = True
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        self.active = False
        self.updated_at = utc_now()
