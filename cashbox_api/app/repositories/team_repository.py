"""SQLite persistence for teams and team memberships."""

import sqlite3
from typing import Any, Dict, List, Optional

from ..domain.ids import from_iso, to_iso
from ..domain.team import Team, TeamUser
from .base import SqliteRepository, dump_json, load_json


class TeamRepository(SqliteRepository[Team]):
    table = "teams"
    entity_name = "Team"
    default_order = "name"

    def _to_row(self, team: Team) -> Dict[str, Any]:
        return {
            "id": team.id,
            "name": team.name,
            "external_id": team.external_id,
            "active": int(team.active),
            "metadata": dump_json(team.metadata),
            "created_at": to_iso(team.created_at),
            "updated_at": to_iso(team.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Team:
        return Team(
            id=row["id"],
            name=row["name"],
            external_id=row["external_id"],
            active=bool(row["active"]),
            metadata=load_json(row["metadata"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_by_name(self, name: str) -> Optional[Team]:
        teams = self._select("name = ?", (name.strip(),))
        return teams[0] if teams else None

    def find_by_external_id(self, external_id: str) -> Optional[Team]:
        teams = self._select("external_id = ?", (external_id.strip(),))
        return teams[0] if teams else None

    def list(self, active: Optional[bool] = None, limit: Optional[int] = None,
             offset: Optional[int] = None) -> List[Team]:
        if active is None:
            return self._select(limit=limit, offset=offset)
        return self._select("active = ?", (int(active),), limit=limit, offset=offset)


class TeamUserRepository(SqliteRepository[TeamUser]):
    table = "team_users"
    entity_name = "TeamUser"

    def _to_row(self, team_user: TeamUser) -> Dict[str, Any]:
        return {
            "id": team_user.id,
            "team_id": team_user.team_id,
            "user_id": team_user.user_id,
            "roles": dump_json([role.value for role in team_user.roles]),
            "active": int(team_user.active),
            "created_at": to_iso(team_user.created_at),
            "updated_at": to_iso(team_user.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> TeamUser:
        return TeamUser(
            id=row["id"],
            team_id=row["team_id"],
            user_id=row["user_id"],
            roles=load_json(row["roles"], default=[]),
            active=bool(row["active"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_membership(self, team_id: str, user_id: str) -> Optional[TeamUser]:
        members = self._select("team_id = ? AND user_id = ?", (team_id, user_id))
        return members[0] if members else None

    def find_by_team(self, team_id: str, active_only: bool = False) -> List[TeamUser]:
        if active_only:
            return self._select("team_id = ? AND active = 1", (team_id,))
        return self._select("team_id = ?", (team_id,))

    def find_by_user(self, user_id: str) -> List[TeamUser]:
        return self._select("user_id = ?", (user_id,))
