"""SQLite persistence for users."""

import sqlite3
from typing import Any, Dict, List, Optional

from ..domain.ids import from_iso, to_iso
from ..domain.user import User
from ..domain.value_objects import PersonName, optional_email, optional_phone
from .base import SqliteRepository, dump_json, load_json


class UserRepository(SqliteRepository[User]):
    table = "users"
    entity_name = "User"
    default_order = "last_name, first_name"

    def _to_row(self, user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "first_name": user.name.first_name,
            "last_name": user.name.last_name,
            "email": user.email.value if user.email else None,
            "phone": user.phone.value if user.phone else None,
            "active": int(user.active),
            "preferences": dump_json(user.preferences),
            "created_at": to_iso(user.created_at),
            "updated_at": to_iso(user.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=PersonName(row["first_name"], row["last_name"]),
            email=optional_email(row["email"]),
            phone=optional_phone(row["phone"]),
            active=bool(row["active"]),
            preferences=load_json(row["preferences"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_by_email(self, email: str) -> Optional[User]:
        users = self._select("email = ?", (email.strip().lower(),))
        return users[0] if users else None

    def find_active(self) -> List[User]:
        return self._select("active = 1")
