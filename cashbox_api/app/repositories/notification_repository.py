"""SQLite persistence for notifications and notification preferences."""

import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.enums import NotificationTypeEnum
from ..domain.ids import from_iso, to_iso
from ..domain.notification import Notification, NotificationPreference
from .base import SqliteRepository, dump_json, load_json


class NotificationRepository(SqliteRepository[Notification]):
    table = "notifications"
    entity_name = "Notification"
    default_order = "created_at DESC"

    def _to_row(self, notification: Notification) -> Dict[str, Any]:
        return {
            "id": notification.id,
            "user_id": notification.user_id,
            "type": notification.type.value,
            "title": notification.title,
            "message": notification.message,
            "data": dump_json(notification.data),
            "read": int(notification.read),
            "read_at": to_iso(notification.read_at),
            "created_at": to_iso(notification.created_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Notification:
        return Notification(
            id=row["id"],
            user_id=row["user_id"],
            type=row["type"],
            title=row["title"],
            message=row["message"],
            data=load_json(row["data"]),
            read=bool(row["read"]),
            read_at=from_iso(row["read_at"]),
            created_at=from_iso(row["created_at"]),
        )

    def find_for_user(self, user_id: str, unread_only: bool = False,
                      limit: Optional[int] = None, offset: Optional[int] = None) -> List[Notification]:
        where = "user_id = ? AND read = 0" if unread_only else "user_id = ?"
        return self._select(where, (user_id,), limit=limit, offset=offset)

    def count_unread(self, user_id: str) -> int:
        return self.count("user_id = ? AND read = 0", (user_id,))

    def find_created_before(self, moment: datetime) -> List[Notification]:
        return self._select("created_at < ?", (to_iso(moment),))


class NotificationPreferenceRepository(SqliteRepository[NotificationPreference]):
    table = "notification_preferences"
    entity_name = "NotificationPreference"
    default_order = "notification_type"

    def _to_row(self, preference: NotificationPreference) -> Dict[str, Any]:
        return {
            "id": preference.id,
            "user_id": preference.user_id,
            "notification_type": preference.notification_type.value,
            "email_enabled": int(preference.email_enabled),
            "in_app_enabled": int(preference.in_app_enabled),
            "created_at": to_iso(preference.created_at),
            "updated_at": to_iso(preference.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> NotificationPreference:
        return NotificationPreference(
            id=row["id"],
            user_id=row["user_id"],
            notification_type=row["notification_type"],
            email_enabled=bool(row["email_enabled"]),
            in_app_enabled=bool(row["in_app_enabled"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_for(self, user_id: str, notification_type: NotificationTypeEnum) -> Optional[NotificationPreference]:
        found = self._select(
            "user_id = ? AND notification_type = ?",
            (user_id, NotificationTypeEnum(notification_type).value),
        )
        return found[0] if found else None

    def find_for_user(self, user_id: str) -> List[NotificationPreference]:
        return self._select("user_id = ?", (user_id,))
