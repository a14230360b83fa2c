"""
Notifications and per-type notification preferences.

``mark_as_read`` and ``update_preferences`` are idempotent: repeating a
call that changes nothing records no event.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .enums import NotificationTypeEnum
from .event_journal import EventJournal
from .events import (
    DomainEvent,
    NotificationCreated,
    NotificationPreferenceUpdated,
    NotificationRead,
)
from .ids import ensure_utc, new_id, utc_now
from .validation import Violations

EMAIL_CHANNEL = "email"
IN_APP_CHANNEL = "in_app"


class Notification:
    def __init__(
        self,
        id: str,
        user_id: str,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        read: bool = False,
        read_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.type = NotificationTypeEnum(type)
        self.title = title
        self.message = message
        self.data: Dict[str, Any] = dict(data or {})
        self.read = read
        self.read_at = ensure_utc(read_at)
        self.created_at = ensure_utc(created_at) or utc_now()
        self._journal = EventJournal()

    @classmethod
    def create(
        cls,
        user_id: str,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> "Notification":
        violations = Violations()
        violations.require_text("title", title, "title cannot be empty")
        violations.require_text("message", message, "message cannot be empty")
        violations.raise_if_any()

        notification = cls(new_id(), user_id, type, title.strip(), message.strip(), data)
        notification._journal.record(NotificationCreated(
            notification_id=notification.id,
            user_id=user_id,
            notification_type=notification.type.value,
            title=notification.title,
        ))
        return notification

    def mark_as_read(self) -> None:
        if self.read:
            return
        self.read = True
        self.read_at = utc_now()
        self._journal.record(NotificationRead(notification_id=self.id, user_id=self.user_id))

    def is_unread(self) -> bool:
        return not self.read

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = ensure_utc(now) or utc_now()
        return self.created_at + timedelta(days=self.type.retention_days) < now

    @property
    def priority(self) -> int:
        return self.type.priority

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()


class NotificationPreference:
    """Delivery channels a user allows for one notification type."""

    def __init__(
        self,
        id: str,
        user_id: str,
        notification_type: NotificationTypeEnum,
        email_enabled: bool = True,
        in_app_enabled: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.user_id = user_id
        self.notification_type = NotificationTypeEnum(notification_type)
        self.email_enabled = email_enabled
        self.in_app_enabled = in_app_enabled
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._journal = EventJournal()

    @classmethod
    def create(
        cls,
        user_id: str,
        notification_type: NotificationTypeEnum,
        email_enabled: bool = True,
        in_app_enabled: bool = True,
    ) -> "NotificationPreference":
        return cls(new_id(), user_id, notification_type, email_enabled, in_app_enabled)

    def update_preferences(self, email_enabled: bool, in_app_enabled: bool) -> None:
        if email_enabled == self.email_enabled and in_app_enabled == self.in_app_enabled:
            return
        self.email_enabled = email_enabled
        self.in_app_enabled = in_app_enabled
        self.updated_at = utc_now()
        self._journal.record(NotificationPreferenceUpdated(
            preference_id=self.id,
            user_id=self.user_id,
            notification_type=self.notification_type.value,
            email_enabled=email_enabled,
            in_app_enabled=in_app_enabled,
        ))

    def reset_to_defaults(self) -> None:
        self.update_preferences(True, True)

    def clone_for_type(self, notification_type: NotificationTypeEnum) -> "NotificationPreference":
        return NotificationPreference.create(
            self.user_id, notification_type, self.email_enabled, self.in_app_enabled
        )

    def is_notification_allowed(self, channel: str) -> bool:
        if channel == EMAIL_CHANNEL:
            return self.email_enabled
        if channel == IN_APP_CHANNEL:
            return self.in_app_enabled
        return False

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()
