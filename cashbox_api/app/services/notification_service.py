"""
Business logic for notifications.

``Notifier`` is the synchronous core used by message handlers while a
request is still running: it checks the user's preference for the
notification type, stores the in-app notification and hands an e-mail
to the :class:`~.mailer.Mailer`.  Without a stored preference both
channels are allowed.

``NotificationService`` exposes the same functionality plus the
read-side operations (listing, unread counts, marking as read,
preferences) to the API layer, in the classmethod style used by every
other service.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from ..domain.contribution import Contribution
from ..domain.enums import NotificationTypeEnum
from ..domain.exceptions import NotFoundError
from ..domain.ids import utc_now
from ..domain.notification import (
    EMAIL_CHANNEL,
    IN_APP_CHANNEL,
    Notification,
    NotificationPreference,
)
from ..domain.penalty import Penalty
from ..domain.value_objects import Money
from ..repositories import (
    NotificationPreferenceRepository,
    NotificationRepository,
    PenaltyRepository,
    UserRepository,
)
from ..schemas.notification import (
    NotificationCreate,
    NotificationPreferenceRead,
    NotificationRead,
)
from .mailer import Mailer

logger = logging.getLogger(__name__)


def notification_to_read(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        user_id=notification.user_id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        data=notification.data,
        read=notification.read,
        read_at=notification.read_at,
        priority=notification.type.priority,
        icon=notification.type.icon,
        color=notification.type.color,
        created_at=notification.created_at,
    )


def preference_to_read(preference: NotificationPreference) -> NotificationPreferenceRead:
    return NotificationPreferenceRead(
        id=preference.id,
        user_id=preference.user_id,
        notification_type=preference.notification_type,
        email_enabled=preference.email_enabled,
        in_app_enabled=preference.in_app_enabled,
    )


class Notifier:
    """Delivers notifications over the channels a user allows."""

    def __init__(
        self,
        notifications: Optional[NotificationRepository] = None,
        preferences: Optional[NotificationPreferenceRepository] = None,
        users: Optional[UserRepository] = None,
        mailer: Optional[Mailer] = None,
    ):
        self.notifications = notifications or NotificationRepository()
        self.preferences = preferences or NotificationPreferenceRepository()
        self.users = users or UserRepository()
        self.mailer = mailer or Mailer()

    def notify(
        self,
        user_id: str,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        """Notify one user.

        Returns the stored notification, or ``None`` when the user has
        switched off in-app delivery for this type.

        Raises
        ------
        NotFoundError
            If ``user_id`` does not resolve.
        ValidationError
            If ``title`` or ``message`` is empty.
        """
        user = self.users.get(user_id)
        type = NotificationTypeEnum(type)
        preference = self.preferences.find_for(user_id, type)

        notification = None
        if preference is None or preference.is_notification_allowed(IN_APP_CHANNEL):
            notification = Notification.create(user_id, type, title, message, data)
            self.notifications.save(notification)
            logger.info("Notification %s (%s) stored for user %s", notification.id, type.value, user_id)

        send_email = preference.is_notification_allowed(EMAIL_CHANNEL) if preference else True
        if send_email and user.email:
            self.mailer.send(str(user.email), f"Cashbox: {title}", message)
        return notification

    # -- convenience senders ----------------------------------------------

    def notify_penalty_created(self, penalty: Penalty, penalty_type_name: str) -> Optional[Notification]:
        title = f"New Penalty: {penalty_type_name}"
        message = (
            f"You have received a new penalty of {penalty.money.format()} "
            f"for {penalty_type_name}: {penalty.reason}"
        )
        data = {
            "penaltyId": penalty.id,
            "penaltyType": penalty_type_name,
            "amount": penalty.money.amount,
            "currency": penalty.money.currency.value,
            "reason": penalty.reason,
        }
        return self.notify(penalty.user_id, NotificationTypeEnum.PENALTY_CREATED, title, message, data)

    def notify_penalty_paid(self, penalty: Penalty) -> Optional[Notification]:
        message = f"Your payment of {penalty.money.format()} for \"{penalty.reason}\" has been received."
        data = {"penaltyId": penalty.id, "amount": penalty.money.amount, "currency": penalty.money.currency.value}
        return self.notify(
            penalty.user_id,
            NotificationTypeEnum.PAYMENT_RECEIVED,
            NotificationTypeEnum.PAYMENT_RECEIVED.default_title,
            message,
            data,
        )

    def notify_contribution_created(self, contribution: Contribution) -> Optional[Notification]:
        message = (
            f"A contribution of {contribution.money.format()} ({contribution.description}) "
            f"is due on {contribution.due_date.isoformat()}."
        )
        data = {"contributionId": contribution.id, "dueDate": contribution.due_date.isoformat()}
        return self.notify(
            contribution.user_id,
            NotificationTypeEnum.PAYMENT_REMINDER,
            "New contribution due",
            message,
            data,
        )

    def notify_contribution_paid(self, contribution: Contribution) -> Optional[Notification]:
        message = f"Your contribution of {contribution.money.format()} ({contribution.description}) has been received."
        return self.notify(
            contribution.user_id,
            NotificationTypeEnum.PAYMENT_RECEIVED,
            NotificationTypeEnum.PAYMENT_RECEIVED.default_title,
            message,
            {"contributionId": contribution.id},
        )

    def notify_payment_reminder(self, user_id: str, total: Money, penalty_count: int) -> Optional[Notification]:
        message = (
            f"You have {penalty_count} unpaid penalties totaling {total.format()}. "
            "Please make a payment soon."
        )
        data = {"totalAmount": total.amount, "currency": total.currency.value, "penaltyCount": penalty_count}
        return self.notify(user_id, NotificationTypeEnum.PAYMENT_REMINDER, "Payment Reminder", message, data)


class NotificationService:
    """API-facing notification operations."""

    @classmethod
    async def send(cls, data: NotificationCreate) -> Optional[NotificationRead]:
        title = data.title or data.type.default_title
        notification = Notifier().notify(data.user_id, data.type, title, data.message, data.data)
        return notification_to_read(notification) if notification else None

    @classmethod
    async def list_for_user(
        cls,
        user_id: str,
        unread_only: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[NotificationRead]:
        UserRepository().get(user_id)
        notifications = NotificationRepository().find_for_user(user_id, unread_only, limit, offset)
        return [notification_to_read(n) for n in notifications]

    @classmethod
    async def unread_count(cls, user_id: str) -> int:
        return NotificationRepository().count_unread(user_id)

    @classmethod
    async def mark_read(cls, notification_id: str) -> NotificationRead:
        repository = NotificationRepository()
        notification = repository.get(notification_id)
        notification.mark_as_read()
        repository.save(notification)
        return notification_to_read(notification)

    @classmethod
    async def mark_all_read(cls, user_id: str) -> int:
        """Mark every unread notification of ``user_id`` as read; returns how many changed."""
        repository = NotificationRepository()
        changed = 0
        for notification in repository.find_for_user(user_id, unread_only=True):
            notification.mark_as_read()
            repository.save(notification)
            changed += 1
        logger.info("Marked %d notification(s) read for user %s", changed, user_id)
        return changed

    @classmethod
    async def purge_expired(cls, now: Optional[datetime] = None) -> int:
        """Delete notifications older than their type's retention period."""
        now = now or utc_now()
        repository = NotificationRepository()
        removed = 0
        shortest = min(t.retention_days for t in NotificationTypeEnum)
        for notification in repository.find_created_before(now - timedelta(days=shortest)):
            if notification.is_expired(now):
                repository.delete(notification.id)
                removed += 1
        if removed:
            logger.info("Purged %d expired notification(s)", removed)
        return removed

    @classmethod
    async def send_payment_reminders(cls) -> int:
        """Remind every active user with open penalties; returns the number of reminders."""
        notifier = Notifier()
        penalties = PenaltyRepository()
        sent = 0
        for user in notifier.users.find_active():
            open_penalties = penalties.find_unpaid_by_user(user.id)
            if not open_penalties:
                continue
            by_currency: Dict[str, List[Money]] = {}
            for penalty in open_penalties:
                by_currency.setdefault(penalty.money.currency.value, []).append(penalty.money)
            for amounts in by_currency.values():
                total = Money.total(amounts, amounts[0].currency)
                notifier.notify_payment_reminder(user.id, total, len(amounts))
                sent += 1
        return sent

    # -- preferences -------------------------------------------------------

    @classmethod
    async def get_preferences(cls, user_id: str) -> List[NotificationPreferenceRead]:
        """One entry per notification type; types without a stored preference show the defaults."""
        UserRepository().get(user_id)
        stored = {p.notification_type: p for p in NotificationPreferenceRepository().find_for_user(user_id)}
        result = []
        for type in NotificationTypeEnum:
            preference = stored.get(type)
            if preference is not None:
                result.append(preference_to_read(preference))
            else:
                result.append(NotificationPreferenceRead(
                    id=None, user_id=user_id, notification_type=type,
                    email_enabled=True, in_app_enabled=True,
                ))
        return result

    @classmethod
    async def update_preference(
        cls,
        user_id: str,
        notification_type: NotificationTypeEnum,
        email_enabled: bool,
        in_app_enabled: bool,
    ) -> NotificationPreferenceRead:
        UserRepository().get(user_id)
        repository = NotificationPreferenceRepository()
        preference = repository.find_for(user_id, notification_type)
        if preference is None:
            preference = NotificationPreference.create(user_id, notification_type)
        preference.update_preferences(email_enabled, in_app_enabled)
        repository.save(preference)
        return preference_to_read(preference)

    @classmethod
    async def reset_preference(cls, user_id: str, notification_type: NotificationTypeEnum) -> NotificationPreferenceRead:
        repository = NotificationPreferenceRepository()
        preference = repository.find_for(user_id, notification_type)
        if preference is None:
            raise NotFoundError("NotificationPreference", f"{user_id}/{NotificationTypeEnum(notification_type).value}")
        preference.reset_to_defaults()
        repository.save(preference)
        return preference_to_read(preference)
