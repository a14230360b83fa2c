"""Event subscribers: translate released domain events into bus messages."""

import logging

from ..domain.enums import NotificationTypeEnum, ReportTypeEnum
from ..domain.events import (
    ContributionCreated,
    ContributionPaid,
    PenaltyCreated,
    PenaltyPaid,
    ReportGenerated,
)
from .bus import EventDispatcher, MessageBus
from .messages import (
    ContributionNotificationMessage,
    NotificationMessage,
    PenaltyCreatedMessage,
    PenaltyPaidMessage,
)

logger = logging.getLogger(__name__)


class PenaltyEventSubscriber:
    def __init__(self, bus: MessageBus):
        self.bus = bus

    def on_penalty_created(self, event: PenaltyCreated) -> None:
        logger.info("Penalty %s created, queueing notification", event.penalty_id)
        self.bus.dispatch(PenaltyCreatedMessage(penalty_id=event.penalty_id))

    def on_penalty_paid(self, event: PenaltyPaid) -> None:
        logger.info("Penalty %s paid, queueing notification", event.penalty_id)
        self.bus.dispatch(PenaltyPaidMessage(penalty_id=event.penalty_id))

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(PenaltyCreated, self.on_penalty_created)
        dispatcher.subscribe(PenaltyPaid, self.on_penalty_paid)


class ContributionEventSubscriber:
    def __init__(self, bus: MessageBus):
        self.bus = bus

    def on_contribution_created(self, event: ContributionCreated) -> None:
        self.bus.dispatch(ContributionNotificationMessage(contribution_id=event.contribution_id))

    def on_contribution_paid(self, event: ContributionPaid) -> None:
        self.bus.dispatch(ContributionNotificationMessage(contribution_id=event.contribution_id, paid=True))

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(ContributionCreated, self.on_contribution_created)
        dispatcher.subscribe(ContributionPaid, self.on_contribution_paid)


class ReportEventSubscriber:
    def __init__(self, bus: MessageBus):
        self.bus = bus

    def on_report_generated(self, event: ReportGenerated) -> None:
        report_type = ReportTypeEnum(event.report_type)
        self.bus.dispatch(NotificationMessage(
            user_id=event.created_by,
            type=NotificationTypeEnum.REPORT_GENERATED.value,
            title=NotificationTypeEnum.REPORT_GENERATED.default_title,
            message=f"Your report \"{event.report_name}\" ({report_type.label}) is ready.",
            data={"reportId": event.report_id, "format": report_type.default_format},
        ))

    def subscribe(self, dispatcher: EventDispatcher) -> None:
        dispatcher.subscribe(ReportGenerated, self.on_report_generated)


def register_subscribers(dispatcher: EventDispatcher, bus: MessageBus) -> None:
    PenaltyEventSubscriber(bus).subscribe(dispatcher)
    ContributionEventSubscriber(bus).subscribe(dispatcher)
    ReportEventSubscriber(bus).subscribe(dispatcher)
