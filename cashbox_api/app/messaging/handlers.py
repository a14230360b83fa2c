"""Message handlers registered on the ``message_bus``.

Each handler resolves the aggregate named in the message through its
repository.  Penalty and contribution handlers log and skip messages
whose aggregate has disappeared in the meantime; the generic
notification handler raises instead, because a notification for an
unknown user is a programming error.
"""

import logging
from typing import Optional

from ..domain.enums import NotificationTypeEnum
from ..domain.exceptions import NotFoundError
from ..domain.report import Report
from ..repositories import (
    ContributionRepository,
    PenaltyRepository,
    PenaltyTypeRepository,
    ReportRepository,
    UserRepository,
)
from ..services.notification_service import Notifier
from ..services.report_generator import ReportGeneratorService
from .bus import MessageBus
from .messages import (
    ContributionNotificationMessage,
    NotificationMessage,
    PenaltyCreatedMessage,
    PenaltyPaidMessage,
    ReportGenerationMessage,
)

logger = logging.getLogger(__name__)


class _NotifyingHandler:
    def __init__(self, notifier: Optional[Notifier] = None):
        self._notifier = notifier

    @property
    def notifier(self) -> Notifier:
        return self._notifier or Notifier()


class PenaltyCreatedMessageHandler(_NotifyingHandler):
    def __init__(self, penalties: Optional[PenaltyRepository] = None,
                 penalty_types: Optional[PenaltyTypeRepository] = None,
                 notifier: Optional[Notifier] = None):
        super().__init__(notifier)
        self.penalties = penalties or PenaltyRepository()
        self.penalty_types = penalty_types or PenaltyTypeRepository()

    def __call__(self, message: PenaltyCreatedMessage) -> None:
        logger.info("Processing PenaltyCreatedMessage for penalty %s", message.penalty_id)
        penalty = self.penalties.find(message.penalty_id)
        if penalty is None:
            logger.error("Penalty %s not found, skipping notification", message.penalty_id)
            return
        penalty_type = self.penalty_types.find(penalty.penalty_type_id)
        type_name = penalty_type.name if penalty_type else "Penalty"
        self.notifier.notify_penalty_created(penalty, type_name)


class PenaltyPaidMessageHandler(_NotifyingHandler):
    def __init__(self, penalties: Optional[PenaltyRepository] = None, notifier: Optional[Notifier] = None):
        super().__init__(notifier)
        self.penalties = penalties or PenaltyRepository()

    def __call__(self, message: PenaltyPaidMessage) -> None:
        logger.info("Processing PenaltyPaidMessage for penalty %s", message.penalty_id)
        penalty = self.penalties.find(message.penalty_id)
        if penalty is None:
            logger.error("Penalty %s not found, skipping notification", message.penalty_id)
            return
        self.notifier.notify_penalty_paid(penalty)


class ContributionNotificationHandler(_NotifyingHandler):
    def __init__(self, contributions: Optional[ContributionRepository] = None,
                 notifier: Optional[Notifier] = None):
        super().__init__(notifier)
        self.contributions = contributions or ContributionRepository()

    def __call__(self, message: ContributionNotificationMessage) -> None:
        contribution = self.contributions.find(message.contribution_id)
        if contribution is None:
            logger.error("Contribution %s not found, skipping notification", message.contribution_id)
            return
        if message.paid:
            self.notifier.notify_contribution_paid(contribution)
        else:
            self.notifier.notify_contribution_created(contribution)


class NotificationMessageHandler(_NotifyingHandler):
    def __init__(self, users: Optional[UserRepository] = None, notifier: Optional[Notifier] = None):
        super().__init__(notifier)
        self.users = users or UserRepository()

    def __call__(self, message: NotificationMessage) -> None:
        if self.users.find(message.user_id) is None:
            raise NotFoundError("User", message.user_id)
        self.notifier.notify(
            message.user_id,
            NotificationTypeEnum(message.type),
            message.title,
            message.message,
            message.data,
        )


class ReportGenerationMessageHandler:
    """Generates a report and saves it, which releases ``ReportGenerated``."""

    def __init__(self, reports: Optional[ReportRepository] = None,
                 generator: Optional[ReportGeneratorService] = None):
        self.reports = reports or ReportRepository()
        self._generator = generator

    def __call__(self, message: ReportGenerationMessage) -> Optional[Report]:
        logger.info('Generating report with ID "%s"', message.report_id)
        report = self.reports.find(message.report_id)
        if report is None:
            logger.error('Failed to generate report with ID "%s": not found', message.report_id)
            return None
        generator = self._generator or ReportGeneratorService()
        report.generate(generator.generate(report, message.parameters))
        self.reports.save(report)
        logger.info('Successfully generated report with ID "%s"', message.report_id)
        return report


def register_message_handlers(bus: MessageBus) -> None:
    bus.register(PenaltyCreatedMessage, PenaltyCreatedMessageHandler())
    bus.register(PenaltyPaidMessage, PenaltyPaidMessageHandler())
    bus.register(ContributionNotificationMessage, ContributionNotificationHandler())
    bus.register(NotificationMessage, NotificationMessageHandler())
    bus.register(ReportGenerationMessage, ReportGenerationMessageHandler())
