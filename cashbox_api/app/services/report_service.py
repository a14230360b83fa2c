"""
Business logic for reports.

Reports are defined through the API and generated either on demand
(``generate_now``) or by the scheduler loop calling
``run_scheduled_reports`` once a minute.  Both paths go through the
``message_bus`` so that generation is handled by a single
``ReportGenerationMessageHandler``.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.enums import ReportTypeEnum
from ..domain.exceptions import DomainError
from ..domain.ids import utc_now
from ..domain.report import Report
from ..domain.validation import CronSyntaxError, cron_matches
from ..messaging.bus import message_bus
from ..messaging.messages import ReportGenerationMessage
from ..repositories import ReportRepository, UserRepository
from ..schemas.report import ReportCreate, ReportRead, ReportUpdate


logger = logging.getLogger(__name__)


def report_to_read(report: Report) -> ReportRead:
    return ReportRead(
        id=report.id,
        created_by=report.created_by,
        name=report.name,
        type=report.type,
        parameters=report.parameters,
        result=report.result,
        scheduled=report.scheduled,
        cron_expression=report.cron_expression,
        generated_at=report.generated_at,
        created_at=report.created_at,
        updated_at=report.updated_at,
    )


class ReportService:
    """Report definitions, scheduling and generation."""

    @classmethod
    async def create(cls, data: ReportCreate) -> ReportRead:
        """Create a report definition.

        Raises
        ------
        NotFoundError
            If ``created_by`` is not a known user.
        ValidationError
            If the definition is incomplete or the cron expression is
            malformed.
        """
        UserRepository().get(data.created_by)
        report = Report.create(
            created_by=data.created_by,
            name=data.name,
            type=data.type,
            parameters=data.parameters,
            scheduled=data.scheduled,
            cron_expression=data.cron_expression,
        )
        ReportRepository().save(report)
        logger.info("Report %s (%s) created by %s", report.id, report.type.value, report.created_by)
        return report_to_read(report)

    @classmethod
    async def get(cls, report_id: str) -> ReportRead:
        return report_to_read(ReportRepository().get(report_id))

    @classmethod
    async def list(
        cls,
        created_by: Optional[str] = None,
        type: Optional[ReportTypeEnum] = None,
        scheduled: Optional[bool] = None,
    ) -> List[ReportRead]:
        return [report_to_read(r) for r in ReportRepository().search(created_by, type, scheduled)]

    @classmethod
    async def update(cls, report_id: str, data: ReportUpdate) -> ReportRead:
        repository = ReportRepository()
        report = repository.get(report_id)
        report.update(data.name, data.parameters)
        repository.save(report)
        return report_to_read(report)

    @classmethod
    async def delete(cls, report_id: str) -> None:
        repository = ReportRepository()
        if not repository.delete(report_id):
            repository.get(report_id)

    @classmethod
    async def schedule(cls, report_id: str, cron_expression: str) -> ReportRead:
        repository = ReportRepository()
        report = repository.get(report_id)
        report.schedule(cron_expression)
        repository.save(report)
        logger.info("Report %s scheduled with '%s'", report.id, report.cron_expression)
        return report_to_read(report)

    @classmethod
    async def unschedule(cls, report_id: str) -> ReportRead:
        repository = ReportRepository()
        report = repository.get(report_id)
        report.unschedule()
        repository.save(report)
        return report_to_read(report)

    @classmethod
    async def generate_now(cls, report_id: str, parameters: Optional[Dict[str, Any]] = None) -> ReportRead:
        """Generate ``report_id`` synchronously and return it with its result."""
        ReportRepository().get(report_id)
        message_bus.dispatch(ReportGenerationMessage(report_id=report_id, parameters=parameters))
        return report_to_read(ReportRepository().get(report_id))

    @classmethod
    async def run_scheduled_reports(cls, now: Optional[datetime] = None) -> int:
        """Generate every scheduled report whose cron expression matches ``now``.

        Reports with a cron expression that no longer parses are logged
        and skipped.  Returns the number of reports generated.
        """
        now = now or utc_now()
        generated = 0
        for report in ReportRepository().find_scheduled():
            try:
                due = cron_matches(report.cron_expression or "", now)
            except CronSyntaxError as e:
                logger.error("Skipping report %s: %s", report.id, e)
                continue
            if not due:
                continue
            try:
                result = message_bus.dispatch(ReportGenerationMessage(report_id=report.id))
            except DomainError as e:
                logger.error("Scheduled generation of report %s failed: %s", report.id, e)
                continue
            if result is not None:
                generated += 1
        logger.info("Scheduled report run at %s generated %d report(s)", now.isoformat(), generated)
        return generated
