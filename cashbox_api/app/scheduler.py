"""
Background scheduler for periodic cashbox jobs.

``run_scheduler`` wakes up at the start of every minute and generates
the scheduled reports that are due.  Once per calendar day (on the first
tick after midnight UTC, and on the very first tick after startup) it
also creates due recurring contributions and purges expired
notifications.  It is started next to the API server by ``run.py``.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Optional

from .domain.ids import utc_now
from .services.contribution_service import RecurringContributionService
from .services.notification_service import NotificationService
from .services.report_service import ReportService

logger = logging.getLogger(__name__)


async def run_daily_jobs(now: datetime) -> None:
    created = await RecurringContributionService.run(now)
    purged = await NotificationService.purge_expired(now)
    logger.info("Daily jobs: %d contribution(s) created, %d notification(s) purged", created, purged)


async def tick(now: datetime, last_daily_run: Optional[date]) -> date:
    """Run the jobs due at ``now``; returns the date of the latest daily run."""
    await ReportService.run_scheduled_reports(now)
    if last_daily_run != now.date():
        await run_daily_jobs(now)
    return now.date()


async def run_scheduler() -> None:
    last_daily_run: Optional[date] = None
    while True:
        now = utc_now().replace(second=0, microsecond=0)
        try:
            last_daily_run = await tick(now, last_daily_run)
        except Exception:
            logger.exception("Scheduler tick at %s failed", now.isoformat())
        await asyncio.sleep(60 - utc_now().second)
