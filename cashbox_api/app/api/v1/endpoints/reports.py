"""
Report endpoints for API v1.

``POST /reports/{id}/generate`` builds the result synchronously;
``POST /reports/scheduled/run`` is called by the scheduler once a minute
and generates every scheduled report whose cron expression is due.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Path, status

from ....domain.enums import ReportTypeEnum
from ....domain.exceptions import DomainError
from ....domain.ids import utc_now
from ....schemas.report import ReportCreate, ReportRead, ReportSchedule, ReportUpdate, ScheduledRunResult
from ....services.report_service import ReportService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=ReportRead, status_code=status.HTTP_201_CREATED)
async def create_report(report: ReportCreate) -> ReportRead:
    """Create a report definition.  Returns 422 for missing parameters or a bad cron expression."""
    try:
        return await ReportService.create(report)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[ReportRead])
async def list_reports(
    created_by: Optional[str] = None,
    type: Optional[ReportTypeEnum] = None,
    scheduled: Optional[bool] = None,
) -> List[ReportRead]:
    return await ReportService.list(created_by, type, scheduled)


@router.post("/scheduled/run", response_model=ScheduledRunResult)
async def run_scheduled_reports(now: Optional[datetime] = None) -> ScheduledRunResult:
    run_at = now or utc_now()
    generated = await ReportService.run_scheduled_reports(run_at)
    return ScheduledRunResult(generated=generated, run_at=run_at)


@router.get("/{report_id}", response_model=ReportRead)
async def get_report(report_id: str = Path(..., description="Report ID")) -> ReportRead:
    try:
        return await ReportService.get(report_id)
    except DomainError as e:
        raise http_error(e)


@router.put("/{report_id}", response_model=ReportRead)
async def update_report(data: ReportUpdate, report_id: str = Path(..., description="Report ID")) -> ReportRead:
    try:
        return await ReportService.update(report_id, data)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: str = Path(..., description="Report ID")) -> None:
    try:
        await ReportService.delete(report_id)
    except DomainError as e:
        raise http_error(e)
    return None


@router.put("/{report_id}/schedule", response_model=ReportRead)
async def schedule_report(data: ReportSchedule, report_id: str = Path(..., description="Report ID")) -> ReportRead:
    try:
        return await ReportService.schedule(report_id, data.cron_expression)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{report_id}/schedule", response_model=ReportRead)
async def unschedule_report(report_id: str = Path(..., description="Report ID")) -> ReportRead:
    try:
        return await ReportService.unschedule(report_id)
    except DomainError as e:
        raise http_error(e)


@router.post("/{report_id}/generate", response_model=ReportRead)
async def generate_report(
    report_id: str = Path(..., description="Report ID"),
    parameters: Optional[Dict[str, Any]] = Body(None, embed=True),
) -> ReportRead:
    """Generate the report now.  ``parameters`` override the stored ones for this run only."""
    try:
        return await ReportService.generate_now(report_id, parameters)
    except DomainError as e:
        raise http_error(e)
