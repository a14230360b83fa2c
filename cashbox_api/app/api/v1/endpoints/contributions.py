"""
Contribution endpoints for API v1.

Besides plain CRUD this router exposes the outstanding and overdue
views and the trigger for the recurring contribution run.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.enums import CurrencyEnum
from ....domain.exceptions import DomainError
from ....schemas.common import MoneyRead
from ....schemas.contribution import (
    ContributionCreate,
    ContributionPay,
    ContributionRead,
    RecurringRunResult,
)
from ....services.contribution_service import ContributionService, RecurringContributionService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=ContributionRead, status_code=status.HTTP_201_CREATED)
async def create_contribution(data: ContributionCreate) -> ContributionRead:
    try:
        return await ContributionService.create_contribution(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[ContributionRead])
async def list_contributions(
    team_id: Optional[str] = None,
    user_id: Optional[str] = None,
    paid: Optional[bool] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[ContributionRead]:
    return await ContributionService.list_contributions(team_id, user_id, paid, limit, offset)


@router.get("/overdue", response_model=List[ContributionRead])
async def list_overdue(today: Optional[date] = None, team_id: Optional[str] = None) -> List[ContributionRead]:
    return await ContributionService.overdue(today, team_id)


@router.get("/outstanding", response_model=MoneyRead)
async def total_outstanding(
    team_id: Optional[str] = None,
    user_id: Optional[str] = None,
    currency: Optional[CurrencyEnum] = None,
) -> MoneyRead:
    """Sum of unpaid contributions in ``currency`` (the configured default if omitted)."""
    return await ContributionService.total_outstanding(team_id, user_id, currency)


@router.get("/outstanding/{team_user_id}", response_model=List[ContributionRead])
async def outstanding_for_member(team_user_id: str = Path(..., description="Membership ID")) -> List[ContributionRead]:
    try:
        return await ContributionService.outstanding_for_member(team_user_id)
    except DomainError as e:
        raise http_error(e)


@router.post("/recurring/run", response_model=RecurringRunResult)
async def run_recurring(now: Optional[datetime] = None) -> RecurringRunResult:
    """Create every recurring contribution that is due at ``now`` (default: current time)."""
    try:
        created = await RecurringContributionService.run(now)
    except DomainError as e:
        raise http_error(e)
    return RecurringRunResult(created=created)


@router.get("/{contribution_id}", response_model=ContributionRead)
async def get_contribution(contribution_id: str = Path(..., description="Contribution ID")) -> ContributionRead:
    try:
        return await ContributionService.get_contribution(contribution_id)
    except DomainError as e:
        raise http_error(e)


@router.post("/{contribution_id}/pay", response_model=ContributionRead)
async def pay_contribution(data: Optional[ContributionPay] = None,
                           contribution_id: str = Path(..., description="Contribution ID")) -> ContributionRead:
    try:
        return await ContributionService.pay_contribution(contribution_id, data.paid_at if data else None)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{contribution_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_contribution(contribution_id: str = Path(..., description="Contribution ID")) -> None:
    """Deactivate a contribution; it no longer shows up in listings or totals."""
    try:
        await ContributionService.deactivate_contribution(contribution_id)
    except DomainError as e:
        raise http_error(e)
    return None
