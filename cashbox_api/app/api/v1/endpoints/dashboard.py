"""Dashboard and analytics endpoints for API v1."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Path

from ....domain.exceptions import DomainError
from ....services.dashboard_service import DashboardService
from ..errors import http_error

router = APIRouter()


@router.get("/admin", response_model=Dict[str, Any])
async def admin_overview() -> Dict[str, Any]:
    return await DashboardService.admin_overview()


@router.get("/financial", response_model=Dict[str, Any])
async def financial_overview(
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    team_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Totals, averages, collection rate and monthly trends for an optional date range."""
    try:
        return await DashboardService.financial_overview(date_from, date_to, team_id)
    except DomainError as e:
        raise http_error(e)


@router.get("/users/{user_id}", response_model=Dict[str, Any])
async def user_dashboard(user_id: str = Path(..., description="User ID")) -> Dict[str, Any]:
    try:
        return await DashboardService.user_dashboard(user_id)
    except DomainError as e:
        raise http_error(e)


@router.get("/teams/{team_id}", response_model=Dict[str, Any])
async def team_dashboard(team_id: str = Path(..., description="Team ID")) -> Dict[str, Any]:
    try:
        return await DashboardService.team_dashboard(team_id)
    except DomainError as e:
        raise http_error(e)
