"""
Top-level router for version 1 of the API.

This router aggregates the resource routers (users, teams, penalties,
payments, etc.) under a unified prefix.  When a new resource is added,
include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    contribution_payments,
    contribution_templates,
    contribution_types,
    contributions,
    dashboard,
    enums,
    notification_preferences,
    notifications,
    payments,
    penalties,
    penalty_types,
    reports,
    teams,
    users,
)

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(teams.router, prefix="/teams", tags=["teams"])
router.include_router(penalties.router, prefix="/penalties", tags=["penalties"])
router.include_router(penalty_types.router, prefix="/penalty-types", tags=["penalty-types"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(contributions.router, prefix="/contributions", tags=["contributions"])
router.include_router(contribution_types.router, prefix="/contribution-types", tags=["contribution-types"])
router.include_router(
    contribution_templates.router, prefix="/contribution-templates", tags=["contribution-templates"]
)
router.include_router(
    contribution_payments.router, prefix="/contribution-payments", tags=["contribution-payments"]
)
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(
    notification_preferences.router, prefix="/notification-preferences", tags=["notification-preferences"]
)
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(enums.router, prefix="/enums", tags=["enums"])
