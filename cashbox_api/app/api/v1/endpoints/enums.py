"""
Enumeration endpoints for API v1.

Front ends use these lists to render select boxes, badges and report
forms without hard-coding labels, colours or required parameters.
"""

from typing import Any, Dict, List

from fastapi import APIRouter

from ....domain.enums import (
    CurrencyEnum,
    NotificationTypeEnum,
    PaymentTypeEnum,
    PenaltyTypeEnum,
    RecurrencePatternEnum,
    ReportTypeEnum,
    UserRoleEnum,
)

router = APIRouter()


@router.get("/notification-types", response_model=List[Dict[str, Any]])
async def notification_types() -> List[Dict[str, Any]]:
    return NotificationTypeEnum.all_for_frontend()


@router.get("/report-types", response_model=List[Dict[str, Any]])
async def report_types() -> List[Dict[str, Any]]:
    return ReportTypeEnum.all_for_frontend()


@router.get("/penalty-types", response_model=List[Dict[str, Any]])
async def penalty_types() -> List[Dict[str, Any]]:
    return [
        {"value": t.value, "label": t.label, "isDrink": t.is_drink, "defaultAmount": t.default_amount}
        for t in PenaltyTypeEnum
    ]


@router.get("/payment-types", response_model=List[Dict[str, Any]])
async def payment_types() -> List[Dict[str, Any]]:
    return [{"value": t.value, "label": t.label, "requiresReference": t.requires_reference} for t in PaymentTypeEnum]


@router.get("/currencies", response_model=List[Dict[str, Any]])
async def currencies() -> List[Dict[str, Any]]:
    return [{"value": c.value, "symbol": c.symbol} for c in CurrencyEnum]


@router.get("/roles", response_model=List[Dict[str, Any]])
async def roles() -> List[Dict[str, Any]]:
    return [
        {"value": r.value, "label": r.label, "priority": r.priority, "permissions": r.permissions}
        for r in sorted(UserRoleEnum, key=lambda role: role.priority, reverse=True)
    ]


@router.get("/recurrence-patterns", response_model=List[Dict[str, Any]])
async def recurrence_patterns() -> List[Dict[str, Any]]:
    return [
        {"value": p.value, "label": p.label, "intervalDays": p.interval_days, "frequencyPerYear": p.frequency_per_year}
        for p in RecurrencePatternEnum
    ]
