"""
Service layer for dashboards and financial analytics.

Dashboards are read-only aggregations over penalties, payments and
notifications.  Amounts are plain integer minor units summed across
records; balances are ``penalties - payments`` so a positive value means
money is still owed.  Sorting and grouping are done in Python.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..application.queries import penalty_to_read
from ..domain.exceptions import ValidationError
from ..repositories import (
    NotificationRepository,
    PaymentRepository,
    PenaltyRepository,
    TeamRepository,
    TeamUserRepository,
    UserRepository,
)
from .notification_service import notification_to_read
from .payment_service import payment_to_read
from .report_generator import collection_rate

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def _total(items: Iterable[Any]) -> int:
    return sum(item.money.amount for item in items)


def _dump(models: Iterable[Any]) -> List[Dict[str, Any]]:
    return [m.model_dump(mode="json") for m in models]


def group_by_month(items: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    """Count and sum ``items`` per ``YYYY-MM`` of their creation date, oldest month first."""
    grouped: Dict[str, Dict[str, int]] = {}
    for item in items:
        month = item.created_at.strftime("%Y-%m")
        bucket = grouped.setdefault(month, {"count": 0, "amount": 0})
        bucket["count"] += 1
        bucket["amount"] += item.money.amount
    return dict(sorted(grouped.items()))


def _average(total: int, count: int) -> float:
    return round(total / count, 2) if count else 0


def _parse_bound(value: Optional[str], field: str, end: bool) -> Optional[datetime]:
    if not value:
        return None
    try:
        day = date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError.single(field, f"{field} must be an ISO date (YYYY-MM-DD)")
    return datetime.combine(day, time.max if end else time.min, tzinfo=timezone.utc)


class DashboardService:
    """Aggregated views for members, teams and administrators."""

    @classmethod
    async def user_dashboard(cls, user_id: str) -> Dict[str, Any]:
        user = UserRepository().get(user_id)
        penalty_repository = PenaltyRepository()
        penalties = penalty_repository.find_by_user(user_id)
        unpaid = [p for p in penalties if not p.is_paid and not p.archived]
        payments = PaymentRepository().find_by_user(user_id)
        notifications = NotificationRepository()

        total_penalties = _total(penalties)
        total_payments = _total(payments)
        outstanding = total_penalties - total_payments
        return {
            "user": {
                "id": user.id,
                "name": user.full_name,
                "email": str(user.email) if user.email else None,
            },
            "penalties": {
                "total": len(penalties),
                "unpaid": len(unpaid),
                "totalAmount": total_penalties,
                "recent": _dump(penalty_to_read(p) for p in penalties[:RECENT_LIMIT]),
            },
            "payments": {
                "total": len(payments),
                "totalAmount": total_payments,
                "recent": _dump(payment_to_read(p) for p in payments[:RECENT_LIMIT]),
            },
            "balance": {
                "outstanding": outstanding,
                "status": "outstanding" if outstanding > 0 else "paid_up",
            },
            "notifications": {
                "unreadCount": notifications.count_unread(user_id),
                "recent": _dump(
                    notification_to_read(n) for n in notifications.find_for_user(user_id, limit=RECENT_LIMIT)
                ),
            },
        }

    @classmethod
    async def team_dashboard(cls, team_id: str) -> Dict[str, Any]:
        team = TeamRepository().get(team_id)
        members = TeamUserRepository().find_by_team(team_id)
        penalties = PenaltyRepository().find_by_team(team_id)
        payments = PaymentRepository().search(team_id=team_id)
        users = UserRepository()

        member_stats = []
        for member in members:
            user = users.find(member.user_id)
            own_penalties = [p for p in penalties if p.team_user_id == member.id]
            own_payments = [p for p in payments if p.team_user_id == member.id]
            member_stats.append({
                "user": {
                    "id": member.user_id,
                    "name": user.full_name if user else "Unknown",
                    "role": member.highest_role.label,
                },
                "penalties": len(own_penalties),
                "payments": len(own_payments),
                "balance": _total(own_penalties) - _total(own_payments),
            })

        total_penalties = _total(penalties)
        total_payments = _total(payments)
        return {
            "team": {
                "id": team.id,
                "name": team.name,
                "memberCount": len(members),
                "status": "active" if team.active else "inactive",
            },
            "financial": {
                "totalPenalties": total_penalties,
                "totalPayments": total_payments,
                "outstandingBalance": total_penalties - total_payments,
                "penaltyCount": len(penalties),
                "paymentCount": len(payments),
            },
            "members": member_stats,
        }

    @classmethod
    async def admin_overview(cls) -> Dict[str, Any]:
        users = UserRepository()
        penalties = PenaltyRepository().all()
        unpaid = [p for p in penalties if not p.is_paid and not p.archived]
        payments = PaymentRepository().all()

        total_penalties = _total(penalties)
        total_payments = _total(payments)
        outstanding = _total(unpaid)
        return {
            "overview": {
                "users": {"total": users.count(), "active": users.count("active = 1")},
                "teams": {"total": TeamRepository().count(), "active": TeamRepository().count("active = 1")},
                "penalties": {
                    "total": len(penalties),
                    "unpaid": len(unpaid),
                    "totalAmount": total_penalties,
                    "outstandingAmount": outstanding,
                },
                "payments": {"total": len(payments), "totalAmount": total_payments},
            },
            "financial": {
                "totalRevenue": total_payments,
                "outstandingAmount": outstanding,
                "collectionRate": collection_rate(total_penalties, total_payments),
            },
            "recentActivity": {
                "penalties": _dump(penalty_to_read(p) for p in penalties[:10]),
                "payments": _dump(payment_to_read(p) for p in payments[:10]),
            },
        }

    @classmethod
    async def financial_overview(
        cls,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        team_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Totals, averages and month-by-month trends.

        Parameters
        ----------
        date_from, date_to
            Optional ISO dates bounding ``created_at`` (inclusive).
        team_id
            Restrict to one team.

        Raises
        ------
        ValidationError
            If a bound is not an ISO date.
        """
        start = _parse_bound(date_from, "date_from", end=False)
        end = _parse_bound(date_to, "date_to", end=True)
        penalties = PenaltyRepository().search(team_id=team_id, created_from=start, created_to=end)
        payments = PaymentRepository().search(team_id=team_id, created_from=start, created_to=end)

        total_penalties = _total(penalties)
        total_payments = _total(payments)
        return {
            "period": {"from": date_from, "to": date_to},
            "summary": {
                "penalties": {
                    "count": len(penalties),
                    "totalAmount": total_penalties,
                    "averageAmount": _average(total_penalties, len(penalties)),
                },
                "payments": {
                    "count": len(payments),
                    "totalAmount": total_payments,
                    "averageAmount": _average(total_payments, len(payments)),
                },
                "netBalance": total_penalties - total_payments,
                "collectionRate": collection_rate(total_penalties, total_payments),
            },
            "trends": {
                "penalties": group_by_month(penalties),
                "payments": group_by_month(payments),
            },
        }
