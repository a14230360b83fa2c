"""
Builds the result payload of a report from repository data.

Each report type has its own builder returning a JSON-serialisable
``dict`` with ``reportType``, a ``summary`` block and ``generatedAt``.
Amounts are reported in minor units.  The audit log report is built
from the event dispatcher's history of dispatched domain events.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..domain.enums import ReportTypeEnum
from ..domain.exceptions import NotFoundError, ValidationError
from ..domain.ids import to_iso, utc_now
from ..domain.report import Report
from ..messaging.bus import EventDispatcher, event_dispatcher
from ..repositories import (
    PaymentRepository,
    PenaltyRepository,
    PenaltyTypeRepository,
    TeamRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def _parse_day(parameters: Dict[str, Any], key: str) -> date:
    value = parameters.get(key)
    try:
        return date.fromisoformat(str(value)[:10])
    except (TypeError, ValueError):
        raise ValidationError.single(key, f"{key} must be an ISO date (YYYY-MM-DD), got {value!r}")


def _period(parameters: Dict[str, Any]) -> Tuple[datetime, datetime, Dict[str, str]]:
    day_from = _parse_day(parameters, "dateFrom")
    day_to = _parse_day(parameters, "dateTo")
    if day_from > day_to:
        raise ValidationError.single("dateTo", "dateTo must not be before dateFrom")
    start = datetime.combine(day_from, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day_to, time.max, tzinfo=timezone.utc)
    return start, end, {"from": day_from.isoformat(), "to": day_to.isoformat()}


def collection_rate(penalty_total: int, payment_total: int) -> float:
    """Payments as a percentage of penalties; 100 when nothing was charged."""
    if penalty_total <= 0:
        return 100.0
    return round(payment_total / penalty_total * 100, 2)


class ReportGeneratorService:
    def __init__(
        self,
        penalties: Optional[PenaltyRepository] = None,
        penalty_types: Optional[PenaltyTypeRepository] = None,
        payments: Optional[PaymentRepository] = None,
        users: Optional[UserRepository] = None,
        teams: Optional[TeamRepository] = None,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        self.penalties = penalties or PenaltyRepository()
        self.penalty_types = penalty_types or PenaltyTypeRepository()
        self.payments = payments or PaymentRepository()
        self.users = users or UserRepository()
        self.teams = teams or TeamRepository()
        self.dispatcher = dispatcher if dispatcher is not None else event_dispatcher
        self._builders: Dict[ReportTypeEnum, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            ReportTypeEnum.FINANCIAL: self._financial,
            ReportTypeEnum.PENALTY_SUMMARY: self._penalty_summary,
            ReportTypeEnum.USER_ACTIVITY: self._user_activity,
            ReportTypeEnum.TEAM_OVERVIEW: self._team_overview,
            ReportTypeEnum.PAYMENT_HISTORY: self._payment_history,
            ReportTypeEnum.AUDIT_LOG: self._audit_log,
        }

    def generate(self, report: Report, parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Build the result for ``report``; ``parameters`` override the stored ones."""
        merged = dict(report.parameters)
        if parameters:
            merged.update(parameters)
        logger.info("Building %s report %s", report.type.value, report.id)
        result = self._builders[report.type](merged)
        result["generatedAt"] = utc_now().strftime("%Y-%m-%d %H:%M:%S")
        return result

    def _user_name(self, user_id: str) -> str:
        user = self.users.find(user_id)
        return user.full_name if user else "Unknown"

    def _financial(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        start, end, period = _period(parameters)
        team_id = parameters.get("teamId")
        penalties = self.penalties.search(team_id=team_id, created_from=start, created_to=end)
        payments = self.payments.search(team_id=team_id, created_from=start, created_to=end)
        total_penalties = sum(p.money.amount for p in penalties)
        total_payments = sum(p.money.amount for p in payments)
        return {
            "reportType": ReportTypeEnum.FINANCIAL.value,
            "period": period,
            "summary": {
                "totalPenalties": total_penalties,
                "totalPayments": total_payments,
                "netBalance": total_penalties - total_payments,
                "penaltyCount": len(penalties),
                "paymentCount": len(payments),
                "collectionRate": collection_rate(total_penalties, total_payments),
            },
        }

    def _penalty_summary(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        start, end, period = _period(parameters)
        penalties = self.penalties.search(team_id=parameters.get("teamId"), created_from=start, created_to=end)
        type_names = {t.id: t.name for t in self.penalty_types.all()}
        return {
            "reportType": ReportTypeEnum.PENALTY_SUMMARY.value,
            "period": period,
            "summary": {
                "totalPenalties": len(penalties),
                "totalAmount": sum(p.money.amount for p in penalties),
                "paidCount": sum(1 for p in penalties if p.is_paid),
            },
            "penalties": [
                {
                    "id": p.id,
                    "type": type_names.get(p.penalty_type_id, "Unknown"),
                    "amount": p.money.amount,
                    "currency": p.money.currency.value,
                    "reason": p.reason,
                    "user": self._user_name(p.user_id),
                    "date": p.created_at.date().isoformat(),
                    "paid": p.is_paid,
                }
                for p in penalties
            ],
        }

    def _user_activity(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        user = self.users.get(parameters["userId"])
        start, end, period = _period(parameters)
        penalties = self.penalties.search(user_id=user.id, created_from=start, created_to=end)
        payments = self.payments.search(user_id=user.id, created_from=start, created_to=end)
        return {
            "reportType": ReportTypeEnum.USER_ACTIVITY.value,
            "user": {
                "id": user.id,
                "name": user.full_name,
                "email": str(user.email) if user.email else None,
            },
            "period": period,
            "summary": {
                "penaltyCount": len(penalties),
                "paymentCount": len(payments),
                "totalPenalties": sum(p.money.amount for p in penalties),
                "totalPayments": sum(p.money.amount for p in payments),
            },
        }

    def _team_overview(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        team = self.teams.get(parameters["teamId"])
        penalties = self.penalties.search(team_id=team.id)
        payments = self.payments.search(team_id=team.id)
        return {
            "reportType": ReportTypeEnum.TEAM_OVERVIEW.value,
            "team": {
                "id": team.id,
                "name": team.name,
                "status": "active" if team.active else "inactive",
            },
            "summary": {
                "totalPenalties": sum(p.money.amount for p in penalties),
                "totalPayments": sum(p.money.amount for p in payments),
                "penaltyCount": len(penalties),
                "paymentCount": len(payments),
            },
        }

    def _payment_history(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        start, end, period = _period(parameters)
        user_id = parameters.get("userId")
        if user_id and self.users.find(user_id) is None:
            raise NotFoundError("User", user_id)
        payments = self.payments.search(user_id=user_id, created_from=start, created_to=end)
        return {
            "reportType": ReportTypeEnum.PAYMENT_HISTORY.value,
            "period": period,
            "payments": [
                {
                    "id": p.id,
                    "user": self._user_name(p.user_id),
                    "amount": p.money.amount,
                    "currency": p.money.currency.value,
                    "type": p.type.label,
                    "date": p.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                }
                for p in payments
            ],
            "summary": {
                "totalPayments": len(payments),
                "totalAmount": sum(p.money.amount for p in payments),
            },
        }

    def _audit_log(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        start, end, period = _period(parameters)
        events: List[Dict[str, Any]] = [
            {"event": e.name, "eventId": e.event_id, "occurredAt": to_iso(e.occurred_at)}
            for e in self.dispatcher.get_history()
            if start <= e.occurred_at <= end
        ]
        return {
            "reportType": ReportTypeEnum.AUDIT_LOG.value,
            "period": period,
            "events": events,
            "summary": {"totalEvents": len(events)},
        }
