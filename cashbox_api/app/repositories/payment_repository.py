"""SQLite persistence for payments."""

import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.enums import PaymentTypeEnum
from ..domain.ids import from_iso, to_iso
from ..domain.payment import Payment
from ..domain.value_objects import Money
from .base import SqliteRepository


class PaymentRepository(SqliteRepository[Payment]):
    table = "payments"
    entity_name = "Payment"
    default_order = "created_at DESC"

    def _to_row(self, payment: Payment) -> Dict[str, Any]:
        return {
            "id": payment.id,
            "team_user_id": payment.team_user_id,
            "user_id": payment.user_id,
            "team_id": payment.team_id,
            "amount": payment.money.amount,
            "currency": payment.money.currency.value,
            "type": payment.type.value,
            "description": payment.description,
            "reference": payment.reference,
            "created_at": to_iso(payment.created_at),
            "updated_at": to_iso(payment.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Payment:
        return Payment(
            id=row["id"],
            team_user_id=row["team_user_id"],
            user_id=row["user_id"],
            team_id=row["team_id"],
            money=Money(row["amount"], row["currency"]),
            type=row["type"],
            description=row["description"],
            reference=row["reference"],
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def search(
        self,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        type: Optional[PaymentTypeEnum] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Payment]:
        clauses: List[str] = []
        params: List[Any] = []
        if team_id:
            clauses.append("team_id = ?")
            params.append(team_id)
        if user_id:
            clauses.append("user_id = ?")
            params.append(user_id)
        if type is not None:
            clauses.append("type = ?")
            params.append(PaymentTypeEnum(type).value)
        if created_from is not None:
            clauses.append("created_at >= ?")
            params.append(to_iso(created_from))
        if created_to is not None:
            clauses.append("created_at <= ?")
            params.append(to_iso(created_to))
        return self._select(" AND ".join(clauses), params, limit=limit, offset=offset)

    def find_by_user(self, user_id: str) -> List[Payment]:
        return self.search(user_id=user_id)
