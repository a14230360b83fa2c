"""SQLite persistence for contributions, their types, templates and payments."""

import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from ..domain.contribution import (
    Contribution,
    ContributionPayment,
    ContributionTemplate,
    ContributionType,
)
from ..domain.enums import CurrencyEnum
from ..domain.ids import from_iso, to_iso
from ..domain.value_objects import Money
from .base import SqliteRepository


class ContributionTypeRepository(SqliteRepository[ContributionType]):
    table = "contribution_types"
    entity_name = "ContributionType"
    default_order = "name"

    def _to_row(self, contribution_type: ContributionType) -> Dict[str, Any]:
        pattern = contribution_type.recurrence_pattern
        return {
            "id": contribution_type.id,
            "name": contribution_type.name,
            "description": contribution_type.description,
            "recurring": int(contribution_type.recurring),
            "recurrence_pattern": pattern.value if pattern else None,
            "active": int(contribution_type.active),
            "created_at": to_iso(contribution_type.created_at),
            "updated_at": to_iso(contribution_type.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> ContributionType:
        return ContributionType(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            recurring=bool(row["recurring"]),
            recurrence_pattern=row["recurrence_pattern"],
            active=bool(row["active"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_active_recurring(self) -> List[ContributionType]:
        return self._select("active = 1 AND recurring = 1")


class ContributionRepository(SqliteRepository[Contribution]):
    table = "contributions"
    entity_name = "Contribution"
    default_order = "due_date, created_at"

    def _to_row(self, contribution: Contribution) -> Dict[str, Any]:
        return {
            "id": contribution.id,
            "team_user_id": contribution.team_user_id,
            "user_id": contribution.user_id,
            "team_id": contribution.team_id,
            "contribution_type_id": contribution.contribution_type_id,
            "description": contribution.description,
            "amount": contribution.money.amount,
            "currency": contribution.money.currency.value,
            "due_date": contribution.due_date.isoformat(),
            "paid_at": to_iso(contribution.paid_at),
            "active": int(contribution.active),
            "created_at": to_iso(contribution.created_at),
            "updated_at": to_iso(contribution.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Contribution:
        return Contribution(
            id=row["id"],
            team_user_id=row["team_user_id"],
            user_id=row["user_id"],
            team_id=row["team_id"],
            contribution_type_id=row["contribution_type_id"],
            description=row["description"],
            money=Money(row["amount"], row["currency"]),
            due_date=date.fromisoformat(row["due_date"]),
            paid_at=from_iso(row["paid_at"]),
            active=bool(row["active"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def search(
        self,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        paid: Optional[bool] = None,
        due_before: Optional[date] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Contribution]:
        clauses: List[str] = ["active = 1"]
        params: List[Any] = []
        if team_id:
            clauses.append("team_id = ?")
            params.append(team_id)
        if user_id:
            clauses.append("user_id = ?")
            params.append(user_id)
        if paid is not None:
            clauses.append("paid_at IS NOT NULL" if paid else "paid_at IS NULL")
        if due_before is not None:
            clauses.append("due_date < ?")
            params.append(due_before.isoformat())
        return self._select(" AND ".join(clauses), params, limit=limit, offset=offset)

    def find_latest_for(self, team_user_id: str, contribution_type_id: str) -> Optional[Contribution]:
        found = self._select(
            "team_user_id = ? AND contribution_type_id = ?",
            (team_user_id, contribution_type_id),
            order="due_date DESC",
            limit=1,
        )
        return found[0] if found else None


class ContributionTemplateRepository(SqliteRepository[ContributionTemplate]):
    table = "contribution_templates"
    entity_name = "ContributionTemplate"
    default_order = "created_at DESC"

    def _to_row(self, template: ContributionTemplate) -> Dict[str, Any]:
        pattern = template.recurrence_pattern
        return {
            "id": template.id,
            "team_id": template.team_id,
            "name": template.name,
            "description": template.description,
            "amount": template.money.amount,
            "currency": template.money.currency.value,
            "recurring": int(template.recurring),
            "recurrence_pattern": pattern.value if pattern else None,
            "due_days": template.due_days,
            "active": int(template.active),
            "created_at": to_iso(template.created_at),
            "updated_at": to_iso(template.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> ContributionTemplate:
        return ContributionTemplate(
            id=row["id"],
            team_id=row["team_id"],
            name=row["name"],
            money=Money(row["amount"], row["currency"]),
            description=row["description"],
            recurring=bool(row["recurring"]),
            recurrence_pattern=row["recurrence_pattern"],
            due_days=row["due_days"],
            active=bool(row["active"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def search(self, team_id: Optional[str] = None, active: Optional[bool] = None) -> List[ContributionTemplate]:
        clauses: List[str] = []
        params: List[Any] = []
        if team_id:
            clauses.append("team_id = ?")
            params.append(team_id)
        if active is not None:
            clauses.append("active = ?")
            params.append(int(active))
        return self._select(" AND ".join(clauses), params)

    def find_active_for_team(self, team_id: str) -> List[ContributionTemplate]:
        return self.search(team_id=team_id, active=True)


class ContributionPaymentRepository(SqliteRepository[ContributionPayment]):
    table = "contribution_payments"
    entity_name = "ContributionPayment"

    def _to_row(self, payment: ContributionPayment) -> Dict[str, Any]:
        method = payment.payment_method
        return {
            "id": payment.id,
            "contribution_id": payment.contribution_id,
            "user_id": payment.user_id,
            "amount": payment.money.amount,
            "currency": payment.money.currency.value,
            "payment_method": method.value if method else None,
            "reference": payment.reference,
            "notes": payment.notes,
            "created_at": to_iso(payment.created_at),
            "updated_at": to_iso(payment.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> ContributionPayment:
        return ContributionPayment(
            id=row["id"],
            contribution_id=row["contribution_id"],
            user_id=row["user_id"],
            money=Money(row["amount"], row["currency"]),
            payment_method=row["payment_method"],
            reference=row["reference"],
            notes=row["notes"],
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_by_contribution(self, contribution_id: str) -> List[ContributionPayment]:
        return self._select("contribution_id = ?", (contribution_id,))

    def total_paid(self, contribution_id: str, currency: CurrencyEnum) -> Money:
        amount = self._scalar(
            f"SELECT COALESCE(SUM(amount), 0) FROM {self.table} WHERE contribution_id = ? AND currency = ?",
            (contribution_id, currency.value),
        )
        return Money(int(amount), currency)
