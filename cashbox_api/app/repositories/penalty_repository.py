"""SQLite persistence for penalties and penalty types."""

import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.ids import from_iso, to_iso
from ..domain.penalty import Penalty, PenaltyType
from ..domain.value_objects import Money
from .base import SqliteRepository


class PenaltyTypeRepository(SqliteRepository[PenaltyType]):
    table = "penalty_types"
    entity_name = "PenaltyType"
    default_order = "name"

    def _to_row(self, penalty_type: PenaltyType) -> Dict[str, Any]:
        return {
            "id": penalty_type.id,
            "name": penalty_type.name,
            "type": penalty_type.type.value,
            "default_amount": penalty_type.default_amount,
            "description": penalty_type.description,
            "active": int(penalty_type.active),
            "created_at": to_iso(penalty_type.created_at),
            "updated_at": to_iso(penalty_type.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> PenaltyType:
        return PenaltyType(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            default_amount=row["default_amount"],
            description=row["description"],
            active=bool(row["active"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def find_active(self) -> List[PenaltyType]:
        return self._select("active = 1")


class PenaltyRepository(SqliteRepository[Penalty]):
    table = "penalties"
    entity_name = "Penalty"
    default_order = "created_at DESC"

    def _to_row(self, penalty: Penalty) -> Dict[str, Any]:
        return {
            "id": penalty.id,
            "team_user_id": penalty.team_user_id,
            "user_id": penalty.user_id,
            "team_id": penalty.team_id,
            "penalty_type_id": penalty.penalty_type_id,
            "reason": penalty.reason,
            "amount": penalty.money.amount,
            "currency": penalty.money.currency.value,
            "archived": int(penalty.archived),
            "paid_at": to_iso(penalty.paid_at),
            "created_at": to_iso(penalty.created_at),
            "updated_at": to_iso(penalty.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Penalty:
        return Penalty(
            id=row["id"],
            team_user_id=row["team_user_id"],
            user_id=row["user_id"],
            team_id=row["team_id"],
            penalty_type_id=row["penalty_type_id"],
            reason=row["reason"],
            money=Money(row["amount"], row["currency"]),
            archived=bool(row["archived"]),
            paid_at=from_iso(row["paid_at"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def search(
        self,
        team_id: Optional[str] = None,
        user_id: Optional[str] = None,
        paid: Optional[bool] = None,
        archived: Optional[bool] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Penalty]:
        clauses: List[str] = []
        params: List[Any] = []
        if team_id:
            clauses.append("team_id = ?")
            params.append(team_id)
        if user_id:
            clauses.append("user_id = ?")
            params.append(user_id)
        if paid is not None:
            clauses.append("paid_at IS NOT NULL" if paid else "paid_at IS NULL")
        if archived is not None:
            clauses.append("archived = ?")
            params.append(int(archived))
        if created_from is not None:
            clauses.append("created_at >= ?")
            params.append(to_iso(created_from))
        if created_to is not None:
            clauses.append("created_at <= ?")
            params.append(to_iso(created_to))
        return self._select(" AND ".join(clauses), params, limit=limit, offset=offset)

    def find_by_user(self, user_id: str) -> List[Penalty]:
        return self.search(user_id=user_id)

    def find_unpaid_by_user(self, user_id: str) -> List[Penalty]:
        return self.search(user_id=user_id, paid=False, archived=False)

    def find_by_team(self, team_id: str) -> List[Penalty]:
        return self.search(team_id=team_id)
