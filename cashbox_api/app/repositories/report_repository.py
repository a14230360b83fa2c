"""SQLite persistence for reports."""

import sqlite3
from typing import Any, Dict, List, Optional

from ..domain.enums import ReportTypeEnum
from ..domain.ids import from_iso, to_iso
from ..domain.report import Report
from .base import SqliteRepository, dump_json, load_json


class ReportRepository(SqliteRepository[Report]):
    table = "reports"
    entity_name = "Report"
    default_order = "created_at DESC"

    def _to_row(self, report: Report) -> Dict[str, Any]:
        return {
            "id": report.id,
            "created_by": report.created_by,
            "name": report.name,
            "type": report.type.value,
            "parameters": dump_json(report.parameters),
            "result": dump_json(report.result) if report.result is not None else None,
            "scheduled": int(report.scheduled),
            "cron_expression": report.cron_expression,
            "generated_at": to_iso(report.generated_at),
            "created_at": to_iso(report.created_at),
            "updated_at": to_iso(report.updated_at),
        }

    def _from_row(self, row: sqlite3.Row) -> Report:
        return Report(
            id=row["id"],
            created_by=row["created_by"],
            name=row["name"],
            type=row["type"],
            parameters=load_json(row["parameters"]),
            result=json_or_none(row["result"]),
            scheduled=bool(row["scheduled"]),
            cron_expression=row["cron_expression"],
            generated_at=from_iso(row["generated_at"]),
            created_at=from_iso(row["created_at"]),
            updated_at=from_iso(row["updated_at"]),
        )

    def search(self, created_by: Optional[str] = None, type: Optional[ReportTypeEnum] = None,
               scheduled: Optional[bool] = None) -> List[Report]:
        clauses: List[str] = []
        params: List[Any] = []
        if created_by:
            clauses.append("created_by = ?")
            params.append(created_by)
        if type is not None:
            clauses.append("type = ?")
            params.append(ReportTypeEnum(type).value)
        if scheduled is not None:
            clauses.append("scheduled = ?")
            params.append(int(scheduled))
        return self._select(" AND ".join(clauses), params)

    def find_scheduled(self) -> List[Report]:
        return self.search(scheduled=True)


def json_or_none(value: Optional[str]) -> Optional[Dict[str, Any]]:
    return load_json(value) if value else None
