"""
Report aggregate.

Generation and scheduling are orthogonal.  ``generate`` may be called
any number of times and records ``ReportGenerated`` on every call;
``schedule`` and ``unschedule`` change the cron configuration without
recording anything.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import ReportTypeEnum
from .event_journal import EventJournal
from .events import DomainEvent, ReportCreated, ReportGenerated
from .exceptions import ValidationError
from .ids import new_id, utc_now
from .validation import Violations, is_valid_cron, missing_parameters


def _check_cron(violations: Violations, cron_expression: Optional[str]) -> None:
    if not cron_expression or not str(cron_expression).strip():
        violations.add("cron_expression", "cron expression is required for scheduled reports")
    elif not is_valid_cron(cron_expression):
        violations.add("cron_expression", f"invalid cron expression: {cron_expression!r}")


def _check_definition(violations: Violations, name: str, type: ReportTypeEnum,
                      parameters: Optional[Dict[str, Any]]) -> None:
    violations.require_text("name", name, "report name cannot be empty")
    if not parameters:
        violations.add("parameters", "report parameters cannot be empty")
        return
    missing = missing_parameters(parameters, type.required_parameters)
    if missing:
        violations.add("parameters", f"missing required parameters: {', '.join(missing)}")


class Report:
    def __init__(
        self,
        id: str,
        created_by: str,
        name: str,
        type: ReportTypeEnum,
        parameters: Dict[str, Any],
        result: Optional[Dict[str, Any]] = None,
        scheduled: bool = False,
        cron_expression: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        generated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.created_by = created_by
        self.name = name
        self.type = ReportTypeEnum(type)
        self.parameters = dict(parameters)
        self.result = result
        self.scheduled = scheduled
        self.cron_expression = cron_expression
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self.generated_at = generated_at
        self._journal = EventJournal()

    @classmethod
    def create(
        cls,
        created_by: str,
        name: str,
        type: ReportTypeEnum,
        parameters: Dict[str, Any],
        scheduled: bool = False,
        cron_expression: Optional[str] = None,
    ) -> "Report":
        """Validate and build a report, recording ``ReportCreated``.

        Raises
        ------
        ValidationError
            When the name or parameters are empty, a parameter required
            by ``type`` is missing, ``scheduled`` is set without a cron
            expression, or a given cron expression is malformed.  An
            unscheduled report keeps a valid expression for later use.
        """
        try:
            type = ReportTypeEnum(type)
        except ValueError:
            raise ValidationError.single("type", f"unknown report type: {type!r}")
        violations = Violations()
        _check_definition(violations, name, type, parameters)
        if scheduled or (cron_expression and cron_expression.strip()):
            _check_cron(violations, cron_expression)
        violations.raise_if_any()

        report = cls(
            id=new_id(),
            created_by=created_by,
            name=name.strip(),
            type=type,
            parameters=parameters,
            scheduled=scheduled,
            cron_expression=(" ".join(cron_expression.split()) or None) if cron_expression else None,
        )
        report._journal.record(ReportCreated(
            report_id=report.id,
            created_by=created_by,
            report_type=report.type.value,
            report_name=report.name,
        ))
        return report

    def is_scheduled(self) -> bool:
        return self.scheduled

    def is_generated(self) -> bool:
        return self.result is not None

    def generate(self, result: Dict[str, Any]) -> None:
        if not isinstance(result, dict):
            raise ValidationError.single("result", "report result must be a mapping")
        self.result = result
        self.generated_at = utc_now()
        self.updated_at = self.generated_at
        self._journal.record(ReportGenerated(
            report_id=self.id,
            created_by=self.created_by,
            report_type=self.type.value,
            report_name=self.name,
        ))

    def update(self, name: str, parameters: Dict[str, Any]) -> None:
        violations = Violations()
        _check_definition(violations, name, self.type, parameters)
        violations.raise_if_any()
        self.name = name.strip()
        self.parameters = dict(parameters)
        self.updated_at = utc_now()

    def schedule(self, cron_expression: str) -> None:
        violations = Violations()
        _check_cron(violations, cron_expression)
        violations.raise_if_any()
        self.scheduled = True
        self.cron_expression = " ".join(cron_expression.split())
        self.updated_at = utc_now()

    def unschedule(self) -> None:
        self.scheduled = False
        self.cron_expression = None
        self.updated_at = utc_now()

    def release_events(self) -> List[DomainEvent]:
        return self._journal.release()

    def peek_events(self) -> List[DomainEvent]:
        return self._journal.peek()
