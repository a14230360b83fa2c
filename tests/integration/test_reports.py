"""Report generation, scheduled runs and the audit log."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from cashbox_api.app.domain.enums import NotificationTypeEnum, ReportTypeEnum
from cashbox_api.app.domain.exceptions import NotFoundError, ValidationError
from cashbox_api.app.domain.penalty import Penalty
from cashbox_api.app.domain.payment import Payment
from cashbox_api.app.domain.report import Report
from cashbox_api.app.domain.value_objects import Money
from cashbox_api.app.repositories import (
    NotificationRepository,
    PaymentRepository,
    PenaltyRepository,
    ReportRepository,
)
from cashbox_api.app.schemas.report import ReportCreate
from cashbox_api.app.services.report_generator import ReportGeneratorService, collection_rate
from cashbox_api.app.services.report_service import ReportService


def run(coro):
    return asyncio.run(coro)


def _today_params(**extra):
    today = datetime.now(timezone.utc).date().isoformat()
    params = {"dateFrom": today, "dateTo": today}
    params.update(extra)
    return params


@pytest.fixture
def activity(stored_member, stored_drink_type):
    """Two penalties (one paid) and one cash payment for the stored member."""
    penalties = PenaltyRepository()
    first = Penalty.create(stored_member, stored_drink_type, "Round", Money(150))
    second = Penalty.create(stored_member, stored_drink_type, "Another round", Money(350))
    second.pay()
    penalties.save(first)
    penalties.save(second)
    PaymentRepository().save(Payment.create(stored_member, Money(350)))
    return stored_member


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class TestCollectionRate:
    @pytest.mark.parametrize(
        "penalties, payments, expected",
        [(0, 0, 100.0), (0, 500, 100.0), (500, 350, 70.0), (300, 100, 33.33)],
    )
    def test_rate(self, penalties, payments, expected):
        assert collection_rate(penalties, payments) == expected


class TestReportGenerator:
    def test_financial(self, activity):
        report = Report.create("u", "Q", ReportTypeEnum.FINANCIAL, _today_params(teamId=activity.team_id))
        result = ReportGeneratorService().generate(report)
        assert result["reportType"] == "financial"
        assert result["summary"] == {
            "totalPenalties": 500,
            "totalPayments": 350,
            "netBalance": 150,
            "penaltyCount": 2,
            "paymentCount": 1,
            "collectionRate": 70.0,
        }
        assert "generatedAt" in result

    def test_penalty_summary_lists_penalties(self, activity):
        report = Report.create("u", "P", ReportTypeEnum.PENALTY_SUMMARY, _today_params(teamId=activity.team_id))
        result = ReportGeneratorService().generate(report)
        assert result["summary"]["paidCount"] == 1
        assert {p["type"] for p in result["penalties"]} == {"Round of drinks"}
        assert {p["user"] for p in result["penalties"]} == {"Max Mustermann"}

    def test_parameters_override_stored_ones(self, activity):
        report = Report.create("u", "Q", ReportTypeEnum.FINANCIAL, _today_params(teamId=activity.team_id))
        result = ReportGeneratorService().generate(report, {"dateFrom": "2000-01-01", "dateTo": "2000-01-31"})
        assert result["period"] == {"from": "2000-01-01", "to": "2000-01-31"}
        assert result["summary"]["penaltyCount"] == 0

    def test_reversed_period(self, db):
        report = Report.create("u", "Q", ReportTypeEnum.AUDIT_LOG, {"dateFrom": "2024-02-01", "dateTo": "2024-01-01"})
        with pytest.raises(ValidationError):
            ReportGeneratorService().generate(report)

    def test_malformed_date(self, db):
        report = Report.create("u", "Q", ReportTypeEnum.AUDIT_LOG, {"dateFrom": "yesterday", "dateTo": "2024-01-01"})
        with pytest.raises(ValidationError) as info:
            ReportGeneratorService().generate(report)
        assert info.value.errors[0][0] == "dateFrom"

    def test_unknown_user(self, db):
        report = Report.create("u", "A", ReportTypeEnum.USER_ACTIVITY, _today_params(userId="ghost"))
        with pytest.raises(NotFoundError):
            ReportGeneratorService().generate(report)

    def test_audit_log_lists_dispatched_events(self, activity):
        report = Report.create("u", "Audit", ReportTypeEnum.AUDIT_LOG, _today_params())
        result = ReportGeneratorService().generate(report)
        names = [e["event"] for e in result["events"]]
        assert names.count("PenaltyCreated") == 2
        assert "PenaltyPaid" in names
        assert result["summary"]["totalEvents"] == len(names)

    def test_audit_log_names_events_by_type(self, activity):
        report = Report.create("u", "Audit", ReportTypeEnum.AUDIT_LOG, _today_params())
        ReportRepository().save(report)
        result = ReportGeneratorService().generate(report)
        names = [e["event"] for e in result["events"]]
        assert "TeamCreated" in names
        assert "ReportCreated" in names
        assert "FC Kneipe" not in names
        assert "Audit" not in names


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TestReportService:
    def test_generate_now_stores_result_and_notifies(self, activity, stored_user):
        created = run(ReportService.create(ReportCreate(
            created_by=stored_user.id,
            name="Team",
            type=ReportTypeEnum.TEAM_OVERVIEW,
            parameters={"teamId": activity.team_id},
        )))
        assert created.result is None

        generated = run(ReportService.generate_now(created.id))
        assert generated.result["team"]["name"] == "FC Kneipe"
        assert generated.generated_at is not None

        ready = [
            n for n in NotificationRepository().find_for_user(stored_user.id)
            if n.type is NotificationTypeEnum.REPORT_GENERATED
        ]
        assert len(ready) == 1
        assert ready[0].data["reportId"] == created.id

    def test_create_for_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            run(ReportService.create(ReportCreate(
                created_by="ghost", name="T", type=ReportTypeEnum.TEAM_OVERVIEW, parameters={"teamId": "t"},
            )))

    def test_scheduled_run_only_generates_due_reports(self, activity, stored_user, fixed_now):
        repository = ReportRepository()
        due = Report.create(stored_user.id, "Monday", ReportTypeEnum.TEAM_OVERVIEW,
                            {"teamId": activity.team_id}, scheduled=True, cron_expression="0 9 * * 1")
        not_due = Report.create(stored_user.id, "Tuesday", ReportTypeEnum.TEAM_OVERVIEW,
                                {"teamId": activity.team_id}, scheduled=True, cron_expression="0 9 * * 2")
        repository.save(due)
        repository.save(not_due)

        assert run(ReportService.run_scheduled_reports(fixed_now)) == 1
        assert repository.get(due.id).is_generated()
        assert not repository.get(not_due.id).is_generated()

    def test_scheduled_run_survives_failing_report(self, stored_user, fixed_now):
        repository = ReportRepository()
        broken = Report.create(stored_user.id, "Gone", ReportTypeEnum.TEAM_OVERVIEW,
                               {"teamId": "deleted-team"}, scheduled=True, cron_expression="* * * * *")
        repository.save(broken)
        assert run(ReportService.run_scheduled_reports(fixed_now)) == 0
        assert not repository.get(broken.id).is_generated()

    def test_delete_unknown(self, db):
        with pytest.raises(NotFoundError):
            run(ReportService.delete("nope"))
