"""Tests for reports, cron expressions, notifications and preferences."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from cashbox_api.app.domain.enums import NotificationTypeEnum, ReportTypeEnum
from cashbox_api.app.domain.events import (
    NotificationCreated,
    NotificationPreferenceUpdated,
    NotificationRead,
    ReportCreated,
    ReportGenerated,
)
from cashbox_api.app.domain.exceptions import ValidationError
from cashbox_api.app.domain.notification import (
    EMAIL_CHANNEL,
    IN_APP_CHANNEL,
    Notification,
    NotificationPreference,
)
from cashbox_api.app.domain.report import Report
from cashbox_api.app.domain.validation import (
    CronSyntaxError,
    cron_matches,
    is_valid_cron,
    missing_parameters,
    parse_cron,
)

FINANCIAL_PARAMS = {"dateFrom": "2024-01-01", "dateTo": "2024-03-31", "teamId": "team-1"}


# ---------------------------------------------------------------------------
# Cron
# ---------------------------------------------------------------------------

class TestCron:
    @pytest.mark.parametrize(
        "expression",
        ["* * * * *", "0 9 * * 1", "*/15 8-18 * * 1-5", "0 0 1,15 * *", "5/10 * * * 7"],
    )
    def test_valid(self, expression):
        assert is_valid_cron(expression)

    @pytest.mark.parametrize(
        "expression",
        ["", "* * * *", "60 * * * *", "* 24 * * *", "* * 0 * *", "* * * 13 *", "5-1 * * * *", "*/0 * * * *", "a b c d e"],
    )
    def test_invalid(self, expression):
        assert not is_valid_cron(expression)

    def test_parse_raises(self):
        with pytest.raises(CronSyntaxError):
            parse_cron("* * * * * *")

    def test_parse_normalises_whitespace(self):
        assert parse_cron("  0   9 * *\t1 ") == "0 9 * * 1"

    @pytest.mark.parametrize("expression", ["@daily", "0 9 * * mon", "0 0 L * *"])
    def test_only_numeric_grammar(self, expression):
        assert not is_valid_cron(expression)

    def test_step_fires_every_twenty_minutes(self, fixed_now):
        fired = [m for m in range(60) if cron_matches("*/20 * * * *", fixed_now.replace(minute=m))]
        assert fired == [0, 20, 40]

    def test_sunday_as_seven(self, fixed_now):
        sunday = fixed_now - timedelta(days=1)
        assert cron_matches("0 9 * * 7", sunday)
        assert cron_matches("0 9 * * 0", sunday)
        assert not cron_matches("0 9 * * 7", fixed_now)

    def test_seconds_are_ignored(self, fixed_now):
        assert cron_matches("0 9 * * 1", fixed_now.replace(second=42))

    def test_matches_weekly(self, fixed_now):
        # fixed_now is Monday 09:00
        assert cron_matches("0 9 * * 1", fixed_now)
        assert not cron_matches("0 9 * * 2", fixed_now)
        assert not cron_matches("1 9 * * 1", fixed_now)

    def test_day_fields_combine_with_or_when_both_restricted(self, fixed_now):
        # 15th of the month OR Monday
        assert cron_matches("0 9 15 * 1", fixed_now)
        # restricted day of month only
        assert not cron_matches("0 9 15 * *", fixed_now)


class TestMissingParameters:
    def test_blank_strings_count_as_missing(self):
        assert missing_parameters({"a": " ", "b": 0}, ["a", "b", "c"]) == ["a", "c"]


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

class TestReport:
    def test_create_records_event(self):
        report = Report.create("user-1", "Q1", ReportTypeEnum.FINANCIAL, FINANCIAL_PARAMS)
        assert not report.is_scheduled()
        assert not report.is_generated()
        event = report.peek_events()[0]
        assert isinstance(event, ReportCreated)
        assert event.report_type == "financial"

    def test_missing_required_parameter(self):
        with pytest.raises(ValidationError) as info:
            Report.create("user-1", "Q1", ReportTypeEnum.FINANCIAL, {"dateFrom": "2024-01-01"})
        assert "dateTo, teamId" in info.value.errors[0][1]

    def test_all_problems_reported_together(self):
        with pytest.raises(ValidationError) as info:
            Report.create("user-1", " ", ReportTypeEnum.AUDIT_LOG, {}, scheduled=True, cron_expression="bad")
        assert [field for field, _ in info.value.errors] == ["name", "parameters", "cron_expression"]

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            Report.create("user-1", "X", "weekly_fun", {"a": 1})

    def test_scheduled_needs_cron(self):
        with pytest.raises(ValidationError):
            Report.create("user-1", "Q1", ReportTypeEnum.FINANCIAL, FINANCIAL_PARAMS, scheduled=True)

    def test_cron_is_normalised(self):
        report = Report.create(
            "user-1", "Weekly", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"},
            scheduled=True, cron_expression=" 0  9 * * 1 ",
        )
        assert report.cron_expression == "0 9 * * 1"

    def test_unscheduled_report_keeps_cron(self):
        report = Report.create(
            "user-1", "Weekly", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"}, cron_expression="0 9 * * 1",
        )
        assert not report.is_scheduled()
        assert report.cron_expression == "0 9 * * 1"

    def test_unscheduled_report_rejects_bad_cron(self):
        with pytest.raises(ValidationError) as info:
            Report.create("user-1", "W", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"}, cron_expression="0 25 * * *")
        assert info.value.errors[0][0] == "cron_expression"

    @pytest.mark.parametrize("result", [None, [], "done"])
    def test_generate_requires_mapping(self, result):
        report = Report.create("user-1", "Team", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"})
        report.release_events()
        with pytest.raises(ValidationError) as info:
            report.generate(result)
        assert info.value.errors[0][0] == "result"
        assert not report.is_generated()
        assert report.release_events() == []

    def test_generate_records_event_every_time(self):
        report = Report.create("user-1", "Team", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"})
        report.release_events()
        report.generate({"a": 1})
        report.generate({"a": 2})
        events = report.release_events()
        assert [type(e) for e in events] == [ReportGenerated, ReportGenerated]
        assert report.result == {"a": 2}
        assert report.generated_at is not None

    def test_schedule_and_unschedule_record_nothing(self):
        report = Report.create("user-1", "Team", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"})
        report.release_events()
        report.schedule("0 9 * * 1")
        assert report.is_scheduled()
        report.unschedule()
        assert not report.is_scheduled()
        assert report.cron_expression is None
        assert report.peek_events() == []

    def test_update_revalidates(self):
        report = Report.create("user-1", "Team", ReportTypeEnum.TEAM_OVERVIEW, {"teamId": "t"})
        with pytest.raises(ValidationError):
            report.update("Team", {"other": 1})
        assert report.parameters == {"teamId": "t"}


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class TestNotification:
    def test_create_records_event(self):
        notification = Notification.create("user-1", NotificationTypeEnum.SYSTEM_UPDATE, " Hi ", " Hello ")
        assert (notification.title, notification.message) == ("Hi", "Hello")
        assert isinstance(notification.peek_events()[0], NotificationCreated)

    def test_blank_title_and_message(self):
        with pytest.raises(ValidationError) as info:
            Notification.create("user-1", NotificationTypeEnum.SYSTEM_UPDATE, "", "")
        assert len(info.value.errors) == 2

    def test_mark_as_read_is_idempotent(self):
        notification = Notification.create("user-1", NotificationTypeEnum.SYSTEM_UPDATE, "Hi", "Hello")
        notification.release_events()
        notification.mark_as_read()
        notification.mark_as_read()
        assert not notification.is_unread()
        assert [type(e) for e in notification.release_events()] == [NotificationRead]

    def test_expiry_follows_retention(self):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        notification = Notification(
            "n1", "user-1", NotificationTypeEnum.REPORT_GENERATED, "t", "m", created_at=created
        )
        assert not notification.is_expired(created + timedelta(days=7))
        assert notification.is_expired(created + timedelta(days=8))
        assert notification.priority == 1


class TestNotificationPreference:
    def test_defaults_allow_everything(self):
        preference = NotificationPreference.create("user-1", NotificationTypeEnum.PENALTY_CREATED)
        assert preference.is_notification_allowed(EMAIL_CHANNEL)
        assert preference.is_notification_allowed(IN_APP_CHANNEL)
        assert not preference.is_notification_allowed("sms")

    def test_update_records_event_only_on_change(self):
        preference = NotificationPreference.create("user-1", NotificationTypeEnum.PENALTY_CREATED)
        preference.update_preferences(True, True)
        assert preference.peek_events() == []
        preference.update_preferences(False, True)
        event = preference.release_events()[0]
        assert isinstance(event, NotificationPreferenceUpdated)
        assert event.email_enabled is False

    def test_reset_and_clone(self):
        preference = NotificationPreference.create("user-1", NotificationTypeEnum.PENALTY_CREATED, False, False)
        clone = preference.clone_for_type(NotificationTypeEnum.PAYMENT_REMINDER)
        assert clone.notification_type is NotificationTypeEnum.PAYMENT_REMINDER
        assert (clone.email_enabled, clone.in_app_enabled) == (False, False)
        assert clone.id != preference.id
        preference.reset_to_defaults()
        assert preference.email_enabled and preference.in_app_enabled
