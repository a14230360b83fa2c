"""Tests for the penalty, team, payment and contribution aggregates."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from cashbox_api.app.domain.contribution import (
    Contribution,
    ContributionPayment,
    ContributionTemplate,
    ContributionType,
)
from cashbox_api.app.domain.enums import (
    CurrencyEnum,
    PaymentTypeEnum,
    RecurrencePatternEnum,
    UserRoleEnum,
)
from cashbox_api.app.domain.event_journal import EventJournal
from cashbox_api.app.domain.events import (
    ContributionCreated,
    ContributionPaid,
    ContributionPaymentRecorded,
    ContributionTemplateApplied,
    ContributionTemplateCreated,
    PenaltyArchived,
    PenaltyCreated,
    PenaltyPaid,
    TeamCreated,
    TeamDeactivated,
    TeamRenamed,
)
from cashbox_api.app.domain.exceptions import (
    AlreadyArchivedError,
    AlreadyPaidError,
    InvalidStateError,
    ValidationError,
)
from cashbox_api.app.domain.payment import Payment
from cashbox_api.app.domain.penalty import Penalty, PenaltyType
from cashbox_api.app.domain.team import Team, TeamUser
from cashbox_api.app.domain.value_objects import Money


# ---------------------------------------------------------------------------
# Event journal
# ---------------------------------------------------------------------------

class TestEventJournal:
    def test_release_returns_in_order_and_clears(self):
        journal = EventJournal()
        first, second = TeamCreated(team_id="a"), TeamDeactivated(team_id="a")
        journal.record(first)
        journal.record(second)
        assert journal.peek() == [first, second]
        assert journal.release() == [first, second]
        assert len(journal) == 0
        assert journal.release() == []

    def test_event_to_dict_names_the_event(self):
        payload = TeamCreated(team_id="t1", team_name="FC", external_id="x").to_dict()
        assert payload["event"] == "TeamCreated"
        assert payload["team_id"] == "t1"


# ---------------------------------------------------------------------------
# Penalty
# ---------------------------------------------------------------------------

class TestPenaltyType:
    def test_uses_enum_default_amount(self, drink_type):
        assert drink_type.default_amount == 150
        assert drink_type.is_drink
        assert drink_type.default_money(CurrencyEnum.CHF) == Money(150, CurrencyEnum.CHF)

    def test_explicit_default_amount(self):
        penalty_type = PenaltyType.create("Late", "late_arrival", default_amount=700)
        assert penalty_type.default_amount == 700

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            PenaltyType.create("  ", "custom")

    def test_deactivate_twice_raises(self, drink_type):
        drink_type.deactivate()
        with pytest.raises(InvalidStateError):
            drink_type.deactivate()


class TestPenalty:
    def test_create_records_event(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "  Round for the team ", eur_5)
        assert penalty.reason == "Round for the team"
        assert penalty.user_id == member.user_id
        assert penalty.team_id == member.team_id
        assert not penalty.is_paid
        events = penalty.peek_events()
        assert len(events) == 1
        assert isinstance(events[0], PenaltyCreated)
        assert events[0].money == eur_5

    def test_blank_reason_rejected(self, member, drink_type, eur_5):
        with pytest.raises(ValidationError) as info:
            Penalty.create(member, drink_type, "   ", eur_5)
        assert info.value.errors == [("reason", "reason cannot be empty")]

    def test_pay_then_archive(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "Late", eur_5)
        penalty.release_events()
        paid_at = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        penalty.pay(paid_at)
        penalty.archive()
        assert penalty.paid_at == paid_at
        assert penalty.archived
        assert [type(e) for e in penalty.release_events()] == [PenaltyPaid, PenaltyArchived]

    def test_pay_twice_raises_without_new_event(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "Late", eur_5)
        penalty.pay()
        penalty.release_events()
        with pytest.raises(AlreadyPaidError):
            penalty.pay()
        assert penalty.peek_events() == []

    def test_archive_twice_raises(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "Late", eur_5)
        penalty.archive()
        with pytest.raises(AlreadyArchivedError):
            penalty.archive()

    def test_unpaid_archived_penalty_can_still_be_paid(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "Late", eur_5)
        penalty.archive()
        penalty.pay()
        assert penalty.is_paid and penalty.archived

    def test_naive_paid_at_becomes_utc(self, member, drink_type, eur_5):
        penalty = Penalty.create(member, drink_type, "Late", eur_5)
        penalty.pay(datetime(2024, 3, 1, 12, 0))
        assert penalty.paid_at.tzinfo is timezone.utc


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

class TestTeam:
    def test_create_records_event(self, team):
        events = team.peek_events()
        assert isinstance(events[0], TeamCreated)
        assert events[0].external_id == "fck-1"

    def test_create_reports_both_blank_fields(self):
        with pytest.raises(ValidationError) as info:
            Team.create("", "")
        assert {field for field, _ in info.value.errors} == {"name", "external_id"}

    def test_rename(self, team):
        team.release_events()
        team.rename("FC Kneipe II")
        event = team.release_events()[0]
        assert isinstance(event, TeamRenamed)
        assert (event.old_name, event.new_name) == ("FC Kneipe", "FC Kneipe II")

    def test_rename_to_same_name_rejected(self, team):
        with pytest.raises(ValidationError):
            team.rename("FC Kneipe")

    def test_deactivate_twice_raises(self, team):
        team.deactivate()
        with pytest.raises(InvalidStateError):
            team.deactivate()

    def test_metadata(self, team):
        team.set_metadata("league", "Kreisliga")
        team.remove_metadata("league")
        team.remove_metadata("missing")
        assert team.metadata == {}


class TestTeamUser:
    def test_defaults_to_member_role(self, member):
        assert member.roles == [UserRoleEnum.MEMBER]
        assert member.highest_role is UserRoleEnum.MEMBER

    def test_inactive_team_rejects_members(self, team):
        team.deactivate()
        with pytest.raises(InvalidStateError):
            TeamUser.create(team, "user-2")

    def test_highest_role_and_permissions(self, member):
        member.add_role(UserRoleEnum.TREASURER)
        member.add_role(UserRoleEnum.TREASURER)
        assert member.roles == [UserRoleEnum.MEMBER, UserRoleEnum.TREASURER]
        assert member.highest_role is UserRoleEnum.TREASURER
        assert member.has_permission("payment:edit")

    def test_last_role_cannot_be_removed(self, member):
        with pytest.raises(InvalidStateError):
            member.remove_role(UserRoleEnum.MEMBER)


# ---------------------------------------------------------------------------
# Payment
# ---------------------------------------------------------------------------

class TestPayment:
    def test_cash_needs_no_reference(self, member, eur_5):
        payment = Payment.create(member, eur_5)
        assert payment.type is PaymentTypeEnum.CASH
        assert payment.formatted_amount == "5.00 €"

    def test_transfer_needs_reference(self, member, eur_5):
        with pytest.raises(ValidationError) as info:
            Payment.create(member, eur_5, PaymentTypeEnum.BANK_TRANSFER)
        assert info.value.errors[0][0] == "reference"

    def test_zero_amount_rejected(self, member):
        with pytest.raises(ValidationError):
            Payment.create(member, Money(0))


# ---------------------------------------------------------------------------
# Contribution
# ---------------------------------------------------------------------------

class TestContribution:
    def test_recurring_type_needs_pattern(self):
        with pytest.raises(ValidationError):
            ContributionType.create("Fee", recurring=True)

    def test_one_off_type_has_no_next_date(self):
        assert ContributionType.create("Trip").next_due_date(date(2024, 1, 1)) is None

    def test_monthly_next_date(self):
        fee = ContributionType.create("Fee", recurring=True, recurrence_pattern=RecurrencePatternEnum.MONTHLY)
        assert fee.next_due_date(date(2024, 1, 31)) == date(2024, 2, 29)

    def test_pay_and_overdue(self, member):
        fee = ContributionType.create("Fee")
        contribution = Contribution.create(member, fee, "January", Money(5000), date(2024, 1, 31))
        assert isinstance(contribution.release_events()[0], ContributionCreated)
        assert contribution.is_overdue(date(2024, 2, 1))
        assert not contribution.is_overdue(date(2024, 1, 31))
        contribution.pay()
        assert isinstance(contribution.release_events()[0], ContributionPaid)
        assert not contribution.is_overdue(date(2024, 2, 1))
        with pytest.raises(InvalidStateError):
            contribution.pay()

    def test_inactive_contribution_is_never_overdue(self, member):
        contribution = Contribution.create(member, ContributionType.create("Fee"), "Jan", Money(100), date(2024, 1, 1))
        contribution.deactivate()
        assert not contribution.is_overdue(date(2024, 6, 1))


# ---------------------------------------------------------------------------
# Contribution templates
# ---------------------------------------------------------------------------

@pytest.fixture
def template(team) -> ContributionTemplate:
    return ContributionTemplate.create(team, "Season fee", Money(3000), due_days=14)


class TestContributionTemplate:
    def test_create_records_event(self, template, team):
        event = template.release_events()[0]
        assert isinstance(event, ContributionTemplateCreated)
        assert event.template_name == "Season fee"
        assert event.team_id == team.id

    def test_create_reports_every_problem(self, team):
        with pytest.raises(ValidationError) as info:
            ContributionTemplate.create(team, " ", Money(0), recurring=True, due_days=-1)
        fields = [field for field, _ in info.value.errors]
        assert fields == ["name", "amount", "due_days", "recurrence_pattern"]

    def test_inactive_team_rejects_templates(self, team):
        team.deactivate()
        with pytest.raises(InvalidStateError):
            ContributionTemplate.create(team, "Fee", Money(100))

    def test_duplicate_is_a_fresh_template(self, template):
        template.release_events()
        copy = template.duplicate("Season fee 2025")
        assert copy.id != template.id
        assert copy.money == template.money
        assert copy.due_days == 14
        assert isinstance(copy.release_events()[0], ContributionTemplateCreated)
        assert template.peek_events() == []

    def test_deactivate_twice_raises(self, template):
        template.deactivate()
        with pytest.raises(InvalidStateError):
            template.deactivate()

    def test_due_date_from(self, template, team):
        assert template.due_date_from(date(2024, 7, 1)) == date(2024, 7, 15)
        open_ended = ContributionTemplate.create(team, "Trip", Money(100))
        assert open_ended.due_date_from(date(2024, 7, 1)) is None

    def test_apply_skips_other_teams_and_inactive_members(self, template, team, member):
        fee = ContributionType.create("Season fee")
        other = TeamUser.create(Team.create("SV Nord", "svn-1"), "user-2")
        gone = TeamUser.create(team, "user-3")
        gone.deactivate()
        template.release_events()

        contributions = template.apply_to([member, other, gone], fee, date(2024, 7, 15))

        assert [c.team_user_id for c in contributions] == [member.id]
        assert contributions[0].money == Money(3000)
        assert contributions[0].description == "Season fee"
        event = template.release_events()[0]
        assert isinstance(event, ContributionTemplateApplied)
        assert event.applied_count == 1

    def test_apply_with_amount_override(self, template, member):
        fee = ContributionType.create("Season fee")
        contribution, = template.apply_to([member], fee, date(2024, 7, 15), amount=1500, description="Half")
        assert contribution.money == Money(1500, template.money.currency)
        assert contribution.description == "Half"

    def test_inactive_template_cannot_be_applied(self, template, member):
        template.deactivate()
        with pytest.raises(InvalidStateError):
            template.apply_to([member], ContributionType.create("Fee"), date(2024, 7, 15))


# ---------------------------------------------------------------------------
# Contribution payments
# ---------------------------------------------------------------------------

@pytest.fixture
def contribution(member) -> Contribution:
    return Contribution.create(member, ContributionType.create("Fee"), "July", Money(5000), date(2024, 7, 31))


class TestContributionPayment:
    def test_partial_payment_records_event(self, contribution):
        payment = ContributionPayment.create(contribution, Money(2000), PaymentTypeEnum.CASH)
        assert payment.user_id == contribution.user_id
        assert payment.is_partial_for(contribution)
        event = payment.release_events()[0]
        assert isinstance(event, ContributionPaymentRecorded)
        assert event.contribution_id == contribution.id

    def test_full_payment_is_not_partial(self, contribution):
        payment = ContributionPayment.create(contribution, Money(5000))
        assert not payment.is_partial_for(contribution)

    def test_currency_must_match(self, contribution):
        with pytest.raises(ValidationError) as info:
            ContributionPayment.create(contribution, Money(100, CurrencyEnum.CHF))
        assert info.value.errors[0][0] == "currency"

    def test_transfer_needs_reference(self, contribution):
        with pytest.raises(ValidationError) as info:
            ContributionPayment.create(contribution, Money(100), PaymentTypeEnum.BANK_TRANSFER, "  ")
        assert info.value.errors[0][0] == "reference"

    def test_blank_reference_is_dropped(self, contribution):
        payment = ContributionPayment.create(contribution, Money(100), PaymentTypeEnum.CASH, "  ")
        assert payment.reference is None

    def test_paid_contribution_rejects_payments(self, contribution):
        contribution.pay()
        with pytest.raises(InvalidStateError):
            ContributionPayment.create(contribution, Money(100))

    def test_inactive_contribution_rejects_payments(self, contribution):
        contribution.deactivate()
        with pytest.raises(InvalidStateError):
            ContributionPayment.create(contribution, Money(100))

    def test_update_checks_reference(self, contribution):
        payment = ContributionPayment.create(contribution, Money(100))
        with pytest.raises(ValidationError):
            payment.update(PaymentTypeEnum.MOBILE_PAYMENT)
        payment.update(PaymentTypeEnum.MOBILE_PAYMENT, "MP-1", "via app")
        assert payment.reference == "MP-1"
        assert payment.money == Money(100)
