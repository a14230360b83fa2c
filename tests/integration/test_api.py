"""End-to-end tests through the HTTP API."""

from __future__ import annotations

import pytest

API = "/api/v1"


def _create(client, path, payload, expected=201):
    response = client.post(f"{API}{path}", json=payload)
    assert response.status_code == expected, response.text
    return response.json()


@pytest.fixture
def setup(client):
    """A user in a team with a drink penalty type."""
    user = _create(client, "/users/", {"first_name": "Max", "last_name": "Mustermann", "email": "max@example.com"})
    team = _create(client, "/teams/", {"name": "FC Kneipe", "external_id": "fck-1"})
    member = _create(client, f"/teams/{team['id']}/members", {"user_id": user["id"]})
    drink = _create(client, "/penalty-types/", {"name": "Round of drinks", "type": "drink"})
    return {"user": user, "team": team, "member": member, "drink": drink}


# ---------------------------------------------------------------------------
# Users and teams
# ---------------------------------------------------------------------------

class TestUsersAndTeams:
    def test_user_read_model(self, setup):
        user = setup["user"]
        assert user["full_name"] == "Max Mustermann"
        assert user["initials"] == "MM"

    def test_duplicate_email(self, client, setup):
        response = client.post(f"{API}/users/", json={"first_name": "A", "last_name": "B", "email": "MAX@example.com"})
        assert response.status_code == 422

    def test_invalid_email_returns_field_list(self, client):
        response = client.post(f"{API}/users/", json={"first_name": "A", "last_name": "B", "email": "nope"})
        assert response.status_code == 422
        assert response.json()["detail"][0]["field"] == "email"

    def test_team_member_count_and_rename(self, client, setup):
        team = client.get(f"{API}/teams/{setup['team']['id']}").json()
        assert team["member_count"] == 1

        renamed = client.put(f"{API}/teams/{team['id']}/name", json={"name": "FC Kneipe II"})
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "FC Kneipe II"

    def test_deactivate_twice_conflicts(self, client, setup):
        team_id = setup["team"]["id"]
        assert client.post(f"{API}/teams/{team_id}/deactivate").status_code == 200
        assert client.post(f"{API}/teams/{team_id}/deactivate").status_code == 409

    def test_member_roles(self, client, setup):
        team_id, member_id = setup["team"]["id"], setup["member"]["id"]
        response = client.put(f"{API}/teams/{team_id}/members/{member_id}/roles", json={"roles": ["treasurer"]})
        assert response.status_code == 200
        body = response.json()
        assert body["roles"] == ["treasurer"]
        assert "payment:edit" in body["permissions"]

    def test_unknown_team(self, client):
        assert client.get(f"{API}/teams/missing").status_code == 404


# ---------------------------------------------------------------------------
# Penalties and payments
# ---------------------------------------------------------------------------

class TestPenalties:
    def test_lifecycle(self, client, setup):
        penalty = _create(client, "/penalties/", {
            "team_user_id": setup["member"]["id"],
            "penalty_type_id": setup["drink"]["id"],
            "reason": "Round for the team",
        })
        assert penalty["money"] == {"amount": 150, "currency": "EUR", "formatted": "1.50 €"}
        assert penalty["paid"] is False

        paid = client.post(f"{API}/penalties/{penalty['id']}/pay")
        assert paid.status_code == 200 and paid.json()["paid"]
        assert client.post(f"{API}/penalties/{penalty['id']}/pay").status_code == 409

        archived = client.post(f"{API}/penalties/{penalty['id']}/archive").json()
        assert archived["archived"]
        listed = client.get(f"{API}/penalties/", params={"archived": "false"}).json()
        assert listed == []

    def test_blank_reason(self, client, setup):
        response = client.post(f"{API}/penalties/", json={
            "team_user_id": setup["member"]["id"],
            "penalty_type_id": setup["drink"]["id"],
            "reason": "  ",
        })
        assert response.status_code == 422
        assert response.json()["detail"] == [{"field": "reason", "message": "reason cannot be empty"}]

    def test_penalty_creates_notification(self, client, setup):
        _create(client, "/penalties/", {
            "team_user_id": setup["member"]["id"],
            "penalty_type_id": setup["drink"]["id"],
            "reason": "Late",
            "amount": 500,
        })
        user_id = setup["user"]["id"]
        count = client.get(f"{API}/notifications/unread-count", params={"user_id": user_id}).json()
        assert count == {"count": 1}
        notifications = client.get(f"{API}/notifications/", params={"user_id": user_id}).json()
        assert notifications[0]["type"] == "penalty_created"
        assert notifications[0]["icon"] == "exclamation-triangle"

    def test_deleted_penalty_type_cannot_be_used(self, client, setup):
        drink_id = setup["drink"]["id"]
        assert client.delete(f"{API}/penalty-types/{drink_id}").status_code == 204
        response = client.post(f"{API}/penalties/", json={
            "team_user_id": setup["member"]["id"], "penalty_type_id": drink_id, "reason": "Round",
        })
        assert response.status_code == 409

    def test_payment_reference_required(self, client, setup):
        response = client.post(f"{API}/payments/", json={
            "team_user_id": setup["member"]["id"], "amount": 500, "type": "bank_transfer",
        })
        assert response.status_code == 422
        assert response.json()["detail"][0]["field"] == "reference"

    def test_payment_and_dashboard_balance(self, client, setup):
        _create(client, "/penalties/", {
            "team_user_id": setup["member"]["id"], "penalty_type_id": setup["drink"]["id"],
            "reason": "Late", "amount": 800,
        })
        _create(client, "/payments/", {"team_user_id": setup["member"]["id"], "amount": 300})

        dashboard = client.get(f"{API}/dashboard/users/{setup['user']['id']}").json()
        assert dashboard["balance"] == {"outstanding": 500, "status": "outstanding"}
        assert dashboard["penalties"]["unpaid"] == 1

        team = client.get(f"{API}/dashboard/teams/{setup['team']['id']}").json()
        assert team["financial"]["outstandingBalance"] == 500
        assert team["members"][0]["balance"] == 500


# ---------------------------------------------------------------------------
# Contribution templates and contribution payments
# ---------------------------------------------------------------------------

class TestContributionTemplates:
    def test_apply_duplicate_and_deactivate(self, client, setup):
        team_id = setup["team"]["id"]
        template = _create(client, "/contribution-templates/", {
            "team_id": team_id, "name": "Season fee", "amount": 3000, "due_days": 14,
        })
        applied = client.post(f"{API}/contribution-templates/{template['id']}/apply", json={
            "team_user_ids": [setup["member"]["id"]],
        })
        assert applied.status_code == 200, applied.text
        assert applied.json()["count"] == 1
        assert applied.json()["contributions"][0]["money"]["amount"] == 3000

        copy = _create(client, f"/contribution-templates/{template['id']}/duplicate", {"name": "Season fee 2025"})
        assert copy["id"] != template["id"]
        active = client.get(f"{API}/contribution-templates/teams/{team_id}/active").json()
        assert len(active) == 2

        assert client.delete(f"{API}/contribution-templates/{template['id']}").status_code == 204
        assert client.delete(f"{API}/contribution-templates/{template['id']}").status_code == 409
        assert client.get(f"{API}/contribution-templates/{template['id']}").json()["active"] is False

    def test_apply_without_memberships(self, client, setup):
        template = _create(client, "/contribution-templates/", {
            "team_id": setup["team"]["id"], "name": "Trip", "amount": 900, "due_days": 7,
        })
        response = client.post(f"{API}/contribution-templates/{template['id']}/apply", json={"team_user_ids": []})
        assert response.status_code == 422
        assert response.json()["detail"][0]["field"] == "team_user_ids"


class TestContributionPayments:
    def test_partial_then_full_payment(self, client, setup):
        template = _create(client, "/contribution-templates/", {
            "team_id": setup["team"]["id"], "name": "Season fee", "amount": 3000, "due_days": 14,
        })
        applied = client.post(f"{API}/contribution-templates/{template['id']}/apply", json={
            "team_user_ids": [setup["member"]["id"]],
        }).json()
        contribution_id = applied["contributions"][0]["id"]

        missing_reference = client.post(f"{API}/contribution-payments/", json={
            "contribution_id": contribution_id, "amount": 1000, "payment_method": "mobile_payment",
        })
        assert missing_reference.status_code == 422
        assert missing_reference.json()["detail"][0]["field"] == "reference"

        first = _create(client, "/contribution-payments/", {"contribution_id": contribution_id, "amount": 1000})
        assert first["partial"] is True
        _create(client, "/contribution-payments/", {"contribution_id": contribution_id, "amount": 2000})

        total = client.get(f"{API}/contribution-payments/contributions/{contribution_id}/total").json()
        assert total["amount"] == 3000
        assert client.get(f"{API}/contributions/{contribution_id}").json()["paid"] is True
        late = client.post(f"{API}/contribution-payments/", json={"contribution_id": contribution_id, "amount": 100})
        assert late.status_code == 409


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class TestReports:
    def test_create_generate_and_schedule(self, client, setup):
        report = _create(client, "/reports/", {
            "created_by": setup["user"]["id"],
            "name": "Team overview",
            "type": "team_overview",
            "parameters": {"teamId": setup["team"]["id"]},
        })
        generated = client.post(f"{API}/reports/{report['id']}/generate").json()
        assert generated["result"]["reportType"] == "team_overview"
        assert generated["result"]["team"]["status"] == "active"
        assert generated["generated_at"] is not None

        scheduled = client.put(f"{API}/reports/{report['id']}/schedule", json={"cron_expression": "0 9 * * 1"})
        assert scheduled.json()["scheduled"] is True
        bad = client.put(f"{API}/reports/{report['id']}/schedule", json={"cron_expression": "0 25 * * *"})
        assert bad.status_code == 422
        assert bad.json()["detail"][0]["field"] == "cron_expression"

    def test_missing_parameters(self, client, setup):
        response = client.post(f"{API}/reports/", json={
            "created_by": setup["user"]["id"], "name": "Q1", "type": "financial", "parameters": {"teamId": "x"},
        })
        assert response.status_code == 422
        assert "dateFrom" in response.json()["detail"][0]["message"]

    def test_delete(self, client, setup):
        report = _create(client, "/reports/", {
            "created_by": setup["user"]["id"], "name": "T", "type": "team_overview",
            "parameters": {"teamId": setup["team"]["id"]},
        })
        assert client.delete(f"{API}/reports/{report['id']}").status_code == 204
        assert client.get(f"{API}/reports/{report['id']}").status_code == 404


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

class TestEnums:
    @pytest.mark.parametrize(
        "path, count",
        [
            ("/enums/notification-types", 6),
            ("/enums/report-types", 6),
            ("/enums/penalty-types", 4),
            ("/enums/payment-types", 4),
            ("/enums/currencies", 4),
            ("/enums/roles", 4),
            ("/enums/recurrence-patterns", 6),
        ],
    )
    def test_listings(self, client, path, count):
        response = client.get(f"{API}{path}")
        assert response.status_code == 200
        assert len(response.json()) == count
