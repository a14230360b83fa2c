"""Tests for the requests based API client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from cashbox_client import CashboxAPIError, CashboxClient


def _response(status_code: int, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.content = b"" if body is None else b"{}"
    if body is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(session) -> CashboxClient:
    return CashboxClient(base_url="http://cashbox.test/", session=session, timeout=3)


class TestCashboxClient:
    def test_builds_url_and_drops_empty_params(self, api, session):
        session.request.return_value = _response(200, [])
        assert api.list_penalties(team_id="t1", paid=False) == []
        session.request.assert_called_once_with(
            method="GET",
            url="http://cashbox.test/api/v1/penalties/",
            params={"team_id": "t1", "paid": False},
            json=None,
            timeout=3,
        )

    def test_create_penalty_payload(self, api, session):
        session.request.return_value = _response(201, {"id": "p1"})
        assert api.create_penalty("m1", "type1", "Late")["id"] == "p1"
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["json"]["team_user_id"] == "m1"
        assert kwargs["json"]["amount"] is None

    def test_error_detail_is_raised(self, api, session):
        detail = [{"field": "reason", "message": "reason cannot be empty"}]
        session.request.return_value = _response(422, {"detail": detail})
        with pytest.raises(CashboxAPIError) as info:
            api.create_penalty("m1", "type1", "")
        assert info.value.status_code == 422
        assert info.value.detail == detail

    def test_error_without_json_body(self, api, session):
        session.request.return_value = _response(502, text="Bad Gateway")
        with pytest.raises(CashboxAPIError) as info:
            api.get_team("t1")
        assert info.value.detail == "Bad Gateway"

    def test_transport_error(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(CashboxAPIError) as info:
            api.get_team("t1")
        assert info.value.status_code is None

    def test_counters_unwrap_response(self, api, session):
        session.request.side_effect = [
            _response(200, {"count": 4}),
            _response(200, {"generated": 2, "run_at": "2024-07-01T09:00:00Z"}),
            _response(200, {"created": 5}),
        ]
        assert api.unread_count("u1") == 4
        assert api.run_scheduled_reports() == 2
        assert api.run_recurring_contributions() == 5

    def test_apply_contribution_template_payload(self, api, session):
        session.request.return_value = _response(200, {"count": 2})
        result = api.apply_contribution_template("tpl1", ["m1", "m2"], due_date="2024-07-15")
        assert result["count"] == 2
        kwargs = session.request.call_args.kwargs
        assert kwargs["url"] == "http://cashbox.test/api/v1/contribution-templates/tpl1/apply"
        assert kwargs["json"] == {"team_user_ids": ["m1", "m2"], "due_date": "2024-07-15", "amount": None}

    def test_record_contribution_payment_conflict(self, api, session):
        session.request.return_value = _response(409, {"detail": "contribution c1 is already paid"})
        with pytest.raises(CashboxAPIError) as info:
            api.record_contribution_payment("c1", 500)
        assert info.value.status_code == 409
        assert session.request.call_args.kwargs["json"]["contribution_id"] == "c1"
