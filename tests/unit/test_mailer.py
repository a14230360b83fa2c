"""Tests for the e-mail relay client."""

from __future__ import annotations

import json

import httpx

from cashbox_api.app.services.mailer import Mailer


def _client(status_code: int, seen: list) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(status_code)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestMailer:
    def test_without_relay_only_logs(self, caplog):
        mailer = Mailer(relay_url="", sender="kasse@example.com")
        with caplog.at_level("INFO", logger="cashbox_api.mail"):
            assert mailer.send("max@example.com", "Subject", "Body")
        assert "max@example.com" in caplog.text

    def test_posts_to_relay(self):
        seen = []
        mailer = Mailer(relay_url="https://relay.test/send", sender="kasse@example.com", client=_client(202, seen))
        assert mailer.send("max@example.com", "Cashbox: hi", "Body")
        assert seen == [{
            "from": "kasse@example.com",
            "to": "max@example.com",
            "subject": "Cashbox: hi",
            "body": "Body",
        }]

    def test_relay_error_returns_false(self):
        mailer = Mailer(relay_url="https://relay.test/send", client=_client(500, []))
        assert mailer.send("max@example.com", "s", "b") is False
