"""Tests for the in-process message bus and the event dispatcher."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from cashbox_api.app.domain.events import PenaltyCreated, PenaltyPaid, TeamCreated
from cashbox_api.app.messaging.bus import (
    EventDispatcher,
    HandlerAlreadyRegisteredError,
    MessageBus,
    NoHandlerError,
)
from cashbox_api.app.messaging.messages import PenaltyCreatedMessage, PenaltyPaidMessage
from cashbox_api.app.messaging.subscribers import PenaltyEventSubscriber


@dataclass(frozen=True)
class Ping:
    value: int


# ---------------------------------------------------------------------------
# MessageBus
# ---------------------------------------------------------------------------

class TestMessageBus:
    def test_dispatch_returns_handler_result(self):
        bus = MessageBus("test")
        bus.register(Ping, lambda message: message.value * 2)
        assert bus.has_handler(Ping)
        assert bus.dispatch(Ping(21)) == 42

    def test_second_handler_rejected(self):
        bus = MessageBus()
        bus.register(Ping, lambda message: None)
        with pytest.raises(HandlerAlreadyRegisteredError):
            bus.register(Ping, lambda message: None)

    def test_unknown_message(self):
        with pytest.raises(NoHandlerError):
            MessageBus().dispatch(Ping(1))

    def test_handler_errors_propagate(self):
        bus = MessageBus()

        def boom(message):
            raise RuntimeError("boom")

        bus.register(Ping, boom)
        with pytest.raises(RuntimeError):
            bus.dispatch(Ping(1))

    def test_clear(self):
        bus = MessageBus()
        bus.register(Ping, lambda message: None)
        bus.clear()
        assert not bus.has_handler(Ping)


# ---------------------------------------------------------------------------
# EventDispatcher
# ---------------------------------------------------------------------------

class TestEventDispatcher:
    def test_routes_by_exact_type_in_registration_order(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.subscribe(PenaltyCreated, lambda e: calls.append(("first", e.penalty_id)))
        dispatcher.subscribe(PenaltyCreated, lambda e: calls.append(("second", e.penalty_id)))
        dispatcher.subscribe(PenaltyPaid, lambda e: calls.append(("paid", e.penalty_id)))

        dispatcher.dispatch(PenaltyCreated(penalty_id="p1"))
        assert calls == [("first", "p1"), ("second", "p1")]

    def test_failing_subscriber_is_isolated(self):
        dispatcher = EventDispatcher()
        calls = []

        def broken(event):
            raise ValueError("broken subscriber")

        dispatcher.subscribe(TeamCreated, broken)
        dispatcher.subscribe(TeamCreated, lambda e: calls.append(e.team_id))
        event = TeamCreated(team_id="t1")
        dispatcher.dispatch(event)

        assert calls == ["t1"]
        assert dispatcher.dead_letters == [(event, "broken subscriber")]

    def test_history(self):
        dispatcher = EventDispatcher(history_size=2)
        events = [TeamCreated(team_id=str(i)) for i in range(3)]
        dispatcher.dispatch_all(events)
        dispatcher.dispatch(PenaltyPaid(penalty_id="p"))
        assert [e.name for e in dispatcher.get_history()] == ["TeamCreated", "PenaltyPaid"]
        assert len(dispatcher.get_history(PenaltyPaid)) == 1
        dispatcher.reset()
        assert dispatcher.get_history() == []


class TestPenaltyEventSubscriber:
    def test_translates_events_into_messages(self):
        dispatcher = EventDispatcher()
        bus = MessageBus()
        received = []
        bus.register(PenaltyCreatedMessage, received.append)
        bus.register(PenaltyPaidMessage, received.append)
        PenaltyEventSubscriber(bus).subscribe(dispatcher)

        dispatcher.dispatch(PenaltyCreated(penalty_id="p1"))
        dispatcher.dispatch(PenaltyPaid(penalty_id="p1"))

        assert received == [PenaltyCreatedMessage(penalty_id="p1"), PenaltyPaidMessage(penalty_id="p1")]
