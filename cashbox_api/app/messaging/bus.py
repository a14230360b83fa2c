"""In-process message bus and domain event dispatcher.

Design goals
------------
1.  **Type-routed dispatching**: both the ``MessageBus`` and the
    ``EventDispatcher`` route by the concrete class of what they are
    given, never by string topic.
2.  **Synchronous and ordered**: events released by a repository are
    dispatched one by one, in recorded order, inside the request that
    saved the aggregate.  Subscribers of one event run in registration
    order.
3.  **One handler per message**: the ``MessageBus`` is used for commands,
    queries and notification messages, where exactly one handler is
    responsible and its return value is passed back to the caller.
4.  **Subscriber isolation**: a failing event subscriber is logged and
    kept as a dead letter; the remaining subscribers still run and the
    already committed save is not undone.

This module provides:

*  ``MessageBus`` - register/dispatch with return values.
*  ``EventDispatcher`` - subscribe/dispatch fan-out with history.
*  ``event_dispatcher``, ``command_bus``, ``query_bus`` and
   ``message_bus`` - the process-wide instances wired up by
   ``cashbox_api.app.main.create_app``.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Tuple, Type

from ..domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[DomainEvent], None]
MessageHandler = Callable[[Any], Any]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class NoHandlerError(LookupError):
    """Raised when a message has no registered handler."""


class HandlerAlreadyRegisteredError(ValueError):
    """Raised when a second handler is registered for one message type."""


# ---------------------------------------------------------------------------
# Message bus
# ---------------------------------------------------------------------------

class MessageBus:
    """Routes each message to exactly one handler and returns its result."""

    def __init__(self, name: str = "bus") -> None:
        self.name = name
        self._handlers: Dict[type, MessageHandler] = {}

    def register(self, message_type: type, handler: MessageHandler) -> None:
        if message_type in self._handlers:
            raise HandlerAlreadyRegisteredError(
                f"{self.name}: handler for {message_type.__name__} already registered"
            )
        self._handlers[message_type] = handler

    def has_handler(self, message_type: type) -> bool:
        return message_type in self._handlers

    def dispatch(self, message: Any) -> Any:
        handler = self._handlers.get(type(message))
        if handler is None:
            raise NoHandlerError(f"{self.name}: no handler for {type(message).__name__}")
        logger.debug("%s dispatching %s", self.name, type(message).__name__)
        return handler(message)

    def clear(self) -> None:
        self._handlers.clear()


# ---------------------------------------------------------------------------
# Event dispatcher
# ---------------------------------------------------------------------------

class EventDispatcher:
    """Fans domain events out to subscribers registered for their type.

    Parameters
    ----------
    history_size
        How many dispatched events to keep for inspection.
    """

    def __init__(self, history_size: int = 500) -> None:
        self._subscribers: Dict[Type[DomainEvent], List[EventSubscriber]] = defaultdict(list)
        self._history: Deque[DomainEvent] = deque(maxlen=history_size)
        self._dead_letters: List[Tuple[DomainEvent, str]] = []

    def subscribe(self, event_type: Type[DomainEvent], subscriber: EventSubscriber) -> None:
        self._subscribers[event_type].append(subscriber)

    def dispatch(self, event: DomainEvent) -> None:
        self._history.append(event)
        for subscriber in self._subscribers.get(type(event), []):
            try:
                subscriber(event)
            except Exception as exc:
                self._dead_letters.append((event, str(exc)))
                logger.exception("Subscriber error on %s: %s", event.name, exc)

    def dispatch_all(self, events: Iterable[DomainEvent]) -> None:
        for event in events:
            self.dispatch(event)

    # -- Observability -----------------------------------------------------

    def get_history(self, event_type: Optional[Type[DomainEvent]] = None) -> List[DomainEvent]:
        if event_type is None:
            return list(self._history)
        return [event for event in self._history if type(event) is event_type]

    def clear_history(self) -> None:
        self._history.clear()

    @property
    def dead_letters(self) -> List[Tuple[DomainEvent, str]]:
        return list(self._dead_letters)

    def reset(self) -> None:
        """Drop subscribers, history and dead letters."""
        self._subscribers.clear()
        self._history.clear()
        self._dead_letters.clear()


event_dispatcher = EventDispatcher()
command_bus = MessageBus("command_bus")
query_bus = MessageBus("query_bus")
message_bus = MessageBus("message_bus")
