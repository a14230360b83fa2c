"""Per-aggregate buffer of recorded domain events.

Aggregates hold an ``EventJournal`` instead of inheriting from an
event-recording base class.  Only the aggregate's own methods record
into it; the repository releases it after a successful save.
"""

from __future__ import annotations

from typing import List

from .events import DomainEvent


class EventJournal:
    """Ordered, single-owner list of pending events."""

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: List[DomainEvent] = []

    def record(self, event: DomainEvent) -> None:
        self._events.append(event)

    def release(self) -> List[DomainEvent]:
        """Return every pending event in recorded order and clear the journal."""
        released, self._events = self._events, []
        return released

    def peek(self) -> List[DomainEvent]:
        """Return a copy of the pending events without clearing them."""
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)

