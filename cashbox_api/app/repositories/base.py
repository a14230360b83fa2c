"""
Shared plumbing for the SQLite repositories.

Each repository maps one aggregate to one table.  ``save`` upserts the
row, commits, and only then releases the aggregate's pending events to
the event dispatcher in recorded order.  If the write fails the events
stay in the aggregate's journal and nothing is dispatched.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, Generic, Iterable, List, Optional, Protocol, Sequence, TypeVar

from ..core.db import get_connection
from ..domain.exceptions import NotFoundError
from ..messaging.bus import EventDispatcher, event_dispatcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Protocol[T]):
    """Persistence contract every aggregate repository fulfils."""

    def find(self, entity_id: str) -> Optional[T]: ...

    def get(self, entity_id: str) -> T: ...

    def save(self, entity: T) -> None: ...


def dump_json(value: Any) -> str:
    return json.dumps(value if value is not None else {}, default=str)


def load_json(value: Optional[str], default: Any = None) -> Any:
    if value in (None, ""):
        return {} if default is None else default
    return json.loads(value)


class SqliteRepository(Generic[T]):
    """Base class: subclasses set ``table``/``entity_name`` and implement row mapping."""

    table: str = ""
    entity_name: str = "Entity"
    default_order: str = "created_at"

    def __init__(self, dispatcher: Optional[EventDispatcher] = None) -> None:
        self.dispatcher = dispatcher if dispatcher is not None else event_dispatcher

    # -- mapping hooks -----------------------------------------------------

    def _to_row(self, entity: T) -> Dict[str, Any]:
        raise NotImplementedError

    def _from_row(self, row: sqlite3.Row) -> T:
        raise NotImplementedError

    # -- reads -------------------------------------------------------------

    def _fetch(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        conn = get_connection()
        try:
            return conn.execute(sql, tuple(params)).fetchall()
        finally:
            conn.close()

    def _select(self, where: str = "", params: Sequence[Any] = (), order: Optional[str] = None,
                limit: Optional[int] = None, offset: Optional[int] = None) -> List[T]:
        sql = f"SELECT * FROM {self.table}"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order or self.default_order}"
        params = list(params)
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
            if offset:
                sql += " OFFSET ?"
                params.append(offset)
        return [self._from_row(row) for row in self._fetch(sql, params)]

    def _scalar(self, sql: str, params: Sequence[Any] = ()) -> Any:
        rows = self._fetch(sql, params)
        return rows[0][0] if rows else None

    def find(self, entity_id: str) -> Optional[T]:
        rows = self._fetch(f"SELECT * FROM {self.table} WHERE id = ?", (entity_id,))
        return self._from_row(rows[0]) if rows else None

    def get(self, entity_id: str) -> T:
        entity = self.find(entity_id)
        if entity is None:
            raise NotFoundError(self.entity_name, entity_id)
        return entity

    def all(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[T]:
        return self._select(limit=limit, offset=offset)

    def count(self, where: str = "", params: Sequence[Any] = ()) -> int:
        sql = f"SELECT COUNT(*) FROM {self.table}"
        if where:
            sql += f" WHERE {where}"
        return int(self._scalar(sql, params) or 0)

    # -- writes ------------------------------------------------------------

    def save(self, entity: T) -> None:
        row = self._to_row(entity)
        columns = list(row)
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{column} = excluded.{column}" for column in columns if column != "id")
        sql = (
            f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}"
        )
        conn = get_connection()
        try:
            conn.execute(sql, tuple(row[column] for column in columns))
            conn.commit()
        finally:
            conn.close()
        self._publish(entity)

    def delete(self, entity_id: str) -> bool:
        conn = get_connection()
        try:
            cursor = conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (entity_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def _publish(self, entity: T) -> None:
        release = getattr(entity, "release_events", None)
        if release is None:
            return
        events = release()
        if events:
            logger.debug("Dispatching %d event(s) from %s %s", len(events), self.entity_name, getattr(entity, "id", "?"))
            self.dispatcher.dispatch_all(events)


def in_clause(values: Iterable[Any]) -> str:
    return ", ".join("?" for _ in values)
