"""
SQLite database integration and a small migration system.

``get_connection`` opens a connection with name-addressable rows and
foreign keys enabled, ``get_cursor`` wraps one in a commit-or-close
context, and ``init_db`` applies the numbered migrations below that are
newer than the highest version recorded in the ``migrations`` table.

Storage conventions: identifiers are UUID4 strings, timestamps are
ISO-8601 strings with a UTC offset, money is an integer amount of minor
units plus a currency code, and maps are stored as JSON text.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from .config import settings

logger = logging.getLogger(__name__)


def get_database_path() -> str:
    """Return the SQLite file path, resolving relative paths against the project root."""
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # cashbox_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Open a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be addressed by
    name.  Foreign key enforcement is switched on for the lifetime of
    the connection because SQLite leaves it off by default.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: people and teams
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL,
            email TEXT UNIQUE,
            phone TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            preferences TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS teams (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL UNIQUE,
            external_id TEXT NOT NULL UNIQUE,
            active INTEGER NOT NULL DEFAULT 1,
            metadata TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS team_users (
            id TEXT PRIMARY KEY,
            team_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            roles TEXT NOT NULL DEFAULT '["member"]',
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(team_id, user_id),
            FOREIGN KEY(team_id) REFERENCES teams(id) ON DELETE CASCADE,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: penalties and payments
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS penalty_types (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            default_amount INTEGER NOT NULL DEFAULT 0,
            description TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS penalties (
            id TEXT PRIMARY KEY,
            team_user_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            team_id TEXT NOT NULL,
            penalty_type_id TEXT NOT NULL,
            reason TEXT NOT NULL,
            amount INTEGER NOT NULL,
            currency TEXT NOT NULL DEFAULT 'EUR',
            archived INTEGER NOT NULL DEFAULT 0,
            paid_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(team_user_id) REFERENCES team_users(id),
            FOREIGN KEY(penalty_type_id) REFERENCES penalty_types(id)
        );
        CREATE INDEX IF NOT EXISTS idx_penalties_user ON penalties(user_id);
        CREATE INDEX IF NOT EXISTS idx_penalties_team ON penalties(team_id);

        CREATE TABLE IF NOT EXISTS payments (
            id TEXT PRIMARY KEY,
            team_user_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            team_id TEXT NOT NULL,
            amount INTEGER NOT NULL,
            currency TEXT NOT NULL DEFAULT 'EUR',
            type TEXT NOT NULL DEFAULT 'cash',
            description TEXT,
            reference TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(team_user_id) REFERENCES team_users(id)
        );
        CREATE INDEX IF NOT EXISTS idx_payments_user ON payments(user_id);
        """,
    ),
    # Migration 3: contributions
    (
        3,
        """
        CREATE TABLE IF NOT EXISTS contribution_types (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            description TEXT,
            recurring INTEGER NOT NULL DEFAULT 0,
            recurrence_pattern TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS contributions (
            id TEXT PRIMARY KEY,
            team_user_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            team_id TEXT NOT NULL,
            contribution_type_id TEXT NOT NULL,
            description TEXT NOT NULL,
            amount INTEGER NOT NULL,
            currency TEXT NOT NULL DEFAULT 'EUR',
            due_date TEXT NOT NULL,
            paid_at TEXT,
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(team_user_id) REFERENCES team_users(id),
            FOREIGN KEY(contribution_type_id) REFERENCES contribution_types(id)
        );
        CREATE INDEX IF NOT EXISTS idx_contributions_user ON contributions(user_id);
        """,
    ),
    # Migration 4: reports and notifications
    (
        4,
        """
        CREATE TABLE IF NOT EXISTS reports (
            id TEXT PRIMARY KEY,
            created_by TEXT NOT NULL,
            name TEXT NOT NULL,
            type TEXT NOT NULL,
            parameters TEXT NOT NULL,
            result TEXT,
            scheduled INTEGER NOT NULL DEFAULT 0,
            cron_expression TEXT,
            generated_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(created_by) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS notifications (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            type TEXT NOT NULL,
            title TEXT NOT NULL,
            message TEXT NOT NULL,
            data TEXT NOT NULL DEFAULT '{}',
            read INTEGER NOT NULL DEFAULT 0,
            read_at TEXT,
            created_at TEXT NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );
        CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, read);

        CREATE TABLE IF NOT EXISTS notification_preferences (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            notification_type TEXT NOT NULL,
            email_enabled INTEGER NOT NULL DEFAULT 1,
            in_app_enabled INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(user_id, notification_type),
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 5: contribution templates and contribution payments
    (
        5,
        """
        CREATE TABLE IF NOT EXISTS contribution_templates (
            id TEXT PRIMARY KEY,
            team_id TEXT NOT NULL,
            name TEXT NOT NULL,
            description TEXT,
            amount INTEGER NOT NULL,
            currency TEXT NOT NULL DEFAULT 'EUR',
            recurring INTEGER NOT NULL DEFAULT 0,
            recurrence_pattern TEXT,
            due_days INTEGER,
            active INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(team_id) REFERENCES teams(id)
        );
        CREATE INDEX IF NOT EXISTS idx_contribution_templates_team ON contribution_templates(team_id, active);

        CREATE TABLE IF NOT EXISTS contribution_payments (
            id TEXT PRIMARY KEY,
            contribution_id TEXT NOT NULL,
            user_id TEXT NOT NULL,
            amount INTEGER NOT NULL,
            currency TEXT NOT NULL DEFAULT 'EUR',
            payment_method TEXT,
            reference TEXT,
            notes TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(contribution_id) REFERENCES contributions(id)
        );
        CREATE INDEX IF NOT EXISTS idx_contribution_payments_contribution ON contribution_payments(contribution_id);
        """,
    ),
]


def init_db() -> None:
    """Create the database if needed and apply pending migrations.

    To change the schema append a new ``(version, sql)`` pair to
    ``MIGRATIONS``; never edit one that has shipped.
    """
    with get_cursor() as cursor:
        cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying database migration %s", version)
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                current_version = version
