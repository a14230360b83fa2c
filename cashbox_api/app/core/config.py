"""
Application configuration.

``Settings`` is a plain dataclass whose defaults are read from
environment variables when this module is first imported.  Set the
variables before importing anything from ``cashbox_api``; tests that
need a different database patch ``settings.database_url`` directly.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Team Cashbox API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # SQLite database file.  Relative paths are resolved against the
    # project root by ``core.db``.
    database_url: str = os.getenv("DATABASE_URL", "cashbox.db")

    # Currency used when a request does not name one.
    default_currency: str = os.getenv("DEFAULT_CURRENCY", "EUR")

    # Sender address stamped on outgoing notification e-mails.
    notification_sender: str = os.getenv("NOTIFICATION_SENDER", "notifications@cashbox.example.com")

    # Amount in minor units used for recurring contributions when a
    # type has no previous contribution to copy the amount from.
    recurring_contribution_amount: int = int(os.getenv("RECURRING_CONTRIBUTION_AMOUNT", "5000"))

    # Optional HTTP mail relay.  When unset, e-mails are only logged.
    mail_relay_url: Optional[str] = os.getenv("MAIL_RELAY_URL") or None
    mail_relay_timeout: float = float(os.getenv("MAIL_RELAY_TIMEOUT", "10"))


settings = Settings()
