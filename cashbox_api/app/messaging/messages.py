"""Messages carried on the in-process ``message_bus``.

Subscribers translate domain events into these small, identifier-only
messages; handlers in :mod:`.handlers` then load whatever they need
from the repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PenaltyCreatedMessage:
    penalty_id: str


@dataclass(frozen=True)
class PenaltyPaidMessage:
    penalty_id: str


@dataclass(frozen=True)
class ContributionNotificationMessage:
    contribution_id: str
    paid: bool = False


@dataclass(frozen=True)
class ReportGenerationMessage:
    report_id: str
    parameters: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class NotificationMessage:
    user_id: str
    type: str
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
