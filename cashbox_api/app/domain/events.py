"""Domain events emitted by the cashbox aggregates.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``).
2.  ``event_id`` is a UUID4 generated at creation time and
    ``occurred_at`` is the UTC creation time.
3.  Events are recorded by the owning aggregate only, collected in its
    ``EventJournal`` and released by the repository after a successful
    save, in the order they were recorded.
4.  Payload fields carry identifiers, never aggregate instances.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .ids import new_id, utc_now
from .value_objects import Money


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Immutable base for every domain event."""

    event_id: str = field(default_factory=new_id)
    occurred_at: datetime = field(default_factory=utc_now)

    @property
    def name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["event"] = self.name
        return payload


# ---------------------------------------------------------------------------
# Penalty
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PenaltyCreated(DomainEvent):
    penalty_id: str = ""
    user_id: str = ""
    team_id: str = ""
    reason: str = ""
    money: Optional[Money] = None


@dataclass(frozen=True)
class PenaltyPaid(DomainEvent):
    penalty_id: str = ""
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class PenaltyArchived(DomainEvent):
    penalty_id: str = ""


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TeamCreated(DomainEvent):
    team_id: str = ""
    team_name: str = ""
    external_id: str = ""


@dataclass(frozen=True)
class TeamRenamed(DomainEvent):
    team_id: str = ""
    old_name: str = ""
    new_name: str = ""


@dataclass(frozen=True)
class TeamDeactivated(DomainEvent):
    team_id: str = ""


@dataclass(frozen=True)
class TeamActivated(DomainEvent):
    team_id: str = ""


# ---------------------------------------------------------------------------
# Notification
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NotificationCreated(DomainEvent):
    notification_id: str = ""
    user_id: str = ""
    notification_type: str = ""
    title: str = ""


@dataclass(frozen=True)
class NotificationRead(DomainEvent):
    notification_id: str = ""
    user_id: str = ""


@dataclass(frozen=True)
class NotificationPreferenceUpdated(DomainEvent):
    preference_id: str = ""
    user_id: str = ""
    notification_type: str = ""
    email_enabled: bool = True
    in_app_enabled: bool = True


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReportCreated(DomainEvent):
    report_id: str = ""
    created_by: str = ""
    report_type: str = ""
    report_name: str = ""


@dataclass(frozen=True)
class ReportGenerated(DomainEvent):
    report_id: str = ""
    created_by: str = ""
    report_type: str = ""
    report_name: str = ""


# ---------------------------------------------------------------------------
# Contribution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContributionCreated(DomainEvent):
    contribution_id: str = ""
    user_id: str = ""
    team_id: str = ""
    money: Optional[Money] = None


@dataclass(frozen=True)
class ContributionPaid(DomainEvent):
    contribution_id: str = ""
    user_id: str = ""
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class ContributionTemplateCreated(DomainEvent):
    template_id: str = ""
    team_id: str = ""
    template_name: str = ""
    money: Optional[Money] = None


@dataclass(frozen=True)
class ContributionTemplateApplied(DomainEvent):
    template_id: str = ""
    team_id: str = ""
    applied_count: int = 0


@dataclass(frozen=True)
class ContributionPaymentRecorded(DomainEvent):
    payment_id: str = ""
    contribution_id: str = ""
    user_id: str = ""
    money: Optional[Money] = None
