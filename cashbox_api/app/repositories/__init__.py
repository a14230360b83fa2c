"""
SQLite-backed repositories, one per aggregate.

Repositories are the only code that touches the database tables and
the only code that releases domain events from an aggregate.
"""

from .contribution_repository import (
    ContributionPaymentRepository,
    ContributionRepository,
    ContributionTemplateRepository,
    ContributionTypeRepository,
)
from .notification_repository import NotificationPreferenceRepository, NotificationRepository
from .payment_repository import PaymentRepository
from .penalty_repository import PenaltyRepository, PenaltyTypeRepository
from .report_repository import ReportRepository
from .team_repository import TeamRepository, TeamUserRepository
from .user_repository import UserRepository

__all__ = [
    "ContributionPaymentRepository",
    "ContributionRepository",
    "ContributionTemplateRepository",
    "ContributionTypeRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "PaymentRepository",
    "PenaltyRepository",
    "PenaltyTypeRepository",
    "ReportRepository",
    "TeamRepository",
    "TeamUserRepository",
    "UserRepository",
]
