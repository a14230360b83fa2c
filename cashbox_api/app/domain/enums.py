"""
Enumerations used throughout the cashbox domain.

Each enum is a plain ``str`` enum so that values round-trip through
JSON, SQLite and query parameters unchanged.  Behaviour attached to a
member (labels, colours, retention periods, permissions, ...) lives in
module-level lookup tables keyed by member and is exposed through
properties, so adding a member means adding one row to each table.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Union


class CurrencyEnum(str, Enum):
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    CHF = "CHF"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    def format_amount(self, amount: int) -> str:
        """Render an amount in minor units, e.g. ``150`` -> ``"1.50 €"``."""
        number = f"{amount / 100:,.2f}"
        if self in _SYMBOL_FIRST:
            return f"{self.symbol}{number}"
        return f"{number} {self.symbol}"


_CURRENCY_SYMBOLS: Dict[CurrencyEnum, str] = {
    CurrencyEnum.EUR: "€",
    CurrencyEnum.USD: "$",
    CurrencyEnum.GBP: "£",
    CurrencyEnum.CHF: "CHF",
}
_SYMBOL_FIRST = {CurrencyEnum.USD, CurrencyEnum.GBP}


class NotificationTypeEnum(str, Enum):
    PENALTY_CREATED = "penalty_created"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_REMINDER = "payment_reminder"
    BALANCE_UPDATE = "balance_update"
    REPORT_GENERATED = "report_generated"
    SYSTEM_UPDATE = "system_update"

    @property
    def label(self) -> str:
        return _NOTIFICATION_TRAITS[self]["label"]

    @property
    def icon(self) -> str:
        return _NOTIFICATION_TRAITS[self]["icon"]

    @property
    def priority(self) -> int:
        return _NOTIFICATION_TRAITS[self]["priority"]

    @property
    def color(self) -> str:
        return _NOTIFICATION_TRAITS[self]["color"]

    @property
    def action_required(self) -> bool:
        return _NOTIFICATION_TRAITS[self]["action_required"]

    @property
    def default_title(self) -> str:
        return _NOTIFICATION_TRAITS[self]["default_title"]

    @property
    def should_send_email(self) -> bool:
        return _NOTIFICATION_TRAITS[self]["send_email"]

    @property
    def retention_days(self) -> int:
        return _NOTIFICATION_TRAITS[self]["retention_days"]

    @classmethod
    def by_priority(cls, priority: int) -> List["NotificationTypeEnum"]:
        return [member for member in cls if member.priority == priority]

    @classmethod
    def all_for_frontend(cls) -> List[dict]:
        return [
            {
                "value": member.value,
                "label": member.label,
                "icon": member.icon,
                "priority": member.priority,
                "color": member.color,
                "actionRequired": member.action_required,
                "defaultEmailEnabled": member.should_send_email,
                "retentionDays": member.retention_days,
            }
            for member in cls
        ]


_NOTIFICATION_TRAITS: Dict[NotificationTypeEnum, dict] = {
    NotificationTypeEnum.PENALTY_CREATED: {
        "label": "New Penalty", "icon": "exclamation-triangle", "priority": 3,
        "color": "red", "action_required": True,
        "default_title": "New penalty assigned", "send_email": True, "retention_days": 365,
    },
    NotificationTypeEnum.PAYMENT_RECEIVED: {
        "label": "Payment Received", "icon": "check-circle", "priority": 2,
        "color": "green", "action_required": False,
        "default_title": "Payment confirmed", "send_email": True, "retention_days": 365,
    },
    NotificationTypeEnum.PAYMENT_REMINDER: {
        "label": "Payment Reminder", "icon": "clock", "priority": 3,
        "color": "orange", "action_required": True,
        "default_title": "Payment due reminder", "send_email": True, "retention_days": 90,
    },
    NotificationTypeEnum.BALANCE_UPDATE: {
        "label": "Balance Update", "icon": "calculator", "priority": 2,
        "color": "blue", "action_required": False,
        "default_title": "Balance updated", "send_email": False, "retention_days": 30,
    },
    NotificationTypeEnum.REPORT_GENERATED: {
        "label": "Report Ready", "icon": "document-text", "priority": 1,
        "color": "purple", "action_required": False,
        "default_title": "Report ready for download", "send_email": False, "retention_days": 7,
    },
    NotificationTypeEnum.SYSTEM_UPDATE: {
        "label": "System Update", "icon": "cog", "priority": 1,
        "color": "gray", "action_required": False,
        "default_title": "System notification", "send_email": False, "retention_days": 30,
    },
}


class ReportTypeEnum(str, Enum):
    FINANCIAL = "financial"
    PENALTY_SUMMARY = "penalty_summary"
    USER_ACTIVITY = "user_activity"
    TEAM_OVERVIEW = "team_overview"
    PAYMENT_HISTORY = "payment_history"
    AUDIT_LOG = "audit_log"

    @property
    def label(self) -> str:
        return _REPORT_TRAITS[self]["label"]

    @property
    def description(self) -> str:
        return _REPORT_TRAITS[self]["description"]

    @property
    def required_parameters(self) -> List[str]:
        return list(_REPORT_TRAITS[self]["required"])

    @property
    def estimated_execution_time(self) -> int:
        """Expected generation time in seconds."""
        return _REPORT_TRAITS[self]["seconds"]

    @property
    def requires_async(self) -> bool:
        return self.estimated_execution_time > 30

    @property
    def default_format(self) -> str:
        return _REPORT_TRAITS[self]["format"]

    @classmethod
    def all_for_frontend(cls) -> List[dict]:
        return [
            {
                "value": member.value,
                "label": member.label,
                "description": member.description,
                "estimatedTime": member.estimated_execution_time,
                "requiresAsync": member.requires_async,
                "requiredParameters": member.required_parameters,
                "defaultFormat": member.default_format,
            }
            for member in cls
        ]


_REPORT_TRAITS: Dict[ReportTypeEnum, dict] = {
    ReportTypeEnum.FINANCIAL: {
        "label": "Financial Report",
        "description": "Comprehensive financial overview including penalties, payments, and balances",
        "required": ("dateFrom", "dateTo", "teamId"), "seconds": 30, "format": "pdf",
    },
    ReportTypeEnum.PENALTY_SUMMARY: {
        "label": "Penalty Summary",
        "description": "Summary of penalties by type, status, and team member",
        "required": ("dateFrom", "dateTo", "teamId"), "seconds": 15, "format": "pdf",
    },
    ReportTypeEnum.USER_ACTIVITY: {
        "label": "User Activity Report",
        "description": "Detailed user activity including penalties and payments",
        "required": ("userId", "dateFrom", "dateTo"), "seconds": 10, "format": "html",
    },
    ReportTypeEnum.TEAM_OVERVIEW: {
        "label": "Team Overview",
        "description": "Team statistics and member overview",
        "required": ("teamId",), "seconds": 5, "format": "html",
    },
    ReportTypeEnum.PAYMENT_HISTORY: {
        "label": "Payment History",
        "description": "Complete payment history with transactions",
        "required": ("dateFrom", "dateTo", "userId"), "seconds": 20, "format": "excel",
    },
    ReportTypeEnum.AUDIT_LOG: {
        "label": "Audit Log",
        "description": "System audit log with user actions and changes",
        "required": ("dateFrom", "dateTo"), "seconds": 60, "format": "csv",
    },
}


class PenaltyTypeEnum(str, Enum):
    DRINK = "drink"
    LATE_ARRIVAL = "late_arrival"
    MISSED_TRAINING = "missed_training"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        return _PENALTY_LABELS[self]

    @property
    def is_drink(self) -> bool:
        return self is PenaltyTypeEnum.DRINK

    @property
    def default_amount(self) -> int:
        """Default penalty in minor units."""
        return _PENALTY_DEFAULT_AMOUNTS[self]


_PENALTY_LABELS = {
    PenaltyTypeEnum.DRINK: "Drink",
    PenaltyTypeEnum.LATE_ARRIVAL: "Late Arrival",
    PenaltyTypeEnum.MISSED_TRAINING: "Missed Training",
    PenaltyTypeEnum.CUSTOM: "Custom",
}
_PENALTY_DEFAULT_AMOUNTS = {
    PenaltyTypeEnum.DRINK: 150,
    PenaltyTypeEnum.LATE_ARRIVAL: 500,
    PenaltyTypeEnum.MISSED_TRAINING: 1500,
    PenaltyTypeEnum.CUSTOM: 0,
}


class PaymentTypeEnum(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    MOBILE_PAYMENT = "mobile_payment"

    @property
    def label(self) -> str:
        return _PAYMENT_LABELS[self]

    @property
    def requires_reference(self) -> bool:
        return self is not PaymentTypeEnum.CASH


_PAYMENT_LABELS = {
    PaymentTypeEnum.CASH: "Cash",
    PaymentTypeEnum.BANK_TRANSFER: "Bank Transfer",
    PaymentTypeEnum.CREDIT_CARD: "Credit Card",
    PaymentTypeEnum.MOBILE_PAYMENT: "Mobile Payment",
}


class UserRoleEnum(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    TREASURER = "treasurer"
    MEMBER = "member"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]

    @property
    def permissions(self) -> List[str]:
        return list(_ROLE_PERMISSIONS[self])

    @property
    def priority(self) -> int:
        """Higher means more privileged."""
        return _ROLE_PRIORITY[self]

    def has_permission(self, permission: str) -> bool:
        return permission in _ROLE_PERMISSIONS[self]


_ROLE_LABELS = {
    UserRoleEnum.ADMIN: "Administrator",
    UserRoleEnum.MANAGER: "Manager",
    UserRoleEnum.TREASURER: "Treasurer",
    UserRoleEnum.MEMBER: "Member",
}
_ROLE_PERMISSIONS = {
    UserRoleEnum.ADMIN: (
        "team:edit", "user:edit", "penalty:edit", "penalty:delete",
        "contribution:edit", "payment:edit", "report:view",
    ),
    UserRoleEnum.MANAGER: (
        "team:view", "user:view", "penalty:edit", "contribution:view",
        "payment:view", "report:view",
    ),
    UserRoleEnum.TREASURER: (
        "team:view", "user:view", "penalty:view", "contribution:edit",
        "payment:edit", "report:view",
    ),
    UserRoleEnum.MEMBER: ("team:view", "user:view", "penalty:view", "contribution:view"),
}
_ROLE_PRIORITY = {
    UserRoleEnum.ADMIN: 4,
    UserRoleEnum.MANAGER: 3,
    UserRoleEnum.TREASURER: 2,
    UserRoleEnum.MEMBER: 1,
}


DateLike = Union[date, datetime]


def add_months(base: DateLike, months: int) -> DateLike:
    """Shift ``base`` by whole calendar months, clamping the day."""
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return base.replace(year=year, month=month, day=day)


class RecurrencePatternEnum(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUALLY = "semiannually"
    ANNUALLY = "annually"

    @property
    def label(self) -> str:
        return _RECURRENCE_TRAITS[self][0]

    @property
    def interval_days(self) -> int:
        return _RECURRENCE_TRAITS[self][1]

    @property
    def frequency_per_year(self) -> float:
        return _RECURRENCE_TRAITS[self][2]

    def next_date(self, base: DateLike) -> DateLike:
        """Next occurrence after ``base``; month-based patterns use calendar months."""
        months = _RECURRENCE_MONTHS.get(self)
        if months is None:
            return base + timedelta(days=self.interval_days)
        return add_months(base, months)


# label, interval in days, occurrences per year
_RECURRENCE_TRAITS = {
    RecurrencePatternEnum.WEEKLY: ("Weekly", 7, 52.0),
    RecurrencePatternEnum.BIWEEKLY: ("Bi-weekly", 14, 26.0),
    RecurrencePatternEnum.MONTHLY: ("Monthly", 30, 12.0),
    RecurrencePatternEnum.QUARTERLY: ("Quarterly", 90, 4.0),
    RecurrencePatternEnum.SEMIANNUALLY: ("Semi-annually", 180, 2.0),
    RecurrencePatternEnum.ANNUALLY: ("Annually", 365, 1.0),
}
_RECURRENCE_MONTHS = {
    RecurrencePatternEnum.MONTHLY: 1,
    RecurrencePatternEnum.QUARTERLY: 3,
    RecurrencePatternEnum.SEMIANNUALLY: 6,
    RecurrencePatternEnum.ANNUALLY: 12,
}
