"""
Explicit validation helpers for the domain layer.

Validators collect ``(field, message)`` pairs into a ``Violations``
instance and raise a single :class:`ValidationError` at the end, so a
caller sees every problem with its input at once.

This module also holds the cron grammar used by scheduled reports.  An
expression has exactly five whitespace-separated fields (minute, hour,
day of month, month, day of week).  Each field is a comma-separated
list of items; an item is ``*``, a number or a range ``a-b``,
optionally followed by ``/step``.  Numbers must lie within the field's
bounds.  Evaluation against a moment is done by ``croniter``.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from croniter import croniter

from .exceptions import ValidationError


class Violations:
    """Accumulates validation failures for one operation."""

    def __init__(self) -> None:
        self.errors: List[Tuple[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.errors.append((field, message))

    def require_text(self, field: str, value: Optional[str], message: Optional[str] = None) -> None:
        if value is None or not str(value).strip():
            self.add(field, message or f"{field} cannot be empty")

    def check(self, condition: bool, field: str, message: str) -> None:
        if not condition:
            self.add(field, message)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)

    def __bool__(self) -> bool:
        return bool(self.errors)


def missing_parameters(parameters: Mapping[str, Any], required: Sequence[str]) -> List[str]:
    """Names from ``required`` that are absent or blank in ``parameters``."""
    missing = []
    for name in required:
        value = parameters.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


# ---------------------------------------------------------------------------
# Cron expressions
# ---------------------------------------------------------------------------

_CRON_ITEM_RE = re.compile(r"^(\*|\d+(?:-\d+)?)(?:/(\d+))?$")

# name, lowest, highest
_CRON_FIELDS = (
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day_of_month", 1, 31),
    ("month", 1, 12),
    ("day_of_week", 0, 7),
)


class CronSyntaxError(ValueError):
    pass


def _check_field(text: str, name: str, low: int, high: int) -> None:
    for item in text.split(","):
        match = _CRON_ITEM_RE.match(item)
        if not match:
            raise CronSyntaxError(f"{name}: malformed item {item!r}")
        base, step = match.groups()
        if step is not None and int(step) <= 0:
            raise CronSyntaxError(f"{name}: step must be positive")
        if base == "*":
            continue
        bounds = [int(part) for part in base.split("-", 1)]
        if bounds[0] > bounds[-1]:
            raise CronSyntaxError(f"{name}: range {base} is reversed")
        if bounds[0] < low or bounds[-1] > high:
            raise CronSyntaxError(f"{name}: value out of range {low}-{high}")


def parse_cron(expression: str) -> str:
    """Check ``expression`` and return it with single spaces between fields.

    Only the numeric five-field grammar is accepted: no names, no
    ``@`` macros and no seconds field.  The result is also checked by
    :mod:`croniter`, which evaluates it at run time.

    Raises
    ------
    CronSyntaxError
        When the expression does not follow the grammar.
    """
    if not isinstance(expression, str):
        raise CronSyntaxError("expression must be a string")
    parts = expression.split()
    if len(parts) != len(_CRON_FIELDS):
        raise CronSyntaxError(f"expected {len(_CRON_FIELDS)} fields, got {len(parts)}")
    for part, (name, low, high) in zip(parts, _CRON_FIELDS):
        _check_field(part, name, low, high)
    normalised = " ".join(parts)
    if not croniter.is_valid(normalised):
        raise CronSyntaxError(f"invalid cron expression: {normalised!r}")
    return normalised


def is_valid_cron(expression: Optional[str]) -> bool:
    if not expression:
        return False
    try:
        parse_cron(expression)
    except CronSyntaxError:
        return False
    return True


def cron_matches(expression: str, moment: datetime) -> bool:
    """Whether ``expression`` fires in the minute containing ``moment``.

    When both day fields are restricted, either one matching is enough.
    """
    normalised = parse_cron(expression)
    return croniter.match(normalised, moment.replace(second=0, microsecond=0))
