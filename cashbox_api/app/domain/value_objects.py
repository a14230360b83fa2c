"""
Immutable value objects.

``Money`` stores amounts in integer minor units (cents) together with a
currency, so no floating point arithmetic ever touches a balance.  The
remaining objects normalise user-supplied contact data at construction
time and reject anything they cannot normalise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .enums import CurrencyEnum
from .exceptions import CurrencyMismatchError, NegativeAmountError, ValidationError


@dataclass(frozen=True)
class Money:
    """A non-negative amount in minor units of ``currency``."""

    amount: int
    currency: CurrencyEnum = CurrencyEnum.EUR

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError.single("amount", "amount must be an integer number of minor units")
        if self.amount < 0:
            raise NegativeAmountError(f"amount cannot be negative: {self.amount}")
        if not isinstance(self.currency, CurrencyEnum):
            # Accept raw codes such as "EUR" coming from storage or JSON.
            try:
                object.__setattr__(self, "currency", CurrencyEnum(self.currency))
            except ValueError:
                raise ValidationError.single("currency", f"unsupported currency: {self.currency}")

    @classmethod
    def zero(cls, currency: CurrencyEnum = CurrencyEnum.EUR) -> "Money":
        return cls(0, currency)

    @classmethod
    def total(cls, amounts: Iterable["Money"], currency: CurrencyEnum = CurrencyEnum.EUR) -> "Money":
        """Sum ``amounts``; an empty iterable gives zero in ``currency``."""
        result = cls.zero(currency)
        for item in amounts:
            result = result.add(item)
        return result

    def _require_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"cannot combine {self.currency.value} with {other.currency.value}"
            )

    def add(self, other: "Money") -> "Money":
        self._require_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._require_same_currency(other)
        if other.amount > self.amount:
            raise NegativeAmountError(
                f"subtracting {other.amount} from {self.amount} would be negative"
            )
        return Money(self.amount - other.amount, self.currency)

    def multiply(self, factor: float) -> "Money":
        """Scale by ``factor``, rounding to the nearest minor unit."""
        return Money(int(round(self.amount * factor)), self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def format(self) -> str:
        return self.currency.format_amount(self.amount)

    def to_dict(self) -> dict:
        return {"amount": self.amount, "currency": self.currency.value, "formatted": self.format()}

    def __str__(self) -> str:
        return self.format()


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self) -> None:
        normalised = (self.value or "").strip().lower()
        if not _EMAIL_RE.match(normalised):
            raise ValidationError.single("email", f"invalid email address: {self.value!r}")
        object.__setattr__(self, "value", normalised)

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    def __str__(self) -> str:
        return self.value


_PHONE_STRIP_RE = re.compile(r"[^0-9+]")


@dataclass(frozen=True)
class PhoneNumber:
    value: str

    def __post_init__(self) -> None:
        cleaned = _PHONE_STRIP_RE.sub("", self.value or "")
        if not 7 <= len(cleaned) <= 20:
            raise ValidationError.single("phone", f"invalid phone number: {self.value!r}")
        object.__setattr__(self, "value", cleaned)

    @property
    def formatted(self) -> str:
        """German numbers are grouped as ``+49 123 4567890``."""
        if self.value.startswith("+49") and len(self.value) > 6:
            return f"+49 {self.value[3:6]} {self.value[6:]}"
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PersonName:
    first_name: str
    last_name: str

    def __post_init__(self) -> None:
        first = (self.first_name or "").strip()
        last = (self.last_name or "").strip()
        errors = []
        if not first:
            errors.append(("first_name", "first name cannot be empty"))
        if not last:
            errors.append(("last_name", "last name cannot be empty"))
        if errors:
            raise ValidationError(errors)
        object.__setattr__(self, "first_name", first)
        object.__setattr__(self, "last_name", last)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[0]}{self.last_name[0]}".upper()

    def __str__(self) -> str:
        return self.full_name


def optional_email(value: Optional[str]) -> Optional[Email]:
    return Email(value) if value else None


def optional_phone(value: Optional[str]) -> Optional[PhoneNumber]:
    return PhoneNumber(value) if value else None
