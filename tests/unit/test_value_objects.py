"""Tests for Money and the contact value objects."""

from __future__ import annotations

import pytest

from cashbox_api.app.domain.enums import CurrencyEnum
from cashbox_api.app.domain.exceptions import (
    CurrencyMismatchError,
    NegativeAmountError,
    ValidationError,
)
from cashbox_api.app.domain.value_objects import Email, Money, PersonName, PhoneNumber


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

class TestMoney:
    def test_negative_amount_rejected(self):
        with pytest.raises(NegativeAmountError):
            Money(-1)

    def test_negative_amount_is_a_validation_error(self):
        with pytest.raises(ValidationError) as info:
            Money(-100)
        assert info.value.errors[0][0] == "amount"

    @pytest.mark.parametrize("amount", [1.5, "100", True])
    def test_non_integer_amount_rejected(self, amount):
        with pytest.raises(ValidationError):
            Money(amount)

    def test_raw_currency_code_is_coerced(self):
        assert Money(100, "CHF").currency is CurrencyEnum.CHF

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValidationError):
            Money(100, "XYZ")

    def test_add_same_currency(self, eur_5):
        assert eur_5.add(Money(250)) == Money(750)

    def test_add_different_currency_raises(self, eur_5):
        with pytest.raises(CurrencyMismatchError):
            eur_5.add(Money(100, CurrencyEnum.USD))

    def test_subtract_to_zero(self, eur_5):
        assert eur_5.subtract(eur_5).is_zero()

    def test_subtract_below_zero_raises(self, eur_5):
        with pytest.raises(NegativeAmountError):
            eur_5.subtract(Money(501))

    def test_multiply_rounds_to_minor_unit(self):
        assert Money(1000).multiply(0.3333).amount == 333
        assert Money(1000).multiply(1.5).amount == 1500

    def test_total_of_nothing_is_zero_in_currency(self):
        total = Money.total([], CurrencyEnum.GBP)
        assert total == Money(0, CurrencyEnum.GBP)

    def test_total_sums_amounts(self):
        assert Money.total([Money(100), Money(200), Money(300)]).amount == 600

    def test_money_is_immutable(self, eur_5):
        with pytest.raises(AttributeError):
            eur_5.amount = 1

    @pytest.mark.parametrize(
        "money, expected",
        [
            (Money(150, CurrencyEnum.EUR), "1.50 €"),
            (Money(150, CurrencyEnum.USD), "$1.50"),
            (Money(150, CurrencyEnum.GBP), "£1.50"),
            (Money(150, CurrencyEnum.CHF), "1.50 CHF"),
            (Money(123456789, CurrencyEnum.EUR), "1,234,567.89 €"),
        ],
    )
    def test_format(self, money, expected):
        assert money.format() == expected
        assert str(money) == expected

    def test_to_dict(self):
        assert Money(1500).to_dict() == {"amount": 1500, "currency": "EUR", "formatted": "15.00 €"}


# ---------------------------------------------------------------------------
# Contact data
# ---------------------------------------------------------------------------

class TestEmail:
    def test_normalised_to_lowercase(self):
        email = Email("  Max@Example.COM ")
        assert email.value == "max@example.com"
        assert email.domain == "example.com"

    @pytest.mark.parametrize("value", ["", "max", "max@", "@example.com", "max@example"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            Email(value)


class TestPhoneNumber:
    def test_strips_formatting(self):
        assert PhoneNumber("+49 (170) 123-4567").value == "+491701234567"

    def test_german_numbers_are_grouped(self):
        assert PhoneNumber("+491701234567").formatted == "+49 170 1234567"

    def test_too_short(self):
        with pytest.raises(ValidationError):
            PhoneNumber("12345")


class TestPersonName:
    def test_full_name_and_initials(self):
        name = PersonName(" max ", "mustermann")
        assert name.full_name == "max mustermann"
        assert name.initials == "MM"

    def test_reports_every_blank_part(self):
        with pytest.raises(ValidationError) as info:
            PersonName("", " ")
        assert [field for field, _ in info.value.errors] == ["first_name", "last_name"]
