"""Schemas shared by several resources."""

from pydantic import BaseModel, Field

from ..domain.enums import CurrencyEnum
from ..domain.value_objects import Money


class MoneyRead(BaseModel):
    amount: int = Field(..., examples=[1500], description="Amount in minor units (cents)")
    currency: CurrencyEnum = Field(CurrencyEnum.EUR, examples=["EUR"])
    formatted: str = Field(..., examples=["15.00 €"])

    @classmethod
    def from_money(cls, money: Money) -> "MoneyRead":
        return cls(amount=money.amount, currency=money.currency, formatted=money.format())


class CountResponse(BaseModel):
    count: int = Field(..., examples=[3])
