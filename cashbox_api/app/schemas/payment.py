"""Pydantic models for payments."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..domain.enums import CurrencyEnum, PaymentTypeEnum
from .common import MoneyRead


class PaymentCreate(BaseModel):
    team_user_id: str
    amount: int = Field(..., gt=0, examples=[1500], description="Minor units")
    currency: Optional[CurrencyEnum] = Field(None, examples=["EUR"])
    type: PaymentTypeEnum = Field(PaymentTypeEnum.CASH, examples=["bank_transfer"])
    description: Optional[str] = Field(None, examples=["Strafen März"])
    reference: Optional[str] = Field(None, examples=["SEPA-2024-03-001"])


class PaymentRead(BaseModel):
    id: str
    team_user_id: str
    user_id: str
    team_id: str
    money: MoneyRead
    type: PaymentTypeEnum
    type_label: str
    description: Optional[str] = None
    reference: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
