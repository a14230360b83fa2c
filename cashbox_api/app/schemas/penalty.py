"""Pydantic models for penalties and penalty types."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..domain.enums import CurrencyEnum, PenaltyTypeEnum
from .common import MoneyRead


class PenaltyTypeBase(BaseModel):
    name: str = Field(..., examples=["Zu spät zum Training"])
    type: PenaltyTypeEnum = Field(..., examples=["late_arrival"])
    description: Optional[str] = None


class PenaltyTypeCreate(PenaltyTypeBase):
    default_amount: Optional[int] = Field(
        None, ge=0, examples=[500], description="Minor units; defaults to the type's standard amount"
    )


class PenaltyTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    default_amount: Optional[int] = Field(None, ge=0)
    active: Optional[bool] = None


class PenaltyTypeRead(PenaltyTypeBase):
    id: str
    label: str
    default_amount: int
    is_drink: bool
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class PenaltyCreate(BaseModel):
    team_user_id: str = Field(..., description="Membership the penalty is charged to")
    penalty_type_id: str
    reason: str = Field(..., examples=["10 Minuten zu spät"])
    amount: Optional[int] = Field(None, examples=[500], description="Minor units; defaults to the type's amount")
    currency: Optional[CurrencyEnum] = Field(None, examples=["EUR"])


class PenaltyPay(BaseModel):
    paid_at: Optional[datetime] = None


class PenaltyRead(BaseModel):
    id: str
    team_user_id: str
    user_id: str
    team_id: str
    penalty_type_id: str
    reason: str
    money: MoneyRead
    paid: bool
    archived: bool
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
