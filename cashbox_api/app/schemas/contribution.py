"""Pydantic models for contributions, their types, templates and payments."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..domain.enums import CurrencyEnum, PaymentTypeEnum, RecurrencePatternEnum
from .common import MoneyRead


class ContributionTypeCreate(BaseModel):
    name: str = Field(..., examples=["Mitgliedsbeitrag"])
    description: Optional[str] = None
    recurring: bool = False
    recurrence_pattern: Optional[RecurrencePatternEnum] = Field(None, examples=["monthly"])


class ContributionTypeRead(ContributionTypeCreate):
    id: str
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class ContributionCreate(BaseModel):
    team_user_id: str
    contribution_type_id: str
    description: str = Field(..., examples=["Beitrag Januar"])
    amount: int = Field(..., gt=0, examples=[5000], description="Minor units")
    currency: Optional[CurrencyEnum] = None
    due_date: date = Field(..., examples=["2024-01-31"])


class ContributionPay(BaseModel):
    paid_at: Optional[datetime] = None


class ContributionRead(BaseModel):
    id: str
    team_user_id: str
    user_id: str
    team_id: str
    contribution_type_id: str
    description: str
    money: MoneyRead
    due_date: date
    paid: bool
    overdue: bool
    paid_at: Optional[datetime] = None
    active: bool
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class RecurringRunResult(BaseModel):
    created: int = Field(..., examples=[12])


class ContributionTemplateCreate(BaseModel):
    team_id: str
    name: str = Field(..., examples=["Saisonbeitrag"])
    description: Optional[str] = None
    amount: int = Field(..., gt=0, examples=[2500], description="Minor units")
    currency: Optional[CurrencyEnum] = None
    recurring: bool = False
    recurrence_pattern: Optional[RecurrencePatternEnum] = None
    due_days: Optional[int] = Field(None, ge=0, examples=[14])


class ContributionTemplateUpdate(BaseModel):
    """Fields left out keep their current value."""

    name: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[int] = Field(None, gt=0)
    currency: Optional[CurrencyEnum] = None
    recurring: Optional[bool] = None
    recurrence_pattern: Optional[RecurrencePatternEnum] = None
    due_days: Optional[int] = Field(None, ge=0)


class ContributionTemplateDuplicate(BaseModel):
    name: str = Field(..., examples=["Saisonbeitrag 2025"])


class ContributionTemplateRead(BaseModel):
    id: str
    team_id: str
    name: str
    description: Optional[str] = None
    money: MoneyRead
    recurring: bool
    recurrence_pattern: Optional[RecurrencePatternEnum] = None
    due_days: Optional[int] = None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class ContributionTemplateApply(BaseModel):
    team_user_ids: List[str] = Field(..., examples=[["0b1c...", "4f2e..."]])
    contribution_type_id: Optional[str] = None
    due_date: Optional[date] = None
    amount: Optional[int] = Field(None, gt=0, description="Overrides the template amount")
    description: Optional[str] = None


class ContributionTemplateApplied(BaseModel):
    template: ContributionTemplateRead
    contributions: List[ContributionRead]
    count: int


class ContributionPaymentCreate(BaseModel):
    contribution_id: str
    amount: int = Field(..., gt=0, examples=[2500], description="Minor units")
    currency: Optional[CurrencyEnum] = None
    payment_method: Optional[PaymentTypeEnum] = Field(None, examples=["bank_transfer"])
    reference: Optional[str] = None
    notes: Optional[str] = None


class ContributionPaymentUpdate(BaseModel):
    payment_method: Optional[PaymentTypeEnum] = None
    reference: Optional[str] = None
    notes: Optional[str] = None


class ContributionPaymentRead(BaseModel):
    id: str
    contribution_id: str
    user_id: str
    money: MoneyRead
    payment_method: Optional[PaymentTypeEnum] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    partial: bool
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }
