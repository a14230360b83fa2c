"""Pydantic models for users."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class UserBase(BaseModel):
    first_name: str = Field(..., examples=["Max"])
    last_name: str = Field(..., examples=["Mustermann"])
    email: Optional[str] = Field(None, examples=["max@example.com"])
    phone: Optional[str] = Field(None, examples=["+49 170 1234567"])


class UserCreate(UserBase):
    """Schema for creating a user."""
    pass


class UserUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


class UserRead(UserBase):
    id: str
    full_name: str = Field(..., examples=["Max Mustermann"])
    initials: str = Field(..., examples=["MM"])
    formatted_phone: Optional[str] = None
    active: bool = True
    preferences: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }
