"""Pydantic models for notifications and notification preferences."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..domain.enums import NotificationTypeEnum


class NotificationCreate(BaseModel):
    user_id: str
    type: NotificationTypeEnum = Field(NotificationTypeEnum.SYSTEM_UPDATE, examples=["system_update"])
    title: Optional[str] = Field(None, description="Defaults to the type's standard title")
    message: str = Field(..., examples=["Die Kasse ist ab Montag geschlossen."])
    data: Dict[str, Any] = Field(default_factory=dict)


class NotificationRead(BaseModel):
    id: str
    user_id: str
    type: NotificationTypeEnum
    title: str
    message: str
    data: Dict[str, Any] = {}
    read: bool
    read_at: Optional[datetime] = None
    priority: int
    icon: str
    color: str
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class NotificationPreferenceUpdate(BaseModel):
    email_enabled: bool
    in_app_enabled: bool


class NotificationPreferenceRead(BaseModel):
    id: Optional[str] = Field(None, description="Null when the defaults apply")
    user_id: str
    notification_type: NotificationTypeEnum
    email_enabled: bool
    in_app_enabled: bool

    model_config = {
        "from_attributes": True,
    }
