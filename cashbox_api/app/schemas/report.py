"""Pydantic models for reports."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..domain.enums import ReportTypeEnum


class ReportCreate(BaseModel):
    created_by: str = Field(..., description="User requesting the report")
    name: str = Field(..., examples=["Kassenbericht Q1"])
    type: ReportTypeEnum = Field(..., examples=["financial"])
    parameters: Dict[str, Any] = Field(
        ..., examples=[{"dateFrom": "2024-01-01", "dateTo": "2024-03-31", "teamId": "..."}]
    )
    scheduled: bool = False
    cron_expression: Optional[str] = Field(None, examples=["0 9 1 * *"])


class ReportUpdate(BaseModel):
    name: str
    parameters: Dict[str, Any]


class ReportSchedule(BaseModel):
    cron_expression: str = Field(..., examples=["0 9 * * 1"])


class ReportRead(BaseModel):
    id: str
    created_by: str
    name: str
    type: ReportTypeEnum
    parameters: Dict[str, Any]
    result: Optional[Dict[str, Any]] = None
    scheduled: bool
    cron_expression: Optional[str] = None
    generated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class ScheduledRunResult(BaseModel):
    generated: int
    run_at: datetime
