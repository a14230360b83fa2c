"""
Notification preference endpoints for API v1.

Preferences are stored per user and notification type.  Types without a
stored preference report the defaults (both channels enabled) with a
``null`` id.
"""

from typing import List

from fastapi import APIRouter, Path

from ....domain.enums import NotificationTypeEnum
from ....domain.exceptions import DomainError
from ....schemas.notification import NotificationPreferenceRead, NotificationPreferenceUpdate
from ....services.notification_service import NotificationService
from ..errors import http_error

router = APIRouter()


@router.get("/{user_id}", response_model=List[NotificationPreferenceRead])
async def get_preferences(user_id: str = Path(..., description="User ID")) -> List[NotificationPreferenceRead]:
    try:
        return await NotificationService.get_preferences(user_id)
    except DomainError as e:
        raise http_error(e)


@router.put("/{user_id}/{notification_type}", response_model=NotificationPreferenceRead)
async def update_preference(
    data: NotificationPreferenceUpdate,
    user_id: str = Path(..., description="User ID"),
    notification_type: NotificationTypeEnum = Path(..., description="Notification type"),
) -> NotificationPreferenceRead:
    try:
        return await NotificationService.update_preference(
            user_id, notification_type, data.email_enabled, data.in_app_enabled
        )
    except DomainError as e:
        raise http_error(e)


@router.post("/{user_id}/{notification_type}/reset", response_model=NotificationPreferenceRead)
async def reset_preference(
    user_id: str = Path(..., description="User ID"),
    notification_type: NotificationTypeEnum = Path(..., description="Notification type"),
) -> NotificationPreferenceRead:
    try:
        return await NotificationService.reset_preference(user_id, notification_type)
    except DomainError as e:
        raise http_error(e)
