"""
Notification endpoints for API v1.

Notifications are normally created by the system when penalties,
payments, contributions or reports change.  ``POST /notifications``
sends a manual one; it returns ``null`` when the recipient has switched
off in-app delivery for that type (an e-mail may still be sent).
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.common import CountResponse
from ....schemas.notification import NotificationCreate, NotificationRead
from ....services.notification_service import NotificationService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=Optional[NotificationRead], status_code=status.HTTP_201_CREATED)
async def send_notification(data: NotificationCreate) -> Optional[NotificationRead]:
    try:
        return await NotificationService.send(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[NotificationRead])
async def list_notifications(
    user_id: str,
    unread_only: bool = False,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[NotificationRead]:
    try:
        return await NotificationService.list_for_user(user_id, unread_only, limit, offset)
    except DomainError as e:
        raise http_error(e)


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(user_id: str) -> CountResponse:
    return CountResponse(count=await NotificationService.unread_count(user_id))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(user_id: str) -> CountResponse:
    """Mark every unread notification of ``user_id`` as read and return how many changed."""
    return CountResponse(count=await NotificationService.mark_all_read(user_id))


@router.post("/purge", response_model=CountResponse)
async def purge_expired(now: Optional[datetime] = None) -> CountResponse:
    """Delete notifications older than the retention period of their type."""
    return CountResponse(count=await NotificationService.purge_expired(now))


@router.post("/payment-reminders", response_model=CountResponse)
async def send_payment_reminders() -> CountResponse:
    return CountResponse(count=await NotificationService.send_payment_reminders())


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(notification_id: str = Path(..., description="Notification ID")) -> NotificationRead:
    try:
        return await NotificationService.mark_read(notification_id)
    except DomainError as e:
        raise http_error(e)
