"""
Payment endpoints for API v1.

Payments record money received from a team member.  Bank transfer,
card and mobile payments require a ``reference``.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.enums import PaymentTypeEnum
from ....domain.exceptions import DomainError
from ....schemas.payment import PaymentCreate, PaymentRead
from ....services.payment_service import PaymentService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
async def create_payment(payment: PaymentCreate) -> PaymentRead:
    try:
        return await PaymentService.create_payment(payment)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[PaymentRead])
async def list_payments(
    team_id: Optional[str] = None,
    user_id: Optional[str] = None,
    type: Optional[PaymentTypeEnum] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[PaymentRead]:
    return await PaymentService.list_payments(team_id, user_id, type, created_from, created_to, limit, offset)


@router.get("/{payment_id}", response_model=PaymentRead)
async def get_payment(payment_id: str = Path(..., description="Payment ID")) -> PaymentRead:
    try:
        return await PaymentService.get_payment(payment_id)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(payment_id: str = Path(..., description="Payment ID")) -> None:
    try:
        await PaymentService.delete_payment(payment_id)
    except DomainError as e:
        raise http_error(e)
    return None
