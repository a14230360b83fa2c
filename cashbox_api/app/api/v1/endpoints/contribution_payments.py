"""Endpoints for payments recorded against contributions (API v1)."""

from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.common import MoneyRead
from ....schemas.contribution import (
    ContributionPaymentCreate,
    ContributionPaymentRead,
    ContributionPaymentUpdate,
)
from ....services.contribution_payment_service import ContributionPaymentService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=ContributionPaymentRead, status_code=status.HTTP_201_CREATED)
async def record_payment(data: ContributionPaymentCreate) -> ContributionPaymentRead:
    """Record a payment; the contribution is marked paid once fully covered."""
    try:
        return await ContributionPaymentService.record(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[ContributionPaymentRead])
async def list_payments(contribution_id: Optional[str] = None) -> List[ContributionPaymentRead]:
    try:
        return await ContributionPaymentService.list(contribution_id)
    except DomainError as e:
        raise http_error(e)


@router.get("/contributions/{contribution_id}/total", response_model=MoneyRead)
async def total_paid(contribution_id: str = Path(..., description="Contribution ID")) -> MoneyRead:
    try:
        return await ContributionPaymentService.total_paid(contribution_id)
    except DomainError as e:
        raise http_error(e)


@router.get("/{payment_id}", response_model=ContributionPaymentRead)
async def get_payment(payment_id: str = Path(..., description="Payment ID")) -> ContributionPaymentRead:
    try:
        return await ContributionPaymentService.get(payment_id)
    except DomainError as e:
        raise http_error(e)


@router.put("/{payment_id}", response_model=ContributionPaymentRead)
async def update_payment(data: ContributionPaymentUpdate,
                         payment_id: str = Path(..., description="Payment ID")) -> ContributionPaymentRead:
    try:
        return await ContributionPaymentService.update(payment_id, data)
    except DomainError as e:
        raise http_error(e)
