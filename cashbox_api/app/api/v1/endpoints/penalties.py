"""
Penalty endpoints for API v1.

Creating and paying a penalty notifies the member through the
notification pipeline.  Paying or archiving twice returns 409.
"""

from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.penalty import PenaltyCreate, PenaltyPay, PenaltyRead
from ....services.penalty_service import PenaltyService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=PenaltyRead, status_code=status.HTTP_201_CREATED)
async def create_penalty(penalty: PenaltyCreate) -> PenaltyRead:
    try:
        return await PenaltyService.create_penalty(penalty)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[PenaltyRead])
async def list_penalties(
    team_id: Optional[str] = None,
    user_id: Optional[str] = None,
    paid: Optional[bool] = None,
    archived: Optional[bool] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[PenaltyRead]:
    """List penalties, newest first, filtered by team, user, paid and archived state."""
    return await PenaltyService.list_penalties(team_id, user_id, paid, archived, limit, offset)


@router.get("/{penalty_id}", response_model=PenaltyRead)
async def get_penalty(penalty_id: str = Path(..., description="Penalty ID")) -> PenaltyRead:
    try:
        return await PenaltyService.get_penalty(penalty_id)
    except DomainError as e:
        raise http_error(e)


@router.post("/{penalty_id}/pay", response_model=PenaltyRead)
async def pay_penalty(data: Optional[PenaltyPay] = None,
                      penalty_id: str = Path(..., description="Penalty ID")) -> PenaltyRead:
    try:
        return await PenaltyService.pay_penalty(penalty_id, data)
    except DomainError as e:
        raise http_error(e)


@router.post("/{penalty_id}/archive", response_model=PenaltyRead)
async def archive_penalty(penalty_id: str = Path(..., description="Penalty ID")) -> PenaltyRead:
    try:
        return await PenaltyService.archive_penalty(penalty_id)
    except DomainError as e:
        raise http_error(e)
