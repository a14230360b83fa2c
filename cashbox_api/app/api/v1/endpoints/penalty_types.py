"""Penalty type catalogue endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.penalty import PenaltyTypeCreate, PenaltyTypeRead, PenaltyTypeUpdate
from ....services.penalty_service import PenaltyTypeService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=PenaltyTypeRead, status_code=status.HTTP_201_CREATED)
async def create_penalty_type(data: PenaltyTypeCreate) -> PenaltyTypeRead:
    """Create a penalty type.  Without ``default_amount`` the type's standard amount is used."""
    try:
        return await PenaltyTypeService.create_type(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[PenaltyTypeRead])
async def list_penalty_types(active_only: bool = False) -> List[PenaltyTypeRead]:
    return await PenaltyTypeService.list_types(active_only)


@router.get("/{type_id}", response_model=PenaltyTypeRead)
async def get_penalty_type(type_id: str = Path(..., description="Penalty type ID")) -> PenaltyTypeRead:
    try:
        return await PenaltyTypeService.get_type(type_id)
    except DomainError as e:
        raise http_error(e)


@router.patch("/{type_id}", response_model=PenaltyTypeRead)
async def update_penalty_type(data: PenaltyTypeUpdate,
                              type_id: str = Path(..., description="Penalty type ID")) -> PenaltyTypeRead:
    try:
        return await PenaltyTypeService.update_type(type_id, data)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_penalty_type(type_id: str = Path(..., description="Penalty type ID")) -> None:
    """Deactivate a penalty type.  Existing penalties keep referring to it."""
    try:
        await PenaltyTypeService.delete_type(type_id)
    except DomainError as e:
        raise http_error(e)
    return None
