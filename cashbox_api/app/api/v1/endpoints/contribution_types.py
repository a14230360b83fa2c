"""Contribution type endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.contribution import ContributionTypeCreate, ContributionTypeRead
from ....services.contribution_service import ContributionService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=ContributionTypeRead, status_code=status.HTTP_201_CREATED)
async def create_contribution_type(data: ContributionTypeCreate) -> ContributionTypeRead:
    """Create a contribution type.  Recurring types need a ``recurrence_pattern``."""
    try:
        return await ContributionService.create_type(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[ContributionTypeRead])
async def list_contribution_types() -> List[ContributionTypeRead]:
    return await ContributionService.list_types()


@router.get("/{type_id}", response_model=ContributionTypeRead)
async def get_contribution_type(type_id: str = Path(..., description="Contribution type ID")) -> ContributionTypeRead:
    try:
        return await ContributionService.get_type(type_id)
    except DomainError as e:
        raise http_error(e)
