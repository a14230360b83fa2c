"""
User endpoints for API v1.

Users are created without credentials; authentication is handled
outside this service.  Deactivated users keep their history but can no
longer be charged through new memberships.
"""

from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.team import TeamMemberRead
from ....schemas.user import UserCreate, UserRead, UserUpdate
from ....services.user_service import UserService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate) -> UserRead:
    """Register a user.  Returns 422 for malformed contact details or a duplicate e-mail."""
    try:
        return await UserService.create_user(user)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[UserRead])
async def list_users(active: Optional[bool] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None) -> List[UserRead]:
    return await UserService.list_users(active, limit, offset)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str = Path(..., description="User ID")) -> UserRead:
    try:
        return await UserService.get_user(user_id)
    except DomainError as e:
        raise http_error(e)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(data: UserUpdate, user_id: str = Path(..., description="User ID")) -> UserRead:
    """Update profile fields; omitted fields are left unchanged and preferences are merged."""
    try:
        return await UserService.update_user(user_id, data)
    except DomainError as e:
        raise http_error(e)


@router.post("/{user_id}/activate", response_model=UserRead)
async def activate_user(user_id: str = Path(..., description="User ID")) -> UserRead:
    try:
        return await UserService.set_active(user_id, True)
    except DomainError as e:
        raise http_error(e)


@router.post("/{user_id}/deactivate", response_model=UserRead)
async def deactivate_user(user_id: str = Path(..., description="User ID")) -> UserRead:
    try:
        return await UserService.set_active(user_id, False)
    except DomainError as e:
        raise http_error(e)


@router.get("/{user_id}/memberships", response_model=List[TeamMemberRead])
async def list_memberships(user_id: str = Path(..., description="User ID")) -> List[TeamMemberRead]:
    try:
        return await UserService.list_memberships(user_id)
    except DomainError as e:
        raise http_error(e)
