"""
Contribution template endpoints for API v1.

Templates are team presets; ``POST /{id}/apply`` issues the template's
contribution to a list of memberships at once.
"""

from typing import List, Optional

from fastapi import APIRouter, Path, status

from ....domain.exceptions import DomainError
from ....schemas.contribution import (
    ContributionTemplateApplied,
    ContributionTemplateApply,
    ContributionTemplateCreate,
    ContributionTemplateDuplicate,
    ContributionTemplateRead,
    ContributionTemplateUpdate,
)
from ....services.contribution_template_service import ContributionTemplateService
from ..errors import http_error

router = APIRouter()


@router.post("/", response_model=ContributionTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(data: ContributionTemplateCreate) -> ContributionTemplateRead:
    try:
        return await ContributionTemplateService.create(data)
    except DomainError as e:
        raise http_error(e)


@router.get("/", response_model=List[ContributionTemplateRead])
async def list_templates(team_id: Optional[str] = None, active: Optional[bool] = None) -> List[ContributionTemplateRead]:
    try:
        return await ContributionTemplateService.list(team_id, active)
    except DomainError as e:
        raise http_error(e)


@router.get("/teams/{team_id}/active", response_model=List[ContributionTemplateRead])
async def list_active_for_team(team_id: str = Path(..., description="Team ID")) -> List[ContributionTemplateRead]:
    """Active templates of one team, newest first."""
    try:
        return await ContributionTemplateService.list(team_id, active=True)
    except DomainError as e:
        raise http_error(e)


@router.get("/{template_id}", response_model=ContributionTemplateRead)
async def get_template(template_id: str = Path(..., description="Template ID")) -> ContributionTemplateRead:
    try:
        return await ContributionTemplateService.get(template_id)
    except DomainError as e:
        raise http_error(e)


@router.put("/{template_id}", response_model=ContributionTemplateRead)
async def update_template(data: ContributionTemplateUpdate,
                          template_id: str = Path(..., description="Template ID")) -> ContributionTemplateRead:
    try:
        return await ContributionTemplateService.update(template_id, data)
    except DomainError as e:
        raise http_error(e)


@router.post("/{template_id}/duplicate", response_model=ContributionTemplateRead,
             status_code=status.HTTP_201_CREATED)
async def duplicate_template(data: ContributionTemplateDuplicate,
                             template_id: str = Path(..., description="Template ID")) -> ContributionTemplateRead:
    try:
        return await ContributionTemplateService.duplicate(template_id, data.name)
    except DomainError as e:
        raise http_error(e)


@router.post("/{template_id}/apply", response_model=ContributionTemplateApplied)
async def apply_template(data: ContributionTemplateApply,
                         template_id: str = Path(..., description="Template ID")) -> ContributionTemplateApplied:
    try:
        return await ContributionTemplateService.apply(template_id, data)
    except DomainError as e:
        raise http_error(e)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_template(template_id: str = Path(..., description="Template ID")) -> None:
    """Deactivate a template; contributions already issued are kept."""
    try:
        await ContributionTemplateService.deactivate(template_id)
    except DomainError as e:
        raise http_error(e)
    return None
