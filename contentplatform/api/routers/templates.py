"""Template endpoints.

Templates are the reference tenant-scoped content entity: every endpoint
is permission-guarded and every lookup is constrained to the caller's
organization.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from contentplatform.api.deps import get_db, get_current_user
from contentplatform.core.rbac import Action, Resource, require_permission
from contentplatform.core.tenant import current_tenant_id, get_tenant_scoped_or_404, tenant_query
from contentplatform.db.models import Template, User

router = APIRouter(prefix="/templates", tags=["templates"])


# Schemas
class TemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    content: str = ""

class TemplateCreate(TemplateBase):
    pass

class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    content: Optional[str] = None

class TemplateResponse(TemplateBase):
    id: UUID
    corporate_id: UUID
    created_by_id: Optional[UUID]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


# Endpoints
@router.get("", response_model=List[TemplateResponse])
@require_permission(Resource.TEMPLATES, Action.READ)
async def list_templates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return tenant_query(db, Template, current_user).order_by(Template.name).all()


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
@require_permission(Resource.TEMPLATES, Action.CREATE)
async def create_template(
    template_data: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = Template(
        corporate_id=current_tenant_id(current_user),
        created_by_id=current_user.id,
        **template_data.model_dump(),
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


@router.get("/{template_id}", response_model=TemplateResponse)
@require_permission(Resource.TEMPLATES, Action.READ)
async def get_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_tenant_scoped_or_404(db, Template, template_id, current_user)


@router.patch("/{template_id}", response_model=TemplateResponse)
@require_permission(Resource.TEMPLATES, Action.UPDATE)
async def update_template(
    template_id: UUID,
    template_data: TemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = get_tenant_scoped_or_404(db, Template, template_id, current_user)
    for field, value in template_data.model_dump(exclude_unset=True).items():
        setattr(template, field, value)
    db.commit()
    db.refresh(template)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_permission(Resource.TEMPLATES, Action.DELETE)
async def delete_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = get_tenant_scoped_or_404(db, Template, template_id, current_user)
    db.delete(template)
    db.commit()
