"""Permission catalog and current-user permission endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from contentplatform.api.deps import get_db, get_current_user
from contentplatform.api.schemas.rbac import (
    ActionInfo,
    CurrentUserPermissions,
    PermissionResponse,
    ResourceInfo,
)
from contentplatform.core.rbac import (
    Action,
    Resource,
    get_effective_permissions,
    get_permissions_by_resource,
    is_super_admin,
    require_permission,
)
from contentplatform.core.rbac.permissions import ACTION_DESCRIPTIONS, RESOURCE_DESCRIPTIONS
from contentplatform.db.models import Permission, User

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("/current-user", response_model=CurrentUserPermissions)
async def current_user_permissions(current_user: User = Depends(get_current_user)):
    """Everything the authenticated user may do, grouped by resource."""
    return CurrentUserPermissions(
        permissions=sorted(get_effective_permissions(current_user)),
        permissions_by_resource=get_permissions_by_resource(current_user),
        is_super_admin=is_super_admin(current_user),
    )


@router.get("/resources", response_model=List[ResourceInfo])
async def list_resources(current_user: User = Depends(get_current_user)):
    return [
        ResourceInfo(name=r.name, value=r.value, description=RESOURCE_DESCRIPTIONS[r])
        for r in Resource
    ]


@router.get("/actions", response_model=List[ActionInfo])
async def list_actions(current_user: User = Depends(get_current_user)):
    return [
        ActionInfo(name=a.name, value=a.value, description=ACTION_DESCRIPTIONS[a])
        for a in Action
    ]


@router.get("/all", response_model=List[PermissionResponse])
@require_permission(Resource.ROLES, Action.READ)
async def list_all_permissions(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List every stored permission, for building role editors."""
    return db.query(Permission).order_by(Permission.resource, Permission.action).all()
