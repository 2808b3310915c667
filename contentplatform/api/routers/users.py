"""User access management endpoints, scoped to the caller's organization."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from contentplatform.api.deps import get_db, get_current_user, require
from contentplatform.api.routers.roles import resolve_permissions
from contentplatform.api.schemas.auth import UserResponse
from contentplatform.api.schemas.rbac import UserPermissionsUpdate, UserRolesUpdate
from contentplatform.core.exceptions import ValidationError
from contentplatform.core.rbac import Action, Resource
from contentplatform.core.tenant import get_tenant_scoped_or_404, tenant_query
from contentplatform.db.models import User
from contentplatform.services.accounts import assignable_roles

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[require(Resource.USERS, Action.READ)],
)


@router.get("", response_model=List[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    users = tenant_query(db, User, current_user).order_by(User.email).all()
    return [UserResponse.from_user(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return UserResponse.from_user(get_tenant_scoped_or_404(db, User, user_id, current_user))


@router.put("/{user_id}/roles", response_model=UserResponse, dependencies=[require(Resource.USERS, Action.UPDATE)])
async def replace_user_roles(
    user_id: UUID,
    payload: UserRolesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Replace the user's role set with system roles or the organization's custom roles."""
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    user.roles = assignable_roles(db, current_user, payload.role_ids)
    db.commit()
    db.refresh(user)
    return UserResponse.from_user(user)


@router.post("/{user_id}/permissions", response_model=UserResponse, dependencies=[require(Resource.USERS, Action.UPDATE)])
async def grant_user_permissions(
    user_id: UUID,
    payload: UserPermissionsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Grant permissions directly, in addition to whatever the user's roles give."""
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    user.permissions.update(resolve_permissions(db, payload.permissions))
    db.commit()
    db.refresh(user)
    return UserResponse.from_user(user)


@router.delete(
    "/{user_id}/permissions/{permission_name}",
    response_model=UserResponse,
    dependencies=[require(Resource.USERS, Action.UPDATE)],
)
async def revoke_user_permission(
    user_id: UUID,
    permission_name: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Revoke a direct grant. Permissions held through roles are unaffected."""
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    user.permissions = {p for p in user.permissions if p.name != permission_name.upper()}
    db.commit()
    db.refresh(user)
    return UserResponse.from_user(user)


@router.post("/{user_id}/activate", response_model=UserResponse, dependencies=[require(Resource.USERS, Action.UPDATE)])
async def activate_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    user.enabled = True
    db.commit()
    return UserResponse.from_user(user)


@router.post("/{user_id}/deactivate", response_model=UserResponse, dependencies=[require(Resource.USERS, Action.UPDATE)])
async def deactivate_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    if user.id == current_user.id:
        raise ValidationError("You cannot deactivate your own account")
    user.enabled = False
    db.commit()
    return UserResponse.from_user(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[require(Resource.USERS, Action.DELETE)])
async def delete_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_tenant_scoped_or_404(db, User, user_id, current_user)
    if user.id == current_user.id:
        raise ValidationError("You cannot delete your own account")
    db.delete(user)
    db.commit()
