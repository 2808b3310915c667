"""Role management API endpoints."""

from datetime import datetime
from typing import Iterable, List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from contentplatform.api.deps import get_db, get_current_user
from contentplatform.api.schemas.rbac import RoleCreate, RoleResponse, RoleUpdate
from contentplatform.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from contentplatform.core.rbac import Action, Resource, require_permission
from contentplatform.core.rbac.permissions import is_valid_permission
from contentplatform.core.tenant import current_tenant_id, ensure_same_tenant, tenant_query
from contentplatform.db.models import Permission, Role, User

router = APIRouter(prefix="/roles", tags=["roles"])


def resolve_permissions(db: Session, names: Iterable[str]) -> set:
    """Map canonical permission names to stored rows, rejecting unknown names."""
    names = set(names)
    for name in names:
        if not is_valid_permission(name):
            raise ValidationError(f"Invalid permission: {name}")
    if not names:
        return set()
    stored = db.query(Permission).filter(Permission.name.in_(names)).all()
    missing = names - {p.name for p in stored}
    if missing:
        raise ValidationError(f"Permission not initialized: {', '.join(sorted(missing))}")
    return set(stored)


def get_role_for_tenant(db: Session, role_id: UUID, user: User) -> Role:
    """System roles are visible to everyone; custom roles only to their tenant."""
    tenant_id = current_tenant_id(user)
    role = db.get(Role, role_id)
    if role is None:
        raise NotFoundError("Role")
    if not role.is_system_role:
        ensure_same_tenant(role, tenant_id)
    return role


def _ensure_editable(role: Role, action: Action) -> None:
    if role.is_system_role:
        verb = "modified" if action == Action.UPDATE else "deleted"
        raise PermissionDeniedError(
            f"System roles cannot be {verb}",
            resource=Resource.ROLES.value,
            action=action.value,
        )


def _ensure_name_available(db: Session, name: str, exclude_id: UUID = None) -> None:
    query = db.query(Role.id).filter(Role.name == name)
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    if query.first():
        raise ConflictError("Role with this name already exists")


# Endpoints
@router.get("", response_model=List[RoleResponse])
@require_permission(Resource.ROLES, Action.READ)
async def list_roles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the custom roles of the current organization."""
    roles = tenant_query(db, Role, current_user).order_by(Role.name).all()
    return [RoleResponse.from_role(r) for r in roles]


@router.get("/system", response_model=List[RoleResponse])
@require_permission(Resource.ROLES, Action.READ)
async def list_system_roles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    roles = db.query(Role).filter(Role.is_system_role.is_(True)).order_by(Role.name).all()
    return [RoleResponse.from_role(r) for r in roles]


@router.get("/available", response_model=List[RoleResponse])
@require_permission(Resource.ROLES, Action.READ)
async def list_available_roles(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """System roles plus the organization's custom roles, i.e. what can be assigned."""
    tenant_id = current_tenant_id(current_user)
    roles = db.query(Role).filter(
        (Role.is_system_role.is_(True)) | (Role.corporate_id == tenant_id)
    ).order_by(Role.is_system_role.desc(), Role.name).all()
    return [RoleResponse.from_role(r) for r in roles]


@router.get("/{role_id}", response_model=RoleResponse)
@require_permission(Resource.ROLES, Action.READ)
async def get_role(
    role_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get a specific role by ID."""
    return RoleResponse.from_role(get_role_for_tenant(db, role_id, current_user))


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
@require_permission(Resource.ROLES, Action.CREATE)
async def create_role(
    role_data: RoleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a new custom role for the current organization."""
    tenant_id = current_tenant_id(current_user)
    _ensure_name_available(db, role_data.name)

    role = Role(
        name=role_data.name,
        description=role_data.description,
        is_system_role=False,
        corporate_id=tenant_id,
        permissions=resolve_permissions(db, role_data.permissions),
    )
    db.add(role)
    db.commit()
    db.refresh(role)

    return RoleResponse.from_role(role)


@router.put("/{role_id}", response_model=RoleResponse)
@require_permission(Resource.ROLES, Action.UPDATE)
async def update_role(
    role_id: UUID,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update a custom role. System roles cannot be modified.

    If the request carries a version it must match the stored one;
    without it the update is last-writer-wins.
    """
    role = get_role_for_tenant(db, role_id, current_user)
    _ensure_editable(role, Action.UPDATE)

    if role_data.version is not None and role_data.version != role.version:
        raise ConflictError(
            f"Role was modified concurrently (current version {role.version})"
        )

    if role_data.name is not None and role_data.name != role.name:
        _ensure_name_available(db, role_data.name, exclude_id=role.id)
        role.name = role_data.name
    if role_data.description is not None:
        role.description = role_data.description
    if role_data.permissions is not None:
        role.permissions = resolve_permissions(db, role_data.permissions)

    # Touch the row so permission-only edits bump the version too
    role.updated_at = datetime.utcnow()
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError("Role was modified concurrently") from None
    db.refresh(role)

    return RoleResponse.from_role(role)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_permission(Resource.ROLES, Action.DELETE)
async def delete_role(
    role_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete a custom role. Users holding it lose it."""
    role = get_role_for_tenant(db, role_id, current_user)
    _ensure_editable(role, Action.DELETE)

    db.delete(role)
    db.commit()
