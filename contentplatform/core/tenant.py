"""Tenant (corporate) context helpers for multi-tenant isolation.

Every tenant-scoped read or write goes through these helpers:
the tenant id comes from the acting user, lookups are constrained by it,
and entities fetched by primary key are re-checked against it.
"""

import logging
from typing import Any, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Query, Session

from contentplatform.core.exceptions import (
    AuthenticationRequiredError,
    NoOrganizationError,
    NotFoundError,
    TenantViolationError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def current_tenant_id(user) -> UUID:
    """
    Get the tenant id of the acting user.

    Raises:
        AuthenticationRequiredError: If there is no user
        NoOrganizationError: If the user has no tenant yet
    """
    if user is None:
        raise AuthenticationRequiredError()
    tenant_id = getattr(user, "corporate_id", None)
    if tenant_id is None:
        raise NoOrganizationError()
    return tenant_id


def _entity_name(entity: Any) -> str:
    return getattr(entity, "__entity_name__", type(entity).__name__)


def ensure_same_tenant(entity: Any, tenant_id: UUID, *, entity_name: Optional[str] = None) -> Any:
    """Raise TenantViolationError unless the entity is owned by tenant_id."""
    owner = getattr(entity, "corporate_id", None)
    if owner is None or owner != tenant_id:
        name = entity_name or _entity_name(entity)
        logger.warning(
            "Tenant violation on %s %s: owned by %s, requested by %s",
            name, getattr(entity, "id", None), owner, tenant_id,
        )
        raise TenantViolationError(
            name,
            getattr(entity, "id", None),
            owner_tenant_id=owner,
            actor_tenant_id=tenant_id,
        )
    return entity


def tenant_query(db: Session, model: Type[ModelT], user) -> Query:
    """Query for a tenant-scoped model, constrained to the user's tenant."""
    tenant_id = current_tenant_id(user)
    return db.query(model).filter(model.corporate_id == tenant_id)


def get_tenant_scoped_or_404(
    db: Session,
    model: Type[ModelT],
    entity_id: Any,
    user,
    *,
    entity_name: Optional[str] = None,
) -> ModelT:
    """
    Fetch an entity by primary key and verify the user's tenant owns it.

    The tenant id is resolved before storage is touched; a missing entity
    is a NotFoundError, an existing one owned elsewhere a TenantViolationError.
    """
    tenant_id = current_tenant_id(user)
    name = entity_name or getattr(model, "__entity_name__", model.__name__)

    entity = db.get(model, entity_id)
    if entity is None:
        raise NotFoundError(name)

    return ensure_same_tenant(entity, tenant_id, entity_name=name)
