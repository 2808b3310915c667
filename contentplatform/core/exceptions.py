"""Error taxonomy for the Content Platform.

Each error carries the HTTP status and machine-readable code it maps to at
the API boundary; the handlers in contentplatform.api.main do the mapping.
"""

from typing import Any, Optional

from fastapi import status


DEFAULT_DENIED_MESSAGE = "Access denied: insufficient permissions"


class ContentPlatformError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class AuthenticationRequiredError(ContentPlatformError):
    """No authenticated actor is available."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "authentication_required"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDeniedError(ContentPlatformError):
    """The resolver refused a declared (resource, action) requirement."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"

    def __init__(
        self,
        message: str = DEFAULT_DENIED_MESSAGE,
        *,
        resource: Optional[str] = None,
        action: Optional[str] = None,
    ):
        super().__init__(message)
        self.resource = resource
        self.action = action


class TenantViolationError(ContentPlatformError):
    """An existing entity belongs to a different tenant than the actor."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "tenant_violation"

    def __init__(
        self,
        entity: str,
        entity_id: Any = None,
        *,
        owner_tenant_id: Any = None,
        actor_tenant_id: Any = None,
    ):
        super().__init__(f"Access denied: {entity} belongs to another organization")
        self.entity = entity
        self.entity_id = entity_id
        self.owner_tenant_id = owner_tenant_id
        self.actor_tenant_id = actor_tenant_id


class NoOrganizationError(ContentPlatformError):
    """The actor has not been assigned to a tenant yet."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "no_organization"

    def __init__(self, message: str = "User is not associated with any organization"):
        super().__init__(message)


class NotFoundError(ContentPlatformError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ConflictError(ContentPlatformError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ValidationError(ContentPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
