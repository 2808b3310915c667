"""RBAC (Role-Based Access Control) module for the Content Platform.

This module defines the permission catalog, canonical roles, the permission
resolver and the declarative guard.
"""

from .permissions import Permission, Resource, Action, PERMISSION_DEFINITIONS, permission_name
from .checker import (
    PermissionChecker,
    has_permission,
    is_super_admin,
    get_effective_permissions,
    get_resource_permissions,
    get_permissions_by_resource,
    has_any_permission_for_resource,
)
from .guard import require_permission, actor_context

__all__ = [
    "Permission",
    "Resource",
    "Action",
    "PERMISSION_DEFINITIONS",
    "permission_name",
    "PermissionChecker",
    "has_permission",
    "is_super_admin",
    "get_effective_permissions",
    "get_resource_permissions",
    "get_permissions_by_resource",
    "has_any_permission_for_resource",
    "require_permission",
    "actor_context",
]
