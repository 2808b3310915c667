"""Permission resolution for the Content Platform.

Pure functions over a user's roles and direct grants; nothing here touches
the database or mutates its inputs.
"""

from typing import Dict, Iterable, List, Set

from .permissions import (
    Resource,
    ActionLike,
    ResourceLike,
    permission_name,
    resource_key,
    split_permission_name,
)
from .roles import SUPER_ADMIN


class PermissionChecker:
    """Checks permissions against an effective permission-name set."""

    def __init__(self, user_permissions: Iterable[str], role_names: Iterable[str] = ()):
        """
        Initialize with the effective permission names and role names.

        Args:
            user_permissions: Canonical permission names ("RESOURCE_ACTION")
            role_names: Names of the roles the user holds
        """
        self.permissions = set(user_permissions)
        self.role_names = set(role_names)

    @classmethod
    def for_user(cls, user) -> "PermissionChecker":
        """Build a checker from a user's direct grants and roles."""
        names: Set[str] = {p.name for p in (user.permissions or [])}
        role_names: Set[str] = set()
        for role in user.roles or []:
            role_names.add(role.name)
            names.update(p.name for p in (role.permissions or []))
        return cls(names, role_names)

    @property
    def is_super_admin(self) -> bool:
        # Name-based bypass, independent of the role's permission set
        return SUPER_ADMIN in self.role_names

    def has_permission(self, permission) -> bool:
        """Check a canonical permission name (or a catalog Permission)."""
        if self.is_super_admin:
            return True
        return str(permission) in self.permissions

    def can_access_resource(self, resource: ResourceLike, action: ActionLike) -> bool:
        """Check if user can perform action on resource."""
        return self.has_permission(permission_name(resource, action))

    def has_any_permission(self, permissions: List[str]) -> bool:
        return any(self.has_permission(p) for p in permissions)

    def actions_for_resource(self, resource: ResourceLike) -> Set[str]:
        """Lower-case actions held on a resource, from the effective set only."""
        wanted = resource_key(resource)
        actions = set()
        for name in self.permissions:
            try:
                resource_part, action_part = split_permission_name(name)
            except ValueError:
                continue
            if resource_part == wanted:
                actions.add(action_part.lower())
        return actions

    def has_any_permission_for_resource(self, resource: ResourceLike) -> bool:
        return bool(self.actions_for_resource(resource))

    def get_accessible_resources(self, action: ActionLike) -> List[Resource]:
        """Get catalog resources the user can perform the action on."""
        return [r for r in Resource if self.can_access_resource(r, action)]


def has_permission(user, resource: ResourceLike, action: ActionLike) -> bool:
    """
    Check if a user may perform an action on a resource.

    Args:
        user: User model instance (or None when unauthenticated)
        resource: Resource enum or name, any case
        action: Action enum or name, any case

    Returns:
        True if a role named SUPER_ADMIN is assigned, or the canonical
        permission name is granted directly or through any role
    """
    if user is None:
        return False
    return PermissionChecker.for_user(user).can_access_resource(resource, action)


def is_super_admin(user) -> bool:
    """True if any assigned role is literally named SUPER_ADMIN."""
    if user is None:
        return False
    return any(role.name == SUPER_ADMIN for role in (user.roles or []))


def get_effective_permissions(user) -> Set[str]:
    """Union of directly granted and role-derived permission names."""
    if user is None:
        return set()
    return set(PermissionChecker.for_user(user).permissions)


def get_resource_permissions(user, resource: ResourceLike) -> Set[str]:
    """Lower-case action names the user holds on one resource."""
    if user is None:
        return set()
    return PermissionChecker.for_user(user).actions_for_resource(resource)


def has_any_permission_for_resource(user, resource: ResourceLike) -> bool:
    if user is None:
        return False
    return PermissionChecker.for_user(user).has_any_permission_for_resource(resource)


def get_permissions_by_resource(user) -> Dict[str, List[str]]:
    """Map of resource key -> sorted actions, omitting resources with none."""
    checker = PermissionChecker.for_user(user) if user is not None else PermissionChecker([])
    by_resource = {}
    for resource in Resource:
        actions = checker.actions_for_resource(resource)
        if actions:
            by_resource[resource.value] = sorted(actions)
    return by_resource
