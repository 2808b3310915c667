"""Canonical role definitions for the Content Platform.

Defines the 4 built-in roles and how their permission sets are derived
from the catalog:
1. SUPER_ADMIN - Every permission in the catalog
2. ADMIN - Everything except user creation
3. EDITOR - Content CRUD plus read access to dashboard and app config
4. VIEWER - Read-only access to every resource

The builders take the names currently present in the catalog so the
bootstrap only ever links permissions that actually exist.
"""

from typing import Callable, Dict, FrozenSet, Iterable, List, Set

from .permissions import Action, Resource, get_all_permissions, permission_name


SUPER_ADMIN = "SUPER_ADMIN"
ADMIN = "ADMIN"
EDITOR = "EDITOR"
VIEWER = "VIEWER"

CANONICAL_ROLE_NAMES = (SUPER_ADMIN, ADMIN, EDITOR, VIEWER)

# Content modules editors manage end to end
CONTENT_RESOURCES: FrozenSet[Resource] = frozenset([
    Resource.TRANSLATIONS,
    Resource.TEMPLATES,
    Resource.LOV,
    Resource.ERROR_CODES,
    Resource.MEDIA,
])


def _pick(available: Set[str], names: Iterable[str]) -> Set[str]:
    return {name for name in names if name in available}


def build_super_admin_permissions(available: Iterable[str]) -> Set[str]:
    """SUPER_ADMIN: every permission in the catalog."""
    return set(available)


def build_admin_permissions(available: Iterable[str]) -> Set[str]:
    """ADMIN: all non-USERS permissions plus USERS read/update/delete."""
    available = set(available)
    names = [
        permission_name(resource, action)
        for resource in Resource
        if resource != Resource.USERS
        for action in Action
    ]
    names += [
        permission_name(Resource.USERS, Action.READ),
        permission_name(Resource.USERS, Action.UPDATE),
        permission_name(Resource.USERS, Action.DELETE),
    ]
    return _pick(available, names)


def build_editor_permissions(available: Iterable[str]) -> Set[str]:
    """EDITOR: CRUD on content resources plus read on dashboard/app config/media."""
    available = set(available)
    names = [
        permission_name(resource, action)
        for resource in Resource
        if resource in CONTENT_RESOURCES
        for action in Action
    ]
    names += [
        permission_name(Resource.DASHBOARD, Action.READ),
        permission_name(Resource.APP_CONFIG, Action.READ),
        permission_name(Resource.MEDIA, Action.READ),
    ]
    return _pick(available, names)


def build_viewer_permissions(available: Iterable[str]) -> Set[str]:
    """VIEWER: READ on every resource."""
    available = set(available)
    return _pick(available, [permission_name(resource, Action.READ) for resource in Resource])


# Canonical roles configuration, in creation order
DEFAULT_ROLES: Dict[str, dict] = {
    SUPER_ADMIN: {
        "description": "Super Administrator with full system access",
        "builder": build_super_admin_permissions,
    },
    ADMIN: {
        "description": "Administrator with content management access",
        "builder": build_admin_permissions,
    },
    EDITOR: {
        "description": "Content Editor with CRUD access to content modules",
        "builder": build_editor_permissions,
    },
    VIEWER: {
        "description": "Read-only access to all modules",
        "builder": build_viewer_permissions,
    },
}


def get_default_role_permissions(role_name: str, available: Iterable[str] = None) -> List[str]:
    """Get the sorted permission names a canonical role is built with.

    Defaults to the full catalog when no available names are given.
    """
    role = DEFAULT_ROLES.get(role_name)
    if not role:
        raise ValueError(f"Unknown default role: {role_name}")
    if available is None:
        available = get_all_permissions()
    builder: Callable[[Iterable[str]], Set[str]] = role["builder"]
    return sorted(builder(available))
