"""Permission catalog for the Content Platform RBAC.

Defines all resources, actions, and the permission cross-product.
Every resource supports every action: permissions = resources × actions.

Canonical permission name format: "RESOURCE_ACTION" (upper-cased, underscore-joined)
Examples:
  - TRANSLATIONS_CREATE
  - APP_CONFIG_READ
  - USERS_DELETE
"""

from enum import Enum
from typing import Dict, List, NamedTuple, Union


class Resource(str, Enum):
    """Resources that can be protected by permissions."""

    # Content resources
    TRANSLATIONS = "translations"
    TEMPLATES = "templates"
    LOV = "lov"                   # List of values
    APP_CONFIG = "app_config"
    ERROR_CODES = "error_codes"
    MEDIA = "media"

    # User management resources
    USERS = "users"
    ROLES = "roles"
    INVITATIONS = "invitations"

    # Platform resources
    APPS = "apps"
    DASHBOARD = "dashboard"
    API_KEYS = "api_keys"
    ORGANIZATION = "organization"


class Action(str, Enum):
    """Actions that can be performed on resources."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


RESOURCE_DESCRIPTIONS: Dict[Resource, str] = {
    Resource.TRANSLATIONS: "Translation Management",
    Resource.TEMPLATES: "Template Management",
    Resource.LOV: "List of Values Management",
    Resource.APP_CONFIG: "App Configuration Management",
    Resource.ERROR_CODES: "Error Code Management",
    Resource.USERS: "User Management",
    Resource.ROLES: "Role Management",
    Resource.INVITATIONS: "Invitation Management",
    Resource.APPS: "Application Management",
    Resource.DASHBOARD: "Dashboard Access",
    Resource.API_KEYS: "API Key Management",
    Resource.MEDIA: "Media Management",
    Resource.ORGANIZATION: "Organization Management",
}

ACTION_DESCRIPTIONS: Dict[Action, str] = {
    Action.CREATE: "Create new records",
    Action.READ: "View/inquiry records",
    Action.UPDATE: "Modify existing records",
    Action.DELETE: "Remove records",
}


ResourceLike = Union[Resource, str]
ActionLike = Union[Action, str]


def _key(value: Union[Enum, str]) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def resource_key(resource: ResourceLike) -> str:
    """Upper-case resource component of a permission name."""
    return _key(resource).upper()


def permission_name(resource: ResourceLike, action: ActionLike) -> str:
    """Build the canonical permission name for a resource/action pair.

    Works for any strings, not only catalog members, so that callers can
    ask about pairs the catalog does not (yet) contain.
    """
    return f"{_key(resource).upper()}_{_key(action).upper()}"


class Permission(NamedTuple):
    """A permission is a combination of resource and action."""
    resource: Resource
    action: Action

    def __str__(self) -> str:
        return self.name

    @property
    def name(self) -> str:
        return permission_name(self.resource, self.action)

    @property
    def description(self) -> str:
        return f"{ACTION_DESCRIPTIONS[self.action]} {RESOURCE_DESCRIPTIONS[self.resource]}"

    @classmethod
    def from_string(cls, name: str) -> "Permission":
        """Parse a canonical name like 'APP_CONFIG_READ'."""
        resource_part, sep, action_part = name.rpartition("_")
        if not sep or not resource_part:
            raise ValueError(f"Invalid permission format: {name}")
        try:
            return cls(Resource(resource_part.lower()), Action(action_part.lower()))
        except ValueError:
            raise ValueError(f"Invalid permission format: {name}") from None


def split_permission_name(name: str) -> tuple[str, str]:
    """Split 'RESOURCE_ACTION' into its upper-case (resource, action) parts.

    Unlike Permission.from_string this accepts names outside the catalog.
    """
    resource_part, sep, action_part = name.rpartition("_")
    if not sep or not resource_part or not action_part:
        raise ValueError(f"Invalid permission format: {name}")
    return resource_part, action_part


def _generate_permission_definitions() -> Dict[str, Permission]:
    """Generate every resource × action permission, in enum order."""
    permissions = {}
    for resource in Resource:
        for action in Action:
            perm = Permission(resource, action)
            permissions[perm.name] = perm
    return permissions


# All catalog permissions: "RESOURCE_ACTION" -> Permission
PERMISSION_DEFINITIONS = _generate_permission_definitions()


def is_valid_permission(name: str) -> bool:
    """Check if a permission name belongs to the catalog."""
    return name in PERMISSION_DEFINITIONS


def get_permissions_for_resource(resource: ResourceLike) -> List[str]:
    """Get all catalog permission names for a resource."""
    return [permission_name(resource, action) for action in Action]


def get_all_permissions() -> List[str]:
    """Get all catalog permission names."""
    return list(PERMISSION_DEFINITIONS.keys())
