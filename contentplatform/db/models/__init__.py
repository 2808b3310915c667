"""Database models for the Content Platform."""

from contentplatform.db.models.corporate import Corporate
from contentplatform.db.models.permission import Permission
from contentplatform.db.models.role import Role, role_permissions
from contentplatform.db.models.user import User, user_roles, user_permissions
from contentplatform.db.models.invitation import Invitation, InvitationStatus, invitation_roles
from contentplatform.db.models.template import Template

__all__ = [
    "Corporate",
    "Permission",
    "Role",
    "User",
    "Invitation",
    "InvitationStatus",
    "Template",
    "role_permissions",
    "user_roles",
    "user_permissions",
    "invitation_roles",
]
