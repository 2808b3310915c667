"""Schemas for permissions, roles, user access and invitations."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class PermissionResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    resource: str
    action: str

    class Config:
        from_attributes = True


class CurrentUserPermissions(BaseModel):
    """What the authenticated user can do, for client-side gating."""
    permissions: List[str]
    permissions_by_resource: Dict[str, List[str]] = Field(alias="permissionsByResource")
    is_super_admin: bool = Field(alias="isSuperAdmin")

    class Config:
        populate_by_name = True


class ResourceInfo(BaseModel):
    name: str
    value: str
    description: str


class ActionInfo(BaseModel):
    name: str
    value: str
    description: str


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permissions: List[str] = Field(default_factory=list)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permissions: Optional[List[str]] = None
    # When sent, must match the stored version or the update is rejected
    version: Optional[int] = None


class RoleResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    is_system_role: bool
    corporate_id: Optional[UUID]
    permissions: List[str]
    version: int
    created_at: Optional[datetime]

    @classmethod
    def from_role(cls, role) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            is_system_role=role.is_system_role,
            corporate_id=role.corporate_id,
            permissions=role.permission_names,
            version=role.version,
            created_at=role.created_at,
        )


class UserRolesUpdate(BaseModel):
    role_ids: List[UUID]


class UserPermissionsUpdate(BaseModel):
    permissions: List[str] = Field(..., min_length=1)


class InvitationCreate(BaseModel):
    email: EmailStr
    role_ids: List[UUID] = Field(default_factory=list)


class InvitationResponse(BaseModel):
    id: UUID
    email: str
    corporate_id: UUID
    status: str
    roles: List[str]
    expires_at: datetime
    created_at: Optional[datetime]
    accepted_at: Optional[datetime] = None
    # Only returned to the inviter on creation
    token: Optional[str] = None

    @classmethod
    def from_invitation(cls, invitation, include_token: bool = False) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            email=invitation.email,
            corporate_id=invitation.corporate_id,
            status=invitation.status,
            roles=sorted(r.name for r in invitation.roles),
            expires_at=invitation.expires_at,
            created_at=invitation.created_at,
            accepted_at=invitation.accepted_at,
            token=invitation.token if include_token else None,
        )


class InvitationValidation(BaseModel):
    valid: bool
    email: Optional[str] = None
    corporate_name: Optional[str] = None
    expires_at: Optional[datetime] = None
    reason: Optional[str] = None
