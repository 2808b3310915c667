from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import List, Optional


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    # Joins the inviting organization instead of creating one
    invitation_token: Optional[str] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    roles: List[str] = []
    permissions: List[str] = []


class UserResponse(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    name: Optional[str]
    corporate_id: Optional[UUID]
    enabled: bool
    roles: List[str] = []
    permissions: List[str] = []
    created_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.name,
            corporate_id=user.corporate_id,
            enabled=user.enabled,
            roles=user.role_names,
            permissions=user.direct_permission_names,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class CorporateResponse(BaseModel):
    id: UUID
    name: str
    domain: str
    created_at: datetime

    class Config:
        from_attributes = True
