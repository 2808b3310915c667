import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship

from contentplatform.db.base import Base


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)

# Direct grants that bypass roles
user_permissions = Table(
    "user_permissions",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"
    __entity_name__ = "User"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    name = Column(String(255))
    # Null only until the user joins or creates a corporate
    corporate_id = Column(Uuid, ForeignKey("corporates.id"), nullable=True, index=True)
    enabled = Column(Boolean, nullable=False, default=True)
    invited_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    invitation_accepted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    corporate = relationship("Corporate", back_populates="users", foreign_keys=[corporate_id])
    roles = relationship(
        "Role", secondary=user_roles, back_populates="users", collection_class=set, lazy="selectin"
    )
    permissions = relationship(
        "Permission", secondary=user_permissions, collection_class=set, lazy="selectin"
    )
    invited_by = relationship("User", remote_side=[id])

    @property
    def role_names(self) -> list[str]:
        return sorted(r.name for r in self.roles)

    @property
    def direct_permission_names(self) -> list[str]:
        return sorted(p.name for p in self.permissions)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
