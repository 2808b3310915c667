import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Integer, Table, Uuid
from sqlalchemy.orm import relationship

from contentplatform.db.base import Base


role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """
    Named bundle of permissions.

    System roles have no owning corporate and are visible to every tenant;
    custom roles belong to the corporate that created them.
    """
    __tablename__ = "roles"
    __entity_name__ = "Role"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500))
    is_system_role = Column(Boolean, nullable=False, default=False)
    corporate_id = Column(Uuid, ForeignKey("corporates.id", ondelete="CASCADE"), nullable=True, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Every UPDATE of the row bumps version and is checked against the loaded value
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    corporate = relationship("Corporate", back_populates="roles")
    permissions = relationship(
        "Permission", secondary=role_permissions, collection_class=set, lazy="selectin"
    )
    users = relationship("User", secondary="user_roles", back_populates="roles")

    @property
    def permission_names(self) -> list[str]:
        return sorted(p.name for p in self.permissions)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
