import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from contentplatform.db.base import Base


class Corporate(Base):
    """A tenant. Every tenant-scoped entity carries a corporate_id."""
    __tablename__ = "corporates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    domain = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(String(1000), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    users = relationship("User", back_populates="corporate", foreign_keys="User.corporate_id")
    roles = relationship("Role", back_populates="corporate")
    invitations = relationship("Invitation", back_populates="corporate", cascade="all, delete-orphan")
    templates = relationship("Template", back_populates="corporate", cascade="all, delete-orphan")
