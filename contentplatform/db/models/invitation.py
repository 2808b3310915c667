"""Invitation model: pending membership of a corporate with preset roles."""

import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship

from contentplatform.db.base import Base


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


invitation_roles = Table(
    "invitation_roles",
    Base.metadata,
    Column("invitation_id", Uuid, ForeignKey("invitations.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Invitation(Base):
    __tablename__ = "invitations"
    __entity_name__ = "Invitation"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    token = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    corporate_id = Column(Uuid, ForeignKey("corporates.id", ondelete="CASCADE"), nullable=False, index=True)
    invited_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), nullable=False, default=InvitationStatus.PENDING.value, index=True)
    expires_at = Column(DateTime, nullable=False)
    accepted_at = Column(DateTime, nullable=True)
    accepted_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    corporate = relationship("Corporate", back_populates="invitations")
    invited_by = relationship("User", foreign_keys=[invited_by_id])
    accepted_by = relationship("User", foreign_keys=[accepted_by_id])
    roles = relationship("Role", secondary=invitation_roles, collection_class=set, lazy="selectin")

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at < datetime.utcnow()

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING.value
