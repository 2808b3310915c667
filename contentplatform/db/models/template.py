import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from contentplatform.db.base import Base


class Template(Base):
    """Document template owned by a single corporate."""
    __tablename__ = "templates"
    __entity_name__ = "Template"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    corporate_id = Column(Uuid, ForeignKey("corporates.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000))
    content = Column(Text, nullable=False, default="")
    created_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    corporate = relationship("Corporate", back_populates="templates")
