import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Uuid

from contentplatform.db.base import Base


class Permission(Base):
    """
    Persisted catalog entry for one (resource, action) pair.

    Rows are created by the bootstrap and never renamed or deleted.
    """
    __tablename__ = "permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False, index=True)  # RESOURCE_ACTION
    description = Column(String(255))
    resource = Column(String(50), nullable=False)  # e.g. "app_config"
    action = Column(String(20), nullable=False)    # e.g. "read"
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"
