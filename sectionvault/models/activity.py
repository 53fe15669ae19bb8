"""ActivityLog and OwnerGrant models.

ActivityLog is the persisted form of section change events: one row per
content-changing mutation, written after the mutation commits.
OwnerGrants control which owners (projects) a user can read or edit.
"""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from ..database import Base


class ActivityLog(Base):
    """Append-only activity feed entry.

    Fields:
        activity_type: SECTION_UPDATED (the only type this service writes)
        action: short verb phrase, e.g. "updated the scope"
        message: display sentence including the actor
        entity_type: SECTION
        details: JSON string with kind, action and version number
    """

    __tablename__ = "activity_log"
    __table_args__ = (
        Index("ix_activity_log_owner_created", "owner_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_type = Column(String(50), nullable=False)
    action = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    user_id = Column(String(100), nullable=True)
    owner_id = Column(String(100), nullable=True)
    entity_id = Column(String(100), nullable=True)
    entity_type = Column(String(50), nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class OwnerGrant(Base):
    """Grant of a role on one owner to one user.

    An empty owner_id ('') means every owner. An exact owner grant wins over
    the root grant when both exist.
    """

    __tablename__ = "owner_grants"

    user_id = Column(String(100), primary_key=True)
    owner_id = Column(String(100), primary_key=True, default="")
    role = Column(String(20), nullable=False, default="viewer")
    granted_by = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
