"""Section model."""

from sqlalchemy import Column, Enum, Index, Integer, String, Text, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from .section_kind import SectionKind


class Section(Base):
    """Current value of one named content slot of an owner (project)."""

    __tablename__ = "sections"
    __table_args__ = (
        UniqueConstraint("owner_id", "kind", name="uq_sections_owner_kind"),
        Index("ix_sections_updated_at", "updated_at"),
    )

    # Primary key
    id = Column(String(36), primary_key=True)

    # Identity: one section per (owner, kind)
    owner_id = Column(String(100), nullable=False)
    kind = Column(Enum(SectionKind, name="section_kind", native_enum=False, length=40), nullable=False)

    # Display label derived from kind at write time
    title = Column(String(255), nullable=False)

    # Content
    content = Column(Text, nullable=False)

    # Opaque side-data (e.g. {"figma": ..., "github": ..., "other": [...]})
    extra_metadata = Column(JSON, nullable=True)

    # Optimistic locking: bumped on every UPDATE, checked in the UPDATE's WHERE.
    # A concurrent writer that read an older value gets StaleDataError.
    lock_version = Column(Integer, nullable=False, default=1)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    versions = relationship(
        "SectionVersion",
        back_populates="section",
        order_by="SectionVersion.version_number.desc()",
        passive_deletes=True,
    )

    __mapper_args__ = {"version_id_col": lock_version}
