"""Section version model."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class SectionVersion(Base):
    """Immutable archived snapshot of a section's content.

    Rows are only ever inserted. ``version_number`` runs 1..N per section;
    the unique constraint turns a racing duplicate number into an
    IntegrityError instead of a silent second row.
    """

    __tablename__ = "section_versions"
    __table_args__ = (
        UniqueConstraint("section_id", "version_number", name="uq_section_versions_number"),
        Index("ix_section_versions_section_id", "section_id"),
    )

    # Primary key
    id = Column(String(36), primary_key=True)

    # Owning section
    section_id = Column(String(36), ForeignKey("sections.id", ondelete="RESTRICT"), nullable=False)

    # Content
    content = Column(Text, nullable=False)
    content_hash = Column(String(64), nullable=False)  # SHA256

    version_number = Column(Integer, nullable=False)

    # Principal whose mutation produced this archive entry
    author_id = Column(String(100), nullable=False)

    # Timestamp
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationship
    section = relationship("Section", back_populates="versions")
