"""Section repository for database operations."""

import uuid
from datetime import datetime
from typing import List, Optional

from ..models import Section, SectionKind
from .base import BaseRepository


class SectionRepository(BaseRepository[Section]):
    """Repository for the mutable current-value rows.

    Sections are never deleted, so there is no delete here.
    """

    model_class = Section

    def get_by_owner_kind(self, owner_id: str, kind: SectionKind) -> Optional[Section]:
        """Plain read of the section for (owner_id, kind)."""
        return self.db.query(Section).filter(
            Section.owner_id == owner_id,
            Section.kind == kind,
        ).first()

    def get_for_update(self, owner_id: str, kind: SectionKind) -> Optional[Section]:
        """Read the section row with a row lock held until the transaction ends.

        Rendered as SELECT ... FOR UPDATE on PostgreSQL. SQLite has no row
        locks; there the lock_version check on UPDATE catches lost updates.
        """
        return self.db.query(Section).filter(
            Section.owner_id == owner_id,
            Section.kind == kind,
        ).with_for_update().populate_existing().first()

    def list_by_owner(self, owner_id: str) -> List[Section]:
        return self.db.query(Section).filter(
            Section.owner_id == owner_id
        ).order_by(Section.kind).all()

    def create(
        self,
        owner_id: str,
        kind: SectionKind,
        title: str,
        content: str,
        extra_metadata: Optional[dict],
        now: datetime,
    ) -> Section:
        """Insert a new section. Flushes so a racing duplicate fails here."""
        section = Section(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            kind=kind,
            title=title,
            content=content,
            extra_metadata=extra_metadata,
            created_at=now,
            updated_at=now,
        )
        self.db.add(section)
        self.db.flush()
        return section

    def apply(
        self,
        section: Section,
        content: str,
        now: datetime,
        title: Optional[str] = None,
        extra_metadata: Optional[dict] = None,
    ) -> Section:
        """Write new current values onto an already loaded section.

        ``extra_metadata=None`` keeps the stored metadata. The flush raises
        StaleDataError if another transaction updated the row since it was read.
        """
        section.content = content
        if title is not None:
            section.title = title
        if extra_metadata is not None:
            section.extra_metadata = extra_metadata
        section.updated_at = now
        self.db.flush()
        return section
