"""Version repository for database operations."""

import hashlib
import uuid
from datetime import datetime
from typing import List

from sqlalchemy import func

from ..models import SectionVersion
from ..exceptions import VersionNotFoundError
from .base import BaseRepository


class VersionRepository(BaseRepository[SectionVersion]):
    """Append-only archive of section snapshots.

    Exposes create and reads only; versions are never updated or deleted.
    """

    model_class = SectionVersion
    not_found_error = VersionNotFoundError

    def create(
        self,
        section_id: str,
        content: str,
        version_number: int,
        author_id: str,
        now: datetime,
    ) -> SectionVersion:
        """Archive a snapshot. Flushes so a duplicate number fails here."""
        content_hash = hashlib.sha256(content.encode()).hexdigest()

        db_version = SectionVersion(
            id=str(uuid.uuid4()),
            section_id=section_id,
            content=content,
            content_hash=content_hash,
            version_number=version_number,
            author_id=author_id,
            created_at=now,
        )
        self.db.add(db_version)
        self.db.flush()
        return db_version

    # get_by_id and get_by_id_optional are inherited from BaseRepository.

    def get_max_number(self, section_id: str) -> int:
        """Highest version number archived for a section, 0 if none."""
        current = self.db.query(func.max(SectionVersion.version_number)).filter(
            SectionVersion.section_id == section_id
        ).scalar()
        return current or 0

    def get_by_section(self, section_id: str, skip: int = 0, limit: int = None) -> List[SectionVersion]:
        """All versions of a section, newest first."""
        query = self.db.query(SectionVersion).filter(
            SectionVersion.section_id == section_id
        ).order_by(SectionVersion.version_number.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()
