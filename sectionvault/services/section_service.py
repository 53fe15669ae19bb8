"""Section service: deep module for the versioned section store.

Owns the current value of every (owner, kind) section and its archive.
Every content-changing write follows one discipline: inside a single unit of
work, lock the section, archive the value about to be overwritten under the
next version number, then apply the new value. Notification happens only
after the unit of work has committed.

Access control is the caller's job: ``actor_id`` is trusted as given.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.section_display import section_label, section_title
from ..core.transactions import run_in_transaction, section_lock
from ..exceptions import SectionMismatchError, SectionNotFoundError, ValidationError
from ..models import Section, SectionKind, SectionVersion
from ..models.section_kind import parse_kind
from ..repositories import SectionRepository, VersionRepository
from .change_notifier import ChangeEvent, ChangeNotifier, NullNotifier, dispatch

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SaveResult:
    """Outcome of ``SectionService.save``.

    ``archived`` is the version written by this call, None when the content
    was unchanged.
    """

    section: Section
    created: bool
    changed: bool
    archived: Optional[SectionVersion] = None
    event: Optional[ChangeEvent] = None


@dataclass
class VersionListing:
    section: Section
    versions: List[SectionVersion] = field(default_factory=list)

    @property
    def current_content(self) -> str:
        return self.section.content


class SectionService:
    """Current values and history of sections.

    Args:
        db: Session used for every read and write of this service.
        notifier: Sink for change events; None discards them.
        clock: Source of timestamps, timezone-aware.
        max_attempts: Attempts per unit of work before a ConflictError.
    """

    def __init__(
        self,
        db: Session,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: Optional[int] = None,
    ):
        self.db = db
        self.notifier = notifier or NullNotifier()
        self.clock = clock
        self.max_attempts = max_attempts or settings.section_write_max_attempts
        self.section_repo = SectionRepository(db)
        self.version_repo = VersionRepository(db)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(
        self,
        owner_id: str,
        kind,
        content: str,
        metadata: Optional[dict] = None,
        actor_id: str = "anonymous",
    ) -> SaveResult:
        """Set the current content of a section, archiving what it replaces.

        - First save creates the section and archives its content as version 1.
        - Same content as now: nothing archived, no event; metadata (when
          given) and updated_at are still written.
        - Different content: the old content is archived as max+1, then the
          new content (and metadata, when given) applied. One event.

        ``metadata=None`` leaves stored metadata untouched.
        """
        kind = parse_kind(kind)
        if not isinstance(content, str):
            raise ValidationError("Section content must be a string", field="content")
        if metadata is not None and not isinstance(metadata, dict):
            raise ValidationError("Section metadata must be an object", field="metadata")

        def work() -> SaveResult:
            now = self.clock()
            section = self.section_repo.get_for_update(owner_id, kind)

            if section is None:
                section = self.section_repo.create(
                    owner_id, kind, section_title(kind), content, metadata, now
                )
                baseline = self.version_repo.create(section.id, content, 1, actor_id, now)
                return SaveResult(section=section, created=True, changed=True, archived=baseline)

            if section.content == content:
                self.section_repo.apply(section, content, now, extra_metadata=metadata)
                return SaveResult(section=section, created=False, changed=False)

            archived = self.archive_and_apply(section, content, actor_id, now, extra_metadata=metadata)
            return SaveResult(section=section, created=False, changed=True, archived=archived)

        with section_lock(owner_id, kind.value):
            result = run_in_transaction(
                self.db, work, owner_id=owner_id, kind=kind.value, max_attempts=self.max_attempts
            )
            if result.changed:
                action = "created" if result.created else "updated"
                result.event = self.emit(result.section, result.archived, actor_id, action)

        logger.info(
            "Section saved",
            extra={
                "owner_id": owner_id,
                "kind": kind.value,
                "section_created": result.created,
                "changed": result.changed,
                "version_number": result.archived.version_number if result.archived else None,
            },
        )
        return result

    def archive_and_apply(
        self,
        section: Section,
        content: str,
        actor_id: str,
        now: datetime,
        extra_metadata: Optional[dict] = None,
    ) -> SectionVersion:
        """Archive the section's current content as max+1, then overwrite it.

        Must run inside ``run_in_transaction`` with ``section`` loaded by
        ``get_for_update`` in the same attempt.
        """
        next_number = self.version_repo.get_max_number(section.id) + 1
        version = self.version_repo.create(section.id, section.content, next_number, actor_id, now)
        self.section_repo.apply(
            section, content, now, title=section_title(section.kind), extra_metadata=extra_metadata
        )
        return version

    def emit(self, section: Section, version: SectionVersion, actor_id: str, action: str) -> ChangeEvent:
        """Build the change event for a committed write and hand it to the notifier."""
        verb = {
            "created": "created",
            "updated": "updated",
            "restored": "restored a previous version of",
        }[action]
        event = ChangeEvent(
            kind=section.kind,
            owner_id=section.owner_id,
            section_id=section.id,
            actor_id=actor_id,
            action=action,
            summary=f"{verb} {section_label(section.kind)}",
            timestamp=self.clock(),
            version_number=version.version_number,
        )
        dispatch(self.notifier, event)
        return event

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_section(self, owner_id: str, kind) -> Section:
        """Current section for (owner_id, kind). Raises SectionNotFoundError."""
        kind = parse_kind(kind)
        section = self.section_repo.get_by_owner_kind(owner_id, kind)
        if section is None:
            raise SectionNotFoundError(owner_id, kind.value)
        return section

    def list_sections(self, owner_id: str) -> List[Section]:
        return self.section_repo.list_by_owner(owner_id)

    def list_versions(self, owner_id: str, kind) -> VersionListing:
        """All versions of a section, newest first, with the current content."""
        section = self.get_section(owner_id, kind)
        return VersionListing(
            section=section,
            versions=self.version_repo.get_by_section(section.id),
        )

    def get_version(self, owner_id: str, kind, version_id: str) -> SectionVersion:
        """One version, checked to belong to (owner_id, kind).

        Raises VersionNotFoundError or SectionMismatchError.
        """
        kind = parse_kind(kind)
        version = self.version_repo.get_by_id(version_id)
        self.check_ownership(version, owner_id, kind)
        return version

    @staticmethod
    def check_ownership(version: SectionVersion, owner_id: str, kind: SectionKind) -> None:
        section = version.section
        if section.owner_id != owner_id or section.kind != kind:
            raise SectionMismatchError(version.id, owner_id, kind.value)
