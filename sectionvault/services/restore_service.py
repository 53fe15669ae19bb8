"""Restore engine: point a section back at an archived version.

A restore is a save whose new content comes from history. The content being
replaced is archived first under the next version number, so restoring never
rewinds or edits the archive; restoring the same version twice around an
intervening edit adds two archive entries.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.transactions import run_in_transaction, section_lock
from ..exceptions import SectionMismatchError
from ..models import Section, SectionVersion
from ..models.section_kind import parse_kind
from .change_notifier import ChangeEvent
from .section_service import SectionService

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    section: Section
    restored_from: SectionVersion
    changed: bool
    archived: Optional[SectionVersion] = None
    event: Optional[ChangeEvent] = None


class RestoreService:
    """Restores run through the owning SectionService's unit of work."""

    def __init__(self, sections: SectionService):
        self.sections = sections
        self.db = sections.db

    def restore(self, owner_id: str, kind, version_id: str, actor_id: str = "anonymous") -> RestoreResult:
        """Make ``version_id``'s content current again.

        Raises:
            VersionNotFoundError: No version with this id.
            SectionMismatchError: Version belongs to another owner or kind.
        """
        kind = parse_kind(kind)
        sections = self.sections

        def work() -> RestoreResult:
            now = sections.clock()
            target = sections.version_repo.get_by_id(version_id)
            section = sections.section_repo.get_for_update(owner_id, kind)
            if section is None or target.section_id != section.id:
                raise SectionMismatchError(version_id, owner_id, kind.value)

            if target.content == section.content:
                return RestoreResult(section=section, restored_from=target, changed=False)

            archived = sections.archive_and_apply(section, target.content, actor_id, now)
            return RestoreResult(section=section, restored_from=target, changed=True, archived=archived)

        with section_lock(owner_id, kind.value):
            result = run_in_transaction(
                self.db, work, owner_id=owner_id, kind=kind.value, max_attempts=sections.max_attempts
            )
            if result.changed:
                result.event = sections.emit(result.section, result.archived, actor_id, "restored")

        logger.info(
            "Section restore",
            extra={
                "owner_id": owner_id,
                "kind": kind.value,
                "version_id": version_id,
                "changed": result.changed,
                "version_number": result.archived.version_number if result.archived else None,
            },
        )
        return result
