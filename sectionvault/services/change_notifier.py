"""Change events and the sinks that receive them.

A ChangeEvent is handed to the configured notifier after a content-changing
save or restore has committed. Notification is fire-and-forget: a failing
notifier is logged and never turns a committed write into an error.
"""

import json
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Callable, Optional, Protocol

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..models import ActivityLog, SectionKind
from ..repositories import ActivityRepository

logger = logging.getLogger(__name__)

ACTIVITY_TYPE_SECTION_UPDATED = "SECTION_UPDATED"
ENTITY_TYPE_SECTION = "SECTION"


@dataclass(frozen=True)
class ChangeEvent:
    """One content-changing mutation of a section."""

    kind: SectionKind
    owner_id: str
    section_id: str
    actor_id: str
    action: str  # "created", "updated" or "restored"
    summary: str
    timestamp: datetime
    version_number: int  # archive entry written by the mutation

    def to_dict(self) -> dict:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["timestamp"] = self.timestamp.isoformat()
        return data


class ChangeNotifier(Protocol):
    def notify(self, event: ChangeEvent) -> None: ...


class NullNotifier:
    """Discards every event."""

    def notify(self, event: ChangeEvent) -> None:
        return None


class ActivityLogNotifier:
    """Persist events to the activity_log table.

    Uses its own session per event so a failure here cannot touch the
    section write, which has already committed.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def notify(self, event: ChangeEvent) -> None:
        db = self.session_factory()
        try:
            ActivityRepository(db).add(ActivityLog(
                activity_type=ACTIVITY_TYPE_SECTION_UPDATED,
                action=event.summary,
                message=f"{event.actor_id} {event.summary}",
                user_id=event.actor_id,
                owner_id=event.owner_id,
                entity_id=event.section_id,
                entity_type=ENTITY_TYPE_SECTION,
                details=json.dumps({
                    "kind": event.kind.value,
                    "action": event.action,
                    "version_number": event.version_number,
                }),
                created_at=event.timestamp,
            ))
            db.commit()
        except sqlalchemy.exc.SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()


def dispatch(notifier: Optional[ChangeNotifier], event: ChangeEvent) -> bool:
    """Deliver an event. Never raises; returns False when delivery failed."""
    if notifier is None:
        return True
    try:
        notifier.notify(event)
        return True
    except Exception:
        logger.exception(
            "Change notification failed",
            extra={
                "owner_id": event.owner_id,
                "kind": event.kind.value,
                "section_id": event.section_id,
                "action": event.action,
            },
        )
        return False
