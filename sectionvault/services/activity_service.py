"""Activity feed reads.

Entries are written by ActivityLogNotifier after section writes commit; this
module only reads them back for the project and dashboard feeds.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import ActivityLog
from ..repositories import ActivityRepository


def get_owner_activities(db: Session, owner_id: str, limit: int = 20) -> List[ActivityLog]:
    """Most recent activity of one owner (project)."""
    return ActivityRepository(db).get_by_owner(owner_id, limit)


def get_recent(db: Session, limit: int = 10, owner_ids: Optional[List[str]] = None) -> List[ActivityLog]:
    """Most recent activity across owners.

    ``owner_ids`` restricts the feed to those owners; None means all owners.
    """
    return ActivityRepository(db).get_recent(limit, owner_ids)
