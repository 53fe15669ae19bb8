"""Activity log and owner grant queries."""

from typing import List, Optional

from ..models import ActivityLog, OwnerGrant


class ActivityRepository:
    """Write and read the activity feed."""

    def __init__(self, db):
        self.db = db

    def add(self, entry: ActivityLog) -> ActivityLog:
        self.db.add(entry)
        self.db.flush()
        return entry

    def get_by_owner(self, owner_id: str, limit: int = 20) -> List[ActivityLog]:
        return (
            self.db.query(ActivityLog)
            .filter(ActivityLog.owner_id == owner_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all()
        )

    def get_recent(self, limit: int = 10, owner_ids: Optional[List[str]] = None) -> List[ActivityLog]:
        """Most recent entries, optionally restricted to a set of owners.

        ``owner_ids=None`` means no restriction; an empty list matches nothing.
        """
        query = self.db.query(ActivityLog)
        if owner_ids is not None:
            if not owner_ids:
                return []
            query = query.filter(ActivityLog.owner_id.in_(owner_ids))
        return (
            query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all()
        )


class GrantRepository:
    """Read access for owner grants."""

    def __init__(self, db):
        self.db = db

    def get_by_user(self, user_id: str) -> List[OwnerGrant]:
        return self.db.query(OwnerGrant).filter(OwnerGrant.user_id == user_id).all()

    def upsert(self, user_id: str, owner_id: str, role: str, granted_by: Optional[str] = None) -> OwnerGrant:
        grant = self.db.query(OwnerGrant).filter(
            OwnerGrant.user_id == user_id, OwnerGrant.owner_id == owner_id
        ).first()
        if grant is None:
            grant = OwnerGrant(user_id=user_id, owner_id=owner_id, role=role, granted_by=granted_by)
            self.db.add(grant)
        else:
            grant.role = role
            grant.granted_by = granted_by
        self.db.flush()
        return grant
