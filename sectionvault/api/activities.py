"""Activity feed endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.auth import AuthContext, optional_auth
from ..core.config import settings
from ..database import get_db
from ..schemas.activity import ActivityResponse
from ..services import activity_service
from ..services.permission_service import readable_owner_ids, require_owner_access

router = APIRouter(tags=["activities"])


@router.get("/api/projects/{owner_id}/activities", response_model=List[ActivityResponse])
def list_owner_activities(
    owner_id: str,
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(optional_auth),
):
    """Recent section changes of one project."""
    require_owner_access(auth.grants, owner_id, "read")
    return activity_service.get_owner_activities(db, owner_id, limit or settings.activity_feed_limit)


@router.get("/api/activities/recent", response_model=List[ActivityResponse])
def list_recent_activities(
    limit: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(optional_auth),
):
    """Recent section changes across every project the caller can read."""
    return activity_service.get_recent(
        db, limit or settings.activity_feed_limit, readable_owner_ids(auth.grants)
    )
