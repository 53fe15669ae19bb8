"""Activity feed schemas."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class ActivityResponse(BaseModel):
    id: int
    activity_type: str
    action: str
    message: str
    user_id: Optional[str] = None
    owner_id: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
