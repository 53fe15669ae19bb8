"""Section and version schemas."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from ..models.section_kind import SectionKind


class SectionSave(BaseModel):
    """Body of a save request."""
    content: str
    metadata: Optional[dict] = Field(
        default=None,
        description="Opaque side-data such as external links; omitted keeps the stored value",
    )


class RestoreRequest(BaseModel):
    version_id: str = Field(..., min_length=1)


class SectionResponse(BaseModel):
    id: str
    owner_id: str
    kind: SectionKind
    title: str
    content: str
    metadata: Optional[dict] = Field(default=None, validation_alias="extra_metadata")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VersionResponse(BaseModel):
    id: str
    section_id: str
    version_number: int
    content: str
    content_hash: str
    author_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class SaveResponse(BaseModel):
    success: bool = True
    created: bool
    changed: bool
    version_number: Optional[int] = Field(
        default=None, description="Number of the version archived by this save"
    )
    section: SectionResponse


class RestoreResponse(BaseModel):
    success: bool = True
    changed: bool
    version_number: Optional[int] = Field(
        default=None, description="Number of the version archived by this restore"
    )
    section: SectionResponse


class VersionListResponse(BaseModel):
    success: bool = True
    versions: List[VersionResponse]
    current_content: str
