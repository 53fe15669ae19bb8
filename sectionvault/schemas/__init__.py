"""Pydantic schemas for API validation."""

from .section import (
    SectionSave,
    RestoreRequest,
    SectionResponse,
    VersionResponse,
    SaveResponse,
    RestoreResponse,
    VersionListResponse,
)
from .activity import ActivityResponse

__all__ = [
    "SectionSave",
    "RestoreRequest",
    "SectionResponse",
    "VersionResponse",
    "SaveResponse",
    "RestoreResponse",
    "VersionListResponse",
    "ActivityResponse",
]
