"""Data access repositories."""

from .base import BaseRepository
from .section_repository import SectionRepository
from .version_repository import VersionRepository
from .activity_repository import ActivityRepository, GrantRepository

__all__ = [
    "BaseRepository",
    "SectionRepository",
    "VersionRepository",
    "ActivityRepository",
    "GrantRepository",
]
