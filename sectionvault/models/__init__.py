"""Database models."""

from .section_kind import SectionKind
from .section import Section
from .version import SectionVersion
from .activity import ActivityLog, OwnerGrant

__all__ = [
    "SectionKind", "Section", "SectionVersion",
    "ActivityLog", "OwnerGrant",
]
