"""Business logic services."""

from .change_notifier import ChangeEvent, ChangeNotifier, ActivityLogNotifier, NullNotifier
from .section_service import SectionService, SaveResult, VersionListing
from .restore_service import RestoreService, RestoreResult

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "ActivityLogNotifier",
    "NullNotifier",
    "SectionService",
    "SaveResult",
    "VersionListing",
    "RestoreService",
    "RestoreResult",
]
