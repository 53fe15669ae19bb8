"""Errors raised by SectionVault.

Every error maps to one machine-readable code and one HTTP status. The API
renders them as ``{"error": CODE, "message": ..., "details": {...}}``.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Codes returned in the ``error`` field of error responses."""

    SECTION_NOT_FOUND = "SECTION_NOT_FOUND"
    VERSION_NOT_FOUND = "VERSION_NOT_FOUND"
    SECTION_MISMATCH = "SECTION_MISMATCH"
    INVALID_KIND = "INVALID_KIND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    CONFLICT = "CONFLICT"
    STORAGE_ERROR = "STORAGE_ERROR"


class SectionVaultError(Exception):
    """Base class. Subclasses fix ``error_code`` and ``status_code``."""

    error_code: ErrorCode = ErrorCode.STORAGE_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


# 404s

class SectionNotFoundError(SectionVaultError):
    """Nothing has been saved yet for (owner_id, kind)."""

    error_code = ErrorCode.SECTION_NOT_FOUND
    status_code = 404

    def __init__(self, owner_id: str, kind: str):
        super().__init__(
            f"No {kind} section saved for {owner_id}",
            {"owner_id": owner_id, "kind": kind},
        )


class VersionNotFoundError(SectionVaultError):
    error_code = ErrorCode.VERSION_NOT_FOUND
    status_code = 404

    def __init__(self, version_id: str):
        super().__init__(f"Version {version_id} does not exist", {"version_id": version_id})


class SectionMismatchError(SectionVaultError):
    """The version exists but belongs to another owner or kind.

    A 404 rather than a 403: callers learn nothing about other owners' ids.
    """

    error_code = ErrorCode.SECTION_MISMATCH
    status_code = 404

    def __init__(self, version_id: str, owner_id: str, kind: str):
        super().__init__(
            f"Version {version_id} is not part of the {kind} section of {owner_id}",
            {"version_id": version_id, "owner_id": owner_id, "kind": kind},
        )


# 400s

class InvalidKindError(SectionVaultError):
    error_code = ErrorCode.INVALID_KIND
    status_code = 400

    def __init__(self, kind: str):
        super().__init__(f"Unknown section kind: {kind!r}", {"kind": kind})


class ValidationError(SectionVaultError):
    error_code = ErrorCode.VALIDATION_ERROR
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)


# Access

class AuthenticationError(SectionVaultError):
    error_code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Invalid or missing authentication token"):
        super().__init__(message)


class NotAuthorizedError(SectionVaultError):
    """The caller has no grant allowing this action on the owner."""

    error_code = ErrorCode.NOT_AUTHORIZED
    status_code = 403

    def __init__(self, owner_id: str, message: str = "You do not have access to this project"):
        super().__init__(message, {"owner_id": owner_id})


# Write failures

class ConflictError(SectionVaultError):
    """Every attempt of a save/restore lost a race with another writer."""

    error_code = ErrorCode.CONFLICT
    status_code = 409

    def __init__(self, owner_id: str, kind: str, attempts: int):
        super().__init__(
            f"{owner_id}/{kind} kept changing underneath this write; gave up after {attempts} attempts",
            {"owner_id": owner_id, "kind": kind, "attempts": attempts},
        )


class StorageError(SectionVaultError):
    """The database failed. The unit of work was rolled back."""

    error_code = ErrorCode.STORAGE_ERROR
    status_code = 500

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        details = {"original_error": type(original_error).__name__} if original_error else None
        super().__init__(message, details)
