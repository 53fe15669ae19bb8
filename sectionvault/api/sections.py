"""Section API endpoints.

Endpoints are thin: they run the access gate, then hand off to
SectionService / RestoreService, which own the write discipline.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ..core.auth import AuthContext, require_auth, optional_auth
from ..database import SessionLocal, get_db
from ..schemas.section import (
    SectionSave,
    RestoreRequest,
    SectionResponse,
    VersionResponse,
    SaveResponse,
    RestoreResponse,
    VersionListResponse,
)
from ..services import ActivityLogNotifier, ChangeNotifier, RestoreService, SectionService
from ..services.permission_service import require_owner_access

router = APIRouter(prefix="/api/projects/{owner_id}/sections", tags=["sections"])


def get_notifier() -> ChangeNotifier:
    """Change sink used by the routes. Overridden in tests."""
    return ActivityLogNotifier(SessionLocal)


def get_section_service(
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> SectionService:
    return SectionService(db, notifier=notifier)


@router.get("", response_model=List[SectionResponse])
def list_sections(
    owner_id: str,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(optional_auth),
):
    """List every section saved for an owner."""
    require_owner_access(auth.grants, owner_id, "read")
    return service.list_sections(owner_id)


@router.get("/{kind}", response_model=SectionResponse)
def get_section(
    owner_id: str,
    kind: str,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(optional_auth),
):
    """Current content of one section."""
    require_owner_access(auth.grants, owner_id, "read")
    return service.get_section(owner_id, kind)


@router.put("/{kind}", response_model=SaveResponse)
def save_section(
    owner_id: str,
    kind: str,
    body: SectionSave,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(require_auth),
):
    """Save new content, archiving the content it replaces."""
    require_owner_access(auth.grants, owner_id, "edit")
    result = service.save(owner_id, kind, body.content, body.metadata, auth.user_id)
    return SaveResponse(
        created=result.created,
        changed=result.changed,
        version_number=result.archived.version_number if result.archived else None,
        section=SectionResponse.model_validate(result.section),
    )


@router.get("/{kind}/versions", response_model=VersionListResponse)
def list_versions(
    owner_id: str,
    kind: str,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(optional_auth),
):
    """All archived versions, newest first, plus the current content."""
    require_owner_access(auth.grants, owner_id, "read")
    listing = service.list_versions(owner_id, kind)
    return VersionListResponse(
        versions=[VersionResponse.model_validate(v) for v in listing.versions],
        current_content=listing.current_content,
    )


@router.get("/{kind}/versions/{version_id}", response_model=VersionResponse)
def get_version(
    owner_id: str,
    kind: str,
    version_id: str,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(optional_auth),
):
    """One archived version of this section."""
    require_owner_access(auth.grants, owner_id, "read")
    return service.get_version(owner_id, kind, version_id)


@router.post("/{kind}/restore", response_model=RestoreResponse)
def restore_version(
    owner_id: str,
    kind: str,
    body: RestoreRequest,
    service: SectionService = Depends(get_section_service),
    auth: AuthContext = Depends(require_auth),
):
    """Make an archived version current again, archiving the current content."""
    require_owner_access(auth.grants, owner_id, "edit")
    result = RestoreService(service).restore(owner_id, kind, body.version_id, auth.user_id)
    return RestoreResponse(
        changed=result.changed,
        version_number=result.archived.version_number if result.archived else None,
        section=SectionResponse.model_validate(result.section),
    )
