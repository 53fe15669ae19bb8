"""Permission checking: the access gate in front of the section store.

This is the one place where access rules are defined. The store itself
never checks access; routes call ``require_owner_access`` first.

Design:
    - Roles: admin > editor > viewer
    - Actions: read, edit
    - A user's grants are (owner_id, role) pairs; '' grants every owner
    - An exact owner grant wins over the root grant
    - No matching grant = no access
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..exceptions import NotAuthorizedError

if TYPE_CHECKING:
    from ..models import OwnerGrant

# Role → allowed actions. Each role includes the actions of the roles below it.
_ROLE_ACTIONS: dict[str, set[str]] = {
    "admin": {"read", "edit", "admin"},
    "editor": {"read", "edit"},
    "viewer": {"read"},
}


def resolve_role(grants: list[OwnerGrant], owner_id: str) -> Optional[str]:
    """Effective role on *owner_id*: exact grant first, then the root grant."""
    root_role: Optional[str] = None
    for grant in grants:
        if grant.owner_id == owner_id:
            return grant.role
        if grant.owner_id == "":
            root_role = grant.role
    return root_role


def check_permission(grants: list[OwnerGrant], owner_id: str, action: str) -> bool:
    """Check whether *grants* allow *action* on *owner_id*."""
    role = resolve_role(grants, owner_id)
    if role is None:
        return False
    return action in _ROLE_ACTIONS.get(role, set())


def require_owner_access(grants: list[OwnerGrant], owner_id: str, action: str) -> None:
    """Raise NotAuthorizedError unless *grants* allow *action* on *owner_id*."""
    if not check_permission(grants, owner_id, action):
        raise NotAuthorizedError(owner_id)


def readable_owner_ids(grants: list[OwnerGrant]) -> Optional[list[str]]:
    """Owners the grants can read, or None when a root grant allows all."""
    owners: list[str] = []
    for grant in grants:
        if "read" not in _ROLE_ACTIONS.get(grant.role, set()):
            continue
        if grant.owner_id == "":
            return None
        owners.append(grant.owner_id)
    return owners
