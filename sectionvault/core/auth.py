"""Who is calling: FastAPI dependencies that resolve the acting principal.

``require_auth`` guards writes and answers 401 without a valid bearer token.
``optional_auth`` guards reads; a missing or bad token yields a context with
no grants, which the access gate then denies.

With ``AUTH_ENABLED=false`` both return an anonymous admin holding a grant
on every owner.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import TokenPayload, decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """The caller's user id (recorded as ``actor_id``), global role and owner grants."""

    user_id: str
    role: str
    grants: list = field(default_factory=list)


@dataclass(frozen=True)
class _RootGrant:
    owner_id: str
    role: str


_EVERY_OWNER = _RootGrant(owner_id="", role="admin")
_ANONYMOUS_ADMIN = AuthContext(user_id="anonymous", role="admin", grants=[_EVERY_OWNER])
_NO_ACCESS = AuthContext(user_id="anonymous", role="viewer")


def _verify(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[TokenPayload]:
    if credentials is None:
        return None
    return decode_token(credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm)


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    if not settings.auth_enabled:
        return _ANONYMOUS_ADMIN
    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = _verify(credentials)
    if payload is None:
        logger.info("Rejected bearer token", extra={"reason": "invalid_or_expired"})
        raise AuthenticationError("Invalid or expired token")
    return _context_for(payload, db)


def optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    if not settings.auth_enabled:
        return _ANONYMOUS_ADMIN

    payload = _verify(credentials)
    if payload is None:
        return _NO_ACCESS
    return _context_for(payload, db)


def _context_for(payload: TokenPayload, db: Session) -> AuthContext:
    """Admins reach every owner; other users get their stored owner grants."""
    from ..repositories import GrantRepository

    if payload.role == "admin":
        grants = [_EVERY_OWNER]
    else:
        grants = GrantRepository(db).get_by_user(payload.sub)
    return AuthContext(user_id=payload.sub, role=payload.role, grants=grants)
