"""Signing and verification of HS256 bearer tokens.

Tokens identify the acting user for section writes. The ``sub`` claim becomes
the ``actor_id`` recorded on archived versions and change events.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

ISSUER = "sectionvault"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims of a bearer token."""
    sub: str
    role: str
    exp: datetime


def create_token(
    subject: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: float = 24,
    now: Optional[float] = None,
) -> str:
    """Issue a signed token for *subject*.

    Args:
        subject: The acting user id.
        role: Global role claim (``"admin"``, ``"editor"`` or ``"viewer"``).
        secret: HMAC signing key.
        algorithm: Only HS256 is implemented.
        expires_hours: Lifetime; negative values produce an already expired token.
        now: Issue time as a UNIX timestamp (injectable for tests).
    """
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    issued_at = time.time() if now is None else now
    claims = {
        "sub": subject,
        "role": role,
        "iss": ISSUER,
        "iat": int(issued_at),
        "exp": int(issued_at + expires_hours * 3600),
    }
    signing_input = _encode_segment(_HEADER) + b"." + _encode_segment(claims)
    return (signing_input + b"." + _b64encode(_sign(signing_input, secret))).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Verify *token* and return its claims.

    Returns ``None`` for anything that does not verify: wrong shape, bad
    signature, foreign issuer, missing subject or expired.
    """
    if algorithm != "HS256":
        return None
    try:
        header_b64, claims_b64, signature_b64 = token.encode().split(b".")
        expected = _sign(header_b64 + b"." + claims_b64, secret)
        if not hmac.compare_digest(expected, _b64decode(signature_b64)):
            return None

        header = json.loads(_b64decode(header_b64))
        claims = json.loads(_b64decode(claims_b64))
    except (ValueError, TypeError, UnicodeDecodeError):
        return None

    if not isinstance(header, dict) or not isinstance(claims, dict):
        return None
    if header.get("alg") != "HS256" or claims.get("iss") != ISSUER:
        return None
    subject = claims.get("sub")
    exp = claims.get("exp")
    if not subject or not isinstance(exp, (int, float)) or time.time() > exp:
        return None

    return TokenPayload(
        sub=subject,
        role=claims.get("role", "viewer"),
        exp=datetime.fromtimestamp(exp, tz=timezone.utc),
    )


def _sign(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _encode_segment(data: dict) -> bytes:
    return _b64encode(json.dumps(data, separators=(",", ":")).encode())


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    return base64.urlsafe_b64decode(data + b"=" * (-len(data) % 4))
