"""
core/security.py
----------------
Password hashing and JWT token utilities.

Design decisions:
  - bcrypt via passlib; the work factor comes from BCRYPT_ROUNDS (12 in
    production).
  - Access tokens carry sub, email, tenant id, jti, roles and permission
    claims so authorization needs no DB round-trip. They live 2 hours.
  - Refresh tokens carry only sub, jti and typ="refresh" and live 14 days.
  - Both are HS256-signed; iss and aud are always validated on decode.
  - Nothing is persisted. A token stays valid until it expires, even if the
    user's roles or permissions change in the meantime.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

from jose import jwt
from passlib.context import CryptContext

from erp_api.core.config import settings
from erp_api.core.exceptions import WrongTokenType
from erp_api.core.permissions import PERMISSION_CLAIM_TYPE
from erp_api.core.tenancy import LEGACY_TENANT_CLAIM, TENANT_CLAIM

ROLE_CLAIM = "role"
TOKEN_TYPE_CLAIM = "typ"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)


# ── Password Utilities ────────────────────────────────────────────────────────

def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the plain-text password."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """Constant-time comparison of plain password against stored hash."""
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


# ── JWT Utilities ─────────────────────────────────────────────────────────────

def _encode(payload: Dict[str, Any], expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload.update(
        {
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + expires_delta,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
    )
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode(token: str, leeway: int = 0) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        options={"leeway": leeway},
    )


def create_access_token(
    subject: str,
    email: str,
    tenant_id: int,
    roles: Iterable[str] = (),
    permissions: Iterable[str] = (),
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Mint a JWT access token.

    Args:
        subject: User id (stored in 'sub').
        email: User email.
        tenant_id: Company id, 0 when the user has no company. Written under
            both tenant claim names.
        roles: Role names, embedded verbatim as the 'role' list.
        permissions: Permission values, embedded verbatim as the 'perm' list.
        expires_delta: Optional custom expiry; defaults to settings value.

    Returns:
        Signed JWT string.
    """
    payload: Dict[str, Any] = {
        "sub": subject,
        "email": email,
        TENANT_CLAIM: tenant_id,
        LEGACY_TENANT_CLAIM: tenant_id,
        ROLE_CLAIM: list(roles),
        PERMISSION_CLAIM_TYPE: list(permissions),
    }
    return _encode(
        payload,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    payload: Dict[str, Any] = {
        "sub": subject,
        TOKEN_TYPE_CLAIM: REFRESH_TOKEN_TYPE,
    }
    return _encode(
        payload,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        JWTError: If the token is invalid, expired, tampered with, or was
            issued for another issuer/audience.
        WrongTokenType: If a refresh token is presented as a bearer token.

    Returns:
        Raw payload dict.
    """
    payload = _decode(token)
    if payload.get(TOKEN_TYPE_CLAIM) == REFRESH_TOKEN_TYPE:
        raise WrongTokenType("Refresh tokens cannot be used for authentication")
    return payload


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """
    Decode a refresh token, allowing a small clock skew.

    Raises:
        JWTError: If the token is invalid or expired.
        WrongTokenType: If the token does not carry typ="refresh".
    """
    payload = _decode(token, leeway=settings.REFRESH_TOKEN_LEEWAY_SECONDS)
    if payload.get(TOKEN_TYPE_CLAIM) != REFRESH_TOKEN_TYPE:
        raise WrongTokenType("Token is not a refresh token")
    return payload
