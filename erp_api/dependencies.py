"""
dependencies.py
---------------
FastAPI dependency injection functions for authentication and authorisation.

Flow:
  1. HTTPBearer extracts the Bearer token from the Authorization header.
  2. get_current_principal validates and parses the JWT (no DB round-trip)
     into a Principal: user id, tenant id, roles and permission claims.
  3. require_role / require_permission gate an endpoint on those claims.
  4. get_tenant_id rejects callers without a company on tenant-scoped routes.
  5. get_current_user loads the full User record when a route needs the
     current persisted state rather than the token's snapshot.

The tenant id embedded in the JWT is passed explicitly to every service
call, preventing cross-tenant data access.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import (
    ADMIN_ROLE,
    Principal,
    has_permission,
    has_role,
)
from erp_api.core.exceptions import Forbidden, Unauthenticated
from erp_api.core.logging import bind_request_context, get_logger
from erp_api.core.permissions import Permission
from erp_api.core.security import decode_access_token
from erp_api.db.session import get_db
from erp_api.models.user import User
from erp_api.services.credential_service import CredentialService

logger = get_logger(__name__)

# auto_error=False so a missing header becomes our own 401 body
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Principal:
    """
    Decode the bearer token into a Principal.
    Raises 401 if the token is missing, invalid, expired, or a refresh token.
    """
    if credentials is None:
        raise Unauthenticated("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as exc:
        logger.warning("JWT decode failed", error=str(exc))
        raise Unauthenticated("Could not validate credentials")

    principal = Principal.from_claims(payload)
    if not principal.user_id:
        raise Unauthenticated("Could not validate credentials")
    bind_request_context(user_id=principal.user_id, tenant_id=principal.tenant_id)
    return principal


async def get_current_user(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Load the User behind the token.
    Raises 401 if the user no longer exists.
    """
    user = await CredentialService.get_user_by_id(db, principal.user_id)
    if user is None:
        logger.warning("User from valid JWT not found in DB", user_id=principal.user_id)
        raise Unauthenticated("Could not validate credentials")
    return user


async def get_tenant_id(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> int:
    """The caller's company id. Raises 403 when the caller has none."""
    if not principal.has_tenant:
        raise Forbidden("No company is associated with this account")
    return principal.tenant_id


def require_role(role: str) -> Callable:
    """
    Guard that ensures the caller holds `role` (Admin always passes).

    Example:
        @router.post("/projects")
        async def create(admin: Annotated[Principal, Depends(require_role("Admin"))]):
            ...
    """
    async def _guard(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not has_role(principal, role):
            logger.info(
                "Role check failed",
                user_id=principal.user_id,
                tenant_id=principal.tenant_id,
                required_role=role,
            )
            raise Forbidden(f"Role '{role}' is required")
        return principal
    return _guard


def require_permission(permission: Permission) -> Callable:
    """Guard that ensures the caller holds `permission` (Admin always passes)."""
    async def _guard(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not has_permission(principal, permission):
            logger.info(
                "Permission check failed",
                user_id=principal.user_id,
                tenant_id=principal.tenant_id,
                required_permission=permission.value,
            )
            raise Forbidden(f"Permission '{permission.value}' is required")
        return principal
    return _guard


get_current_admin = require_role(ADMIN_ROLE)
