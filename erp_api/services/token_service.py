"""
services/token_service.py
-------------------------
Issue session tokens for a user from their current roles and permission
claims, and exchange refresh tokens for new pairs.

A token captures the user's roles and permissions at issuance. Later
changes show up only in tokens issued afterwards.
"""

from typing import NamedTuple

from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.exceptions import Unauthenticated
from erp_api.core.logging import get_logger
from erp_api.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from erp_api.models.user import User
from erp_api.services.credential_service import CredentialService

logger = get_logger(__name__)


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


class TokenService:

    @staticmethod
    def issue_access_token(user: User) -> str:
        return create_access_token(
            subject=user.id,
            email=user.email,
            tenant_id=user.tenant_id,
            roles=user.role_names,
            permissions=user.permission_values,
        )

    @staticmethod
    def issue_token_pair(user: User) -> TokenPair:
        return TokenPair(
            access_token=TokenService.issue_access_token(user),
            refresh_token=create_refresh_token(subject=user.id),
        )

    @staticmethod
    async def refresh(db: AsyncSession, refresh_token: str) -> TokenPair:
        """
        Validate a refresh token and issue a fresh pair reflecting the
        user's current roles and permissions.

        Raises:
            WrongTokenType: the token is not a refresh token.
            Unauthenticated: the token is invalid, expired, or its user is gone.
        """
        try:
            payload = decode_refresh_token(refresh_token)
        except JWTError as exc:
            logger.warning("Refresh token rejected", error=str(exc))
            raise Unauthenticated("Invalid or expired refresh token")

        user = await CredentialService.get_user_by_id(db, str(payload.get("sub", "")))
        if user is None:
            logger.warning("Refresh token for unknown user", user_id=payload.get("sub"))
            raise Unauthenticated("Invalid or expired refresh token")

        return TokenService.issue_token_pair(user)
