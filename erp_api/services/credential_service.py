"""
services/credential_service.py
------------------------------
Credential provider: accounts, passwords, one-time artifacts and external
identity links.

Everything that touches password hashes or one-time token values goes
through this module. Callers receive User objects or opaque strings and never
see digests.

One-time artifacts:
  - 32 random bytes, URL-safe encoded; only the SHA-256 digest is stored.
  - Expire after ONE_TIME_TOKEN_EXPIRE_HOURS.
  - Single use: consuming one stamps consumed_at, and a stamped or expired
    token never matches again.
  - Issuing a new artifact leaves older ones of the same kind valid until
    they expire.
"""

import hashlib
import secrets
from datetime import timedelta
from typing import Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.config import settings
from erp_api.core.exceptions import Conflict
from erp_api.core.logging import get_logger
from erp_api.core.security import hash_password, verify_password
from erp_api.db.base import utcnow
from erp_api.models.credential import ArtifactKind, ExternalLogin, OneTimeToken
from erp_api.models.user import Role, User

logger = get_logger(__name__)


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialService:

    # ── Accounts ──────────────────────────────────────────────────────────────

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
        result = await db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_account(
        db: AsyncSession,
        email: str,
        password: Optional[str] = None,
        company_id: Optional[int] = None,
        email_confirmed: bool = False,
        roles: Iterable[Role] = (),
    ) -> User:
        """
        Create a user. Without a password the account cannot log in until it
        is activated.
        Raises Conflict on duplicate email (case-insensitive).
        """
        email = normalize_email(email)
        if await CredentialService.get_user_by_email(db, email) is not None:
            raise Conflict("A user with this email already exists.")

        user = User(
            email=email,
            hashed_password=hash_password(password) if password else None,
            email_confirmed=email_confirmed,
            company_id=company_id,
            roles=list(roles),
            claims=[],
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise Conflict("A user with this email already exists.")

        logger.info("Account created", user_id=user.id, tenant_id=user.tenant_id)
        return user

    @staticmethod
    def verify_password(user: User, password: str) -> bool:
        return verify_password(password, user.hashed_password)

    @staticmethod
    def set_password(user: User, password: str) -> None:
        user.hashed_password = hash_password(password)

    @staticmethod
    async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
        """
        Verify credentials and return the User if valid, else None.
        Email lookup is case-insensitive. Accounts without a password never
        authenticate.
        """
        user = await CredentialService.get_user_by_email(db, email)
        if user is None or not CredentialService.verify_password(user, password):
            return None
        return user

    # ── One-time artifacts ────────────────────────────────────────────────────

    @staticmethod
    async def issue_one_time_artifact(
        db: AsyncSession, user: User, kind: ArtifactKind
    ) -> str:
        """Create a new artifact for the user and return its raw value."""
        value = secrets.token_urlsafe(32)
        db.add(
            OneTimeToken(
                user_id=user.id,
                kind=kind.value,
                token_hash=_digest(value),
                expires_at=utcnow() + timedelta(hours=settings.ONE_TIME_TOKEN_EXPIRE_HOURS),
            )
        )
        await db.flush()
        return value

    @staticmethod
    async def consume_one_time_artifact(
        db: AsyncSession, user: User, kind: ArtifactKind, value: str
    ) -> bool:
        """
        Mark a matching, unexpired, unused artifact as used.
        Returns False when no such artifact exists.
        """
        now = utcnow()
        result = await db.execute(
            update(OneTimeToken)
            .where(
                OneTimeToken.user_id == user.id,
                OneTimeToken.kind == kind.value,
                OneTimeToken.token_hash == _digest(value),
                OneTimeToken.consumed_at.is_(None),
                OneTimeToken.expires_at > now,
            )
            .values(consumed_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    # ── External identities ───────────────────────────────────────────────────

    @staticmethod
    async def find_user_by_external_identity(
        db: AsyncSession, provider: str, provider_key: str
    ) -> User | None:
        result = await db.execute(
            select(User)
            .join(ExternalLogin, ExternalLogin.user_id == User.id)
            .where(
                ExternalLogin.provider == provider,
                ExternalLogin.provider_key == provider_key,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def link_external_identity(
        db: AsyncSession, user: User, provider: str, provider_key: str
    ) -> ExternalLogin:
        """
        Attach an external identity to the user. Linking the same identity
        to the same user again is a no-op.
        Raises Conflict if the identity already belongs to another user.
        """
        result = await db.execute(
            select(ExternalLogin).where(
                ExternalLogin.provider == provider,
                ExternalLogin.provider_key == provider_key,
            )
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            if existing.user_id != user.id:
                raise Conflict(f"This {provider} account is linked to another user.")
            return existing

        link = ExternalLogin(provider=provider, provider_key=provider_key, user_id=user.id)
        db.add(link)
        await db.flush()
        logger.info("External identity linked", user_id=user.id, provider=provider)
        return link
