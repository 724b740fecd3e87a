"""
services/user_service.py
------------------------
User management inside a company: creation, lookup, permission assignment,
invitation and activation.

Every operation on another user takes the acting admin's tenant id and
refuses targets in any other company with CrossTenantAccess. Unknown user
ids are NotFound.
"""

from typing import Iterable, NamedTuple, Optional
from urllib.parse import urlencode

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import USER_ROLE
from erp_api.core.config import settings
from erp_api.core.exceptions import Conflict, CrossTenantAccess, InvalidInput, NotFound
from erp_api.core.logging import get_logger
from erp_api.core.permissions import (
    PERMISSION_CLAIM_TYPE,
    Permission,
    parse_permissions,
)
from erp_api.db.base import utcnow
from erp_api.models.credential import ArtifactKind
from erp_api.models.user import ActivationState, User, UserClaim
from erp_api.schemas.account import UserCreate
from erp_api.services.credential_service import CredentialService
from erp_api.services.role_service import RoleService

logger = get_logger(__name__)


class Invitation(NamedTuple):
    user: User
    email_token: str
    reset_token: str
    activation_url: Optional[str]


def build_activation_url(user_id: str, email_token: str, reset_token: str) -> Optional[str]:
    if not settings.ACTIVATION_URL:
        return None
    query = urlencode(
        {"userId": user_id, "emailToken": email_token, "resetToken": reset_token}
    )
    separator = "&" if "?" in settings.ACTIVATION_URL else "?"
    return f"{settings.ACTIVATION_URL}{separator}{query}"


class UserService:

    @staticmethod
    async def list_users_in_tenant(db: AsyncSession, tenant_id: int) -> list[User]:
        result = await db.execute(
            select(User).where(User.company_id == tenant_id).order_by(User.email)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_user_in_tenant(
        db: AsyncSession, user_id: str, tenant_id: int
    ) -> User:
        user = await CredentialService.get_user_by_id(db, user_id)
        if user is None:
            raise NotFound("User not found.")
        if user.tenant_id != tenant_id:
            logger.warning(
                "Cross-tenant user access refused",
                target_user_id=user_id,
                tenant_id=tenant_id,
            )
            raise CrossTenantAccess("User belongs to another company.")
        return user

    @staticmethod
    async def create_user_by_admin(
        db: AsyncSession, data: UserCreate, tenant_id: int
    ) -> User:
        """
        Admin-initiated user creation within their own company.
        Defaults to the User role. The email starts unconfirmed.
        Raises InvalidInput on unknown roles and Conflict on duplicate email.
        """
        roles = await RoleService.get_roles(
            db, data.roles if data.roles is not None else [USER_ROLE]
        )
        user = await CredentialService.create_account(
            db,
            email=data.email,
            password=data.password,
            company_id=tenant_id,
            roles=roles,
        )
        logger.info(
            "Admin created user",
            new_user_id=user.id,
            roles=user.role_names,
            tenant_id=tenant_id,
        )
        return user

    @staticmethod
    async def set_permissions(
        db: AsyncSession,
        tenant_id: int,
        user_id: str,
        requested: Iterable[str],
    ) -> list[Permission]:
        """
        Replace the user's permission claims with exactly the requested set.

        The target is resolved first, so a user of another company is refused
        before any name is looked at. Names are then matched
        case-insensitively and de-duplicated; one unknown name raises
        InvalidPermission and nothing changes.

        Claims of other types are kept. An empty list clears every
        permission. Takes effect in the user's next token.
        """
        user = await UserService.get_user_in_tenant(db, user_id, tenant_id)
        granted = parse_permissions(requested)

        kept = [c for c in user.claims if c.claim_type != PERMISSION_CLAIM_TYPE]
        user.claims = kept + [
            UserClaim(claim_type=PERMISSION_CLAIM_TYPE, claim_value=p.value)
            for p in granted
        ]
        await db.flush()

        logger.info(
            "Permissions replaced",
            target_user_id=user.id,
            tenant_id=tenant_id,
            permissions=[p.value for p in granted],
        )
        return granted

    @staticmethod
    async def invite_user(db: AsyncSession, tenant_id: int, user_id: str) -> Invitation:
        """
        Issue a fresh email-confirmation / password-reset pair.
        Earlier pairs stay valid until they expire.
        Raises Conflict if the user is already active.
        """
        user = await UserService.get_user_in_tenant(db, user_id, tenant_id)
        if user.activation_state is ActivationState.active:
            raise Conflict("User is already active.")

        email_token = await CredentialService.issue_one_time_artifact(
            db, user, ArtifactKind.email_confirmation
        )
        reset_token = await CredentialService.issue_one_time_artifact(
            db, user, ArtifactKind.password_reset
        )
        user.invited_at = utcnow()
        await db.flush()

        logger.info("User invited", target_user_id=user.id, tenant_id=tenant_id)
        return Invitation(
            user=user,
            email_token=email_token,
            reset_token=reset_token,
            activation_url=build_activation_url(user.id, email_token, reset_token),
        )

    @staticmethod
    async def activate_user(
        db: AsyncSession,
        user_id: str,
        email_token: str,
        reset_token: str,
        password: str,
    ) -> User:
        """
        Confirm the email (unless already confirmed) and set the password.
        Both artifacts are consumed; the request's transaction rolls back
        both if either is rejected.
        """
        user = await CredentialService.get_user_by_id(db, user_id)
        if user is None:
            raise NotFound("User not found.")

        if not user.email_confirmed:
            if not await CredentialService.consume_one_time_artifact(
                db, user, ArtifactKind.email_confirmation, email_token
            ):
                raise InvalidInput("Invalid or expired email token")
            user.email_confirmed = True

        if not await CredentialService.consume_one_time_artifact(
            db, user, ArtifactKind.password_reset, reset_token
        ):
            raise InvalidInput("Invalid or expired reset token")

        CredentialService.set_password(user, password)
        await db.flush()

        logger.info("User activated", user_id=user.id, tenant_id=user.tenant_id)
        return user
