"""
api/routes/account.py
---------------------
Authentication endpoints.

POST /account/register     - Self-registration (no company).
POST /account/login        - Exchange credentials for access + refresh tokens.
POST /account/refresh      - Exchange a refresh token for a new pair.
POST /account/activate     - Complete an invitation and set a password.
GET  /account/me           - The authenticated user's current profile.
GET  /account/permissions  - The permission catalog.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import Principal
from erp_api.core.exceptions import Unauthenticated
from erp_api.core.logging import get_logger
from erp_api.core.permissions import ALL_PERMISSIONS, PERMISSION_GROUPS
from erp_api.db.session import get_db
from erp_api.dependencies import get_current_principal, get_current_user
from erp_api.models.user import User
from erp_api.schemas.account import (
    ActivateRequest,
    LoginRequest,
    MeResponse,
    PermissionCatalog,
    RefreshRequest,
    RegisteredUser,
    RegisterRequest,
    TokenResponse,
)
from erp_api.services.credential_service import CredentialService
from erp_api.services.token_service import TokenPair, TokenService
from erp_api.services.user_service import UserService

logger = get_logger(__name__)

router = APIRouter(prefix="/account", tags=["Account"])


def _token_response(pair: TokenPair) -> TokenResponse:
    return TokenResponse(token=pair.access_token, refresh_token=pair.refresh_token)


@router.post(
    "/register",
    response_model=RegisteredUser,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user account without a company",
)
async def register(
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RegisteredUser:
    user = await CredentialService.create_account(db, body.email, body.password)
    return RegisteredUser.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login and receive a JWT access token",
)
async def login(
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email + password. The access token embeds the user's
    company, roles and permissions as of now.
    """
    user = await CredentialService.authenticate(db, body.email, body.password)
    if user is None:
        logger.info("Login failed")
        raise Unauthenticated("Invalid login attempt.")

    logger.info("Login succeeded", user_id=user.id, tenant_id=user.tenant_id)
    return _token_response(TokenService.issue_token_pair(user))


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Exchange a refresh token for a new token pair",
)
async def refresh(
    body: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    return _token_response(await TokenService.refresh(db, body.refresh_token))


@router.post(
    "/activate",
    response_model=TokenResponse,
    summary="Activate an invited account",
)
async def activate(
    body: ActivateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """
    Present both one-time artifacts from the invitation together with the
    new password. Each artifact works once.
    """
    user = await UserService.activate_user(
        db,
        user_id=body.user_id,
        email_token=body.email_token,
        reset_token=body.reset_token,
        password=body.password,
    )
    return _token_response(TokenService.issue_token_pair(user))


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get the currently authenticated user",
)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> MeResponse:
    return MeResponse.from_user(current_user)


@router.get(
    "/permissions",
    response_model=PermissionCatalog,
    summary="List every assignable permission",
)
async def list_permissions(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> PermissionCatalog:
    return PermissionCatalog(
        permissions=[p.value for p in ALL_PERMISSIONS],
        groups={
            group: [p.value for p in members]
            for group, members in PERMISSION_GROUPS.items()
        },
    )
