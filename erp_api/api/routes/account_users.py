"""
api/routes/account_users.py
---------------------------
Admin-only user management within the admin's company.

GET  /account/users                         - List users in the company.
POST /account/users                         - Create a user.
GET  /account/users/{user_id}               - One user.
GET  /account/users/{user_id}/permissions   - The user's permission claims.
PUT  /account/users/{user_id}/permissions   - Replace the permission claims.
POST /account/users/{user_id}/invite        - Issue activation artifacts.

A user id from another company yields 403, an unknown id 404.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import Principal
from erp_api.db.session import get_db
from erp_api.dependencies import get_current_admin, get_tenant_id
from erp_api.schemas.account import (
    InvitationRead,
    PermissionsUpdate,
    UserCreate,
    UserCreated,
    UserPermissions,
    UserRead,
)
from erp_api.services.user_service import UserService

router = APIRouter(prefix="/account/users", tags=["User management"])

# Sent with permission updates: tokens already issued keep their old claims
TOKEN_REFRESH_HEADER = "X-Token-Refresh-Required"


@router.get(
    "",
    response_model=list[UserRead],
    summary="List all users in the current company",
)
async def list_users(
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[UserRead]:
    users = await UserService.list_users_in_tenant(db, tenant_id)
    return [UserRead.from_user(u) for u in users]


@router.post(
    "",
    response_model=UserCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user in the current company",
)
async def create_user(
    body: UserCreate,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserCreated:
    """
    The company is taken from the admin's token; admins cannot create users
    in other companies. Without a password the user must be invited and
    activated before logging in.
    """
    user = await UserService.create_user_by_admin(db, body, tenant_id)
    return UserCreated.from_user(user)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get a user in the current company",
)
async def get_user(
    user_id: str,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRead:
    user = await UserService.get_user_in_tenant(db, user_id, tenant_id)
    return UserRead.from_user(user)


@router.get(
    "/{user_id}/permissions",
    response_model=UserPermissions,
    summary="Get a user's permissions",
)
async def get_user_permissions(
    user_id: str,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserPermissions:
    user = await UserService.get_user_in_tenant(db, user_id, tenant_id)
    return UserPermissions(user_id=user.id, permissions=user.permission_values)


@router.put(
    "/{user_id}/permissions",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace a user's permissions",
)
async def set_user_permissions(
    user_id: str,
    body: PermissionsUpdate,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """
    The submitted list becomes the user's complete permission set.
    Names are matched case-insensitively and de-duplicated; a single
    unknown name rejects the whole request.

    Tokens the user already holds are not updated. The response carries
    X-Token-Refresh-Required: true as a reminder that the change applies
    from the user's next login or refresh.
    """
    await UserService.set_permissions(db, tenant_id, user_id, body.permissions)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={TOKEN_REFRESH_HEADER: "true"},
    )


@router.post(
    "/{user_id}/invite",
    response_model=InvitationRead,
    summary="Issue activation artifacts for a user",
)
async def invite_user(
    user_id: str,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> InvitationRead:
    invitation = await UserService.invite_user(db, tenant_id, user_id)
    return InvitationRead(
        user_id=invitation.user.id,
        email=invitation.user.email,
        activation_url=invitation.activation_url,
        email_token=invitation.email_token,
        reset_token=invitation.reset_token,
    )
