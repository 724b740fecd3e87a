"""
schemas/account.py
------------------
Pydantic models for login, tokens, user management and activation.

Security note:
  - hashed_password is NEVER included in any response schema.
  - Passwords require min 8 chars; enforce stronger rules in production.
  - Permission names arrive as plain strings and are validated against the
    catalog by the route, so unknown names produce a 400 listing them all.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from erp_api.models.user import ActivationState, User
from erp_api.schemas.common import CamelModel


# ── Authentication ────────────────────────────────────────────────────────────

class RegisterRequest(CamelModel):
    """Self-registration; the account is not attached to any company."""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)


class RegisteredUser(CamelModel):
    id: str
    email: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


class TokenResponse(CamelModel):
    token: str
    refresh_token: str


class MeResponse(CamelModel):
    id: str
    email: str
    company_id: int
    roles: list[str]
    permissions: list[str]

    @classmethod
    def from_user(cls, user: User) -> "MeResponse":
        return cls(
            id=user.id,
            email=user.email,
            company_id=user.tenant_id,
            roles=user.role_names,
            permissions=user.permission_values,
        )


class PermissionCatalog(CamelModel):
    permissions: list[str]
    groups: dict[str, list[str]]


# ── User management ───────────────────────────────────────────────────────────

class UserCreate(CamelModel):
    """Used by an admin to create a user within their company."""
    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    roles: Optional[list[str]] = Field(
        default=None, description="Role names; defaults to ['User']"
    )


class UserCreated(CamelModel):
    id: str
    email: str
    company_id: int
    roles: list[str]

    @classmethod
    def from_user(cls, user: User) -> "UserCreated":
        return cls(
            id=user.id,
            email=user.email,
            company_id=user.tenant_id,
            roles=user.role_names,
        )


class UserRead(CamelModel):
    id: str
    email: str
    email_confirmed: bool
    company_id: int
    roles: list[str]
    permissions: list[str]
    activation_state: ActivationState
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(
            id=user.id,
            email=user.email,
            email_confirmed=user.email_confirmed,
            company_id=user.tenant_id,
            roles=user.role_names,
            permissions=user.permission_values,
            activation_state=user.activation_state,
            created_at=user.created_at,
        )


class PermissionsUpdate(CamelModel):
    permissions: list[str] = Field(
        ...,
        examples=[["view_inventory", "create_inventory"]],
        description="Complete permission set; replaces the current one",
    )


class UserPermissions(CamelModel):
    user_id: str
    permissions: list[str]


# ── Invitation / activation ───────────────────────────────────────────────────

class InvitationRead(CamelModel):
    user_id: str
    email: str
    activation_url: Optional[str] = None
    email_token: str
    reset_token: str


class ActivateRequest(CamelModel):
    user_id: str
    email_token: str = Field(..., min_length=1)
    reset_token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8, max_length=128)
