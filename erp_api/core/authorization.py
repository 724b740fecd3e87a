"""
core/authorization.py
---------------------
Policy evaluation for protected endpoints.

A policy is either a role requirement or a permission requirement:

  - role:        the caller must hold that role.
  - permission:  the caller must hold the exact permission claim
                 (case-sensitive, catalog spelling).

The Admin role satisfies every policy. No permission implies another.

Evaluation works on the claims embedded in the caller's token, so a change
to a user's roles or permissions applies from the next token they obtain.
The FastAPI dependencies that wrap these checks live in dependencies.py.
"""

from typing import Any, FrozenSet, Mapping

from pydantic import BaseModel

from erp_api.core.permissions import PERMISSION_CLAIM_TYPE, Permission
from erp_api.core.tenancy import NO_TENANT, resolve_tenant_id

ADMIN_ROLE = "Admin"
USER_ROLE = "User"


def _as_strings(value: Any) -> FrozenSet[str]:
    # A single-valued claim may arrive as a bare string
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(str(v) for v in value)


class Principal(BaseModel):
    """The authenticated caller, as described by their access token."""
    user_id: str
    email: str = ""
    tenant_id: int = NO_TENANT
    roles: FrozenSet[str] = frozenset()
    permissions: FrozenSet[str] = frozenset()
    token_id: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        return cls(
            user_id=str(claims.get("sub", "")),
            email=str(claims.get("email", "")),
            tenant_id=resolve_tenant_id(claims),
            roles=_as_strings(claims.get("role")),
            permissions=_as_strings(claims.get(PERMISSION_CLAIM_TYPE)),
            token_id=str(claims.get("jti", "")),
        )

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    @property
    def has_tenant(self) -> bool:
        return self.tenant_id != NO_TENANT


def has_role(principal: Principal, role: str) -> bool:
    return principal.is_admin or role in principal.roles


def has_permission(principal: Principal, permission: Permission) -> bool:
    return principal.is_admin or permission.value in principal.permissions
