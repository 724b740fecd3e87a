"""
core/tenancy.py
---------------
Resolve the caller's tenant (company) id from decoded token claims.

Two claim names have been used over time. "tenantId" is preferred and
"companyId" is still accepted so older tokens keep working.

NO_TENANT (0) means the caller is not attached to any company. It is never a
wildcard: tenant-scoped queries compare company_id for equality, so a caller
without a tenant can see nothing, and tenant-scoped routes reject it outright.
"""

from typing import Any, Mapping

TENANT_CLAIM = "tenantId"
LEGACY_TENANT_CLAIM = "companyId"

NO_TENANT = 0


def parse_tenant_id(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return NO_TENANT
    try:
        tenant_id = int(str(value).strip())
    except ValueError:
        return NO_TENANT
    return tenant_id if tenant_id > 0 else NO_TENANT


def resolve_tenant_id(claims: Mapping[str, Any]) -> int:
    value = claims.get(TENANT_CLAIM)
    if value is None:
        value = claims.get(LEGACY_TENANT_CLAIM)
    return parse_tenant_id(value)
