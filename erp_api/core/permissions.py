"""
core/permissions.py
-------------------
The fixed catalog of grantable permissions.

Permissions are closed and compiled into the service; they are not database
rows. Members are declared in catalog order and that order is preserved
wherever a permission set is rendered.

Raw strings from clients are parsed once, by UserService.set_permissions after
the target user is resolved, via parse_permissions(); past that point only
Permission members are handled.
"""

from enum import Enum
from typing import Dict, Iterable, List, Tuple

from erp_api.core.exceptions import InvalidPermission

# claim_type used for permission rows in user_claims and key in the JWT
PERMISSION_CLAIM_TYPE = "perm"


class Permission(str, Enum):
    # Dashboard
    view_dashboard = "view_dashboard"

    # Inventory
    view_inventory = "view_inventory"
    edit_inventory = "edit_inventory"
    delete_inventory = "delete_inventory"
    create_inventory = "create_inventory"

    # Invoices
    view_invoices = "view_invoices"
    edit_invoices = "edit_invoices"
    delete_invoices = "delete_invoices"
    create_invoices = "create_invoices"

    # Projects
    view_projects = "view_projects"
    edit_projects = "edit_projects"
    delete_projects = "delete_projects"
    create_projects = "create_projects"

    # User management
    manage_users = "manage_users"
    assign_permissions = "assign_permissions"


ALL_PERMISSIONS: Tuple[Permission, ...] = tuple(Permission)

PERMISSION_GROUPS: Dict[str, Tuple[Permission, ...]] = {
    "dashboard": (Permission.view_dashboard,),
    "inventory": (
        Permission.view_inventory,
        Permission.edit_inventory,
        Permission.delete_inventory,
        Permission.create_inventory,
    ),
    "invoices": (
        Permission.view_invoices,
        Permission.edit_invoices,
        Permission.delete_invoices,
        Permission.create_invoices,
    ),
    "projects": (
        Permission.view_projects,
        Permission.edit_projects,
        Permission.delete_projects,
        Permission.create_projects,
    ),
    "user-management": (
        Permission.manage_users,
        Permission.assign_permissions,
    ),
}

_BY_KEY: Dict[str, Permission] = {p.value.lower(): p for p in ALL_PERMISSIONS}
_ORDER: Dict[Permission, int] = {p: i for i, p in enumerate(ALL_PERMISSIONS)}


def lookup_permission(value: str) -> Permission | None:
    """Case-insensitive lookup; None when the value is not in the catalog."""
    return _BY_KEY.get(value.strip().lower())


def parse_permissions(values: Iterable[str]) -> List[Permission]:
    """
    Validate and de-duplicate a client-supplied permission list.

    Matching is case-insensitive. The result is in catalog order with each
    permission at most once.

    Raises:
        InvalidPermission: naming every value that is not in the catalog,
            each case variant listed once under its first spelling. Nothing
            is returned for partially valid input.
    """
    found: set[Permission] = set()
    invalid: List[str] = []
    seen_invalid: set[str] = set()
    for raw in values:
        permission = lookup_permission(raw)
        if permission is not None:
            found.add(permission)
            continue
        key = raw.strip().lower()
        if key not in seen_invalid:
            seen_invalid.add(key)
            invalid.append(raw)

    if invalid:
        raise InvalidPermission(invalid)
    return sort_permissions(found)


def sort_permissions(permissions: Iterable[Permission]) -> List[Permission]:
    return sorted(set(permissions), key=_ORDER.__getitem__)
