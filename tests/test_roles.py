"""RoleService name handling and lazy creation of role rows."""

import pytest
from sqlalchemy import func, select

from erp_api.core.exceptions import InvalidInput
from erp_api.models.user import Role
from erp_api.services.role_service import RoleService


def test_canonical_names_are_case_insensitive_and_unique():
    assert RoleService.canonical_names(["user", "ADMIN", " User "]) == ["User", "Admin"]


def test_unknown_roles_are_all_named():
    with pytest.raises(InvalidInput) as excinfo:
        RoleService.canonical_names(["User", "Wizard", "Root"])
    assert excinfo.value.extra["invalid"] == ["Wizard", "Root"]


async def test_rows_are_created_once_and_reused(db):
    first = await RoleService.get_roles(db, ["admin", "user"])
    second = await RoleService.get_roles(db, ["User"])

    assert [r.name for r in first] == ["Admin", "User"]
    assert second[0].id == first[1].id
    assert await db.scalar(select(func.count()).select_from(Role)) == 2


async def test_row_created_by_another_request_is_reused(db, monkeypatch):
    stored = Role(name="User")
    db.add(stored)
    await db.flush()

    # The lookup runs before the other request's insert becomes visible
    async def nothing_found(db, names):
        return {}

    monkeypatch.setattr(RoleService, "_existing", staticmethod(nothing_found))

    roles = await RoleService.get_roles(db, ["user"])

    assert [r.id for r in roles] == [stored.id]
    assert await db.scalar(select(func.count()).select_from(Role)) == 1
