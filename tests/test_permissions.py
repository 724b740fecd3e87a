"""Permission catalog and parsing of client-supplied permission lists."""

import pytest

from erp_api.core.exceptions import InvalidPermission
from erp_api.core.permissions import (
    ALL_PERMISSIONS,
    PERMISSION_GROUPS,
    Permission,
    lookup_permission,
    parse_permissions,
)


def test_catalog_has_fifteen_permissions_in_declared_order():
    assert len(ALL_PERMISSIONS) == 15
    assert ALL_PERMISSIONS[0] is Permission.view_dashboard
    assert ALL_PERMISSIONS[-1] is Permission.assign_permissions
    assert [p.value for p in ALL_PERMISSIONS[1:5]] == [
        "view_inventory",
        "edit_inventory",
        "delete_inventory",
        "create_inventory",
    ]


def test_groups_cover_catalog_exactly_once():
    grouped = [p for members in PERMISSION_GROUPS.values() for p in members]
    assert sorted(grouped) == sorted(ALL_PERMISSIONS)
    assert len(grouped) == len(set(grouped))


def test_lookup_is_case_insensitive_and_trims():
    assert lookup_permission("VIEW_Inventory") is Permission.view_inventory
    assert lookup_permission("  edit_projects ") is Permission.edit_projects
    assert lookup_permission("fly") is None


def test_parse_deduplicates_case_variants():
    assert parse_permissions(["view_inventory", "VIEW_INVENTORY", "View_Inventory"]) == [
        Permission.view_inventory
    ]


def test_parse_returns_catalog_order():
    assert parse_permissions(["manage_users", "create_inventory", "view_dashboard"]) == [
        Permission.view_dashboard,
        Permission.create_inventory,
        Permission.manage_users,
    ]


def test_parse_empty_list():
    assert parse_permissions([]) == []


def test_parse_reports_every_unknown_value():
    with pytest.raises(InvalidPermission) as excinfo:
        parse_permissions(["view_inventory", "fly", "teleport", "fly"])

    err = excinfo.value
    assert err.invalid == ["fly", "teleport"]
    assert err.status_code == 400
    body = err.to_dict()
    assert body["invalid"] == ["fly", "teleport"]
    assert "fly" in body["detail"] and "teleport" in body["detail"]


def test_unknown_case_variants_are_reported_once():
    with pytest.raises(InvalidPermission) as excinfo:
        parse_permissions(["fly", "FLY", " Fly ", "view_inventory"])

    assert excinfo.value.invalid == ["fly"]
