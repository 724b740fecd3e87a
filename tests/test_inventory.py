"""Inventory endpoints: permission gating and company isolation."""

from decimal import Decimal

ITEM = {
    "sku": "WID-001",
    "name": "Widget",
    "description": "Standard widget",
    "category": "Hardware",
    "quantityOnHand": 10,
    "unitPrice": "4.50",
    "reorderLevel": 2,
}


async def _create(api, token: str, **overrides) -> dict:
    resp = await api.client.post(
        "/inventory", json={**ITEM, **overrides}, headers=api.auth(token)
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _user_with_permissions(api, admin_token: str, email: str, permissions: list[str]) -> str:
    user = await api.create_user(admin_token, email)
    resp = await api.set_permissions(admin_token, user["id"], permissions)
    assert resp.status_code == 204
    return (await api.login(email))["token"]


# ── CRUD ──────────────────────────────────────────────────────────────────────

async def test_admin_crud(api, acme):
    token = acme["token"]
    item = await _create(api, token)
    assert item["sku"] == "WID-001"
    assert Decimal(item["unitPrice"]) == Decimal("4.50")

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Widget"

    resp = await api.client.put(
        f"/inventory/{item['id']}",
        json={**ITEM, "name": "Widget XL", "quantityOnHand": 3},
        headers=api.auth(token),
    )
    assert resp.status_code == 204

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.json()["name"] == "Widget XL"
    assert resp.json()["quantityOnHand"] == 3

    resp = await api.client.delete(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.status_code == 204

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.status_code == 404


async def test_unit_price_keeps_full_precision(api, acme):
    item = await _create(api, acme["token"], unitPrice="9999999999999999.99")
    assert item["unitPrice"] == "9999999999999999.99"


async def test_unit_price_with_too_many_digits_is_rejected(api, acme):
    resp = await api.client.post(
        "/inventory",
        json={**ITEM, "unitPrice": "99999999999999999.99"},
        headers=api.auth(acme["token"]),
    )
    assert resp.status_code == 422


async def test_list_is_sorted_by_name(api, acme):
    await _create(api, acme["token"], sku="B", name="Bolt")
    await _create(api, acme["token"], sku="A", name="Anchor")

    resp = await api.client.get("/inventory", headers=api.auth(acme["token"]))
    assert [i["name"] for i in resp.json()] == ["Anchor", "Bolt"]


async def test_negative_quantity_is_rejected(api, acme):
    resp = await api.client.post(
        "/inventory", json={**ITEM, "quantityOnHand": -1}, headers=api.auth(acme["token"])
    )
    assert resp.status_code == 422


async def test_duplicate_sku_within_company_conflicts(api, acme):
    await _create(api, acme["token"])
    resp = await api.client.post(
        "/inventory", json={**ITEM, "name": "Other"}, headers=api.auth(acme["token"])
    )
    assert resp.status_code == 409


async def test_same_sku_in_different_companies(api, acme, globex):
    await _create(api, acme["token"])
    await _create(api, globex["token"])


async def test_items_without_sku_do_not_conflict(api, acme):
    await _create(api, acme["token"], sku=None, name="Loose screw")
    await _create(api, acme["token"], sku="", name="Loose nail")


async def test_update_without_sku_keeps_it(api, acme):
    item = await _create(api, acme["token"])
    body = {k: v for k, v in ITEM.items() if k != "sku"}

    resp = await api.client.put(
        f"/inventory/{item['id']}", json=body, headers=api.auth(acme["token"])
    )
    assert resp.status_code == 204

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(acme["token"]))
    assert resp.json()["sku"] == "WID-001"


async def test_update_to_taken_sku_conflicts(api, acme):
    await _create(api, acme["token"])
    other = await _create(api, acme["token"], sku="WID-002", name="Gadget")

    resp = await api.client.put(
        f"/inventory/{other['id']}",
        json={**ITEM, "name": "Gadget"},
        headers=api.auth(acme["token"]),
    )
    assert resp.status_code == 409


# ── Company isolation ─────────────────────────────────────────────────────────

async def test_other_company_items_are_invisible(api, acme, globex):
    item = await _create(api, acme["token"])
    intruder = api.auth(globex["token"])

    resp = await api.client.get("/inventory", headers=intruder)
    assert resp.json() == []

    resp = await api.client.get(f"/inventory/{item['id']}", headers=intruder)
    assert resp.status_code == 404

    resp = await api.client.put(f"/inventory/{item['id']}", json=ITEM, headers=intruder)
    assert resp.status_code == 404

    resp = await api.client.delete(f"/inventory/{item['id']}", headers=intruder)
    assert resp.status_code == 404

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(acme["token"]))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Widget"


# ── Permission gating ─────────────────────────────────────────────────────────

async def test_requires_authentication(client):
    resp = await client.get("/inventory")
    assert resp.status_code == 401


async def test_user_without_permissions_is_forbidden(api, acme):
    token = await _user_with_permissions(api, acme["token"], "jane@acme.com", [])
    resp = await api.client.get("/inventory", headers=api.auth(token))
    assert resp.status_code == 403
    assert resp.json()["code"] == "forbidden"


async def test_view_permission_does_not_allow_writes(api, acme):
    item = await _create(api, acme["token"])
    token = await _user_with_permissions(api, acme["token"], "jane@acme.com", ["view_inventory"])

    resp = await api.client.get("/inventory", headers=api.auth(token))
    assert resp.status_code == 200
    assert len(resp.json()) == 1

    resp = await api.client.post(
        "/inventory", json={**ITEM, "sku": "NEW"}, headers=api.auth(token)
    )
    assert resp.status_code == 403

    resp = await api.client.delete(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.status_code == 403


async def test_edit_permission_does_not_imply_view(api, acme):
    item = await _create(api, acme["token"])
    token = await _user_with_permissions(api, acme["token"], "jane@acme.com", ["edit_inventory"])

    resp = await api.client.put(
        f"/inventory/{item['id']}", json={**ITEM, "name": "Renamed"}, headers=api.auth(token)
    )
    assert resp.status_code == 204

    resp = await api.client.get(f"/inventory/{item['id']}", headers=api.auth(token))
    assert resp.status_code == 403


async def test_create_permission(api, acme):
    token = await _user_with_permissions(
        api, acme["token"], "jane@acme.com", ["create_inventory"]
    )
    item = await _create(api, token)
    assert item["name"] == "Widget"
