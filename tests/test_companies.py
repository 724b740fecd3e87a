"""Company registration and lookup."""

from erp_api.core.security import decode_access_token


async def test_register_company_bootstraps_admin(client):
    resp = await client.post(
        "/companies/register",
        json={
            "name": "  Acme  ",
            "adminEmail": "Admin@Acme.com",
            "adminPassword": "Str0ngPassw0rd!",
        },
    )

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["companyName"] == "Acme"
    assert body["adminEmail"] == "admin@acme.com"

    claims = decode_access_token(body["token"])
    assert claims["sub"] == body["adminUserId"]
    assert claims["tenantId"] == body["companyId"]
    assert claims["role"] == ["Admin"]
    assert claims["perm"] == []


async def test_duplicate_company_name_conflicts(api, acme):
    resp = await api.client.post(
        "/companies/register",
        json={"name": "Acme", "adminEmail": "other@acme.com", "adminPassword": "Str0ngPassw0rd!"},
    )
    assert resp.status_code == 409
    assert resp.json()["code"] == "conflict"


async def test_duplicate_admin_email_conflicts_without_creating_company(api, acme):
    resp = await api.client.post(
        "/companies/register",
        json={"name": "Initech", "adminEmail": "ADMIN@acme.com", "adminPassword": "Str0ngPassw0rd!"},
    )
    assert resp.status_code == 409

    created = await api.register_company("Initech", "boss@initech.com")
    assert created["companyName"] == "Initech"


async def test_blank_company_name_is_rejected(client):
    resp = await client.post(
        "/companies/register",
        json={"name": "   ", "adminEmail": "a@b.com", "adminPassword": "Str0ngPassw0rd!"},
    )
    assert resp.status_code == 422


async def test_companies_get_distinct_ids(acme, globex):
    assert acme["companyId"] != globex["companyId"]


async def test_get_my_company(api, acme):
    resp = await api.client.get("/companies/me", headers=api.auth(acme["token"]))
    assert resp.status_code == 200
    assert resp.json()["id"] == acme["companyId"]
    assert resp.json()["name"] == "Acme"


async def test_user_without_company_has_no_company(api):
    resp = await api.client.post(
        "/account/register", json={"email": "solo@example.com", "password": "Str0ngPassw0rd!"}
    )
    assert resp.status_code == 201
    tokens = await api.login("solo@example.com")

    resp = await api.client.get("/companies/me", headers=api.auth(tokens["token"]))
    assert resp.status_code == 404
