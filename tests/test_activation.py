"""Invitation and activation of admin-created users."""

from urllib.parse import parse_qs, urlparse

from erp_api.core.security import decode_access_token

NEW_PASSWORD = "Brand-New-Passw0rd"


async def _invite(api, admin_token: str, user_id: str) -> dict:
    resp = await api.client.post(
        f"/account/users/{user_id}/invite", headers=api.auth(admin_token)
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def _activate(api, invitation: dict, password: str = NEW_PASSWORD, **overrides):
    body = {
        "userId": invitation["userId"],
        "emailToken": invitation["emailToken"],
        "resetToken": invitation["resetToken"],
        "password": password,
        **overrides,
    }
    return await api.client.post("/account/activate", json=body)


async def _state(api, admin_token: str, user_id: str) -> str:
    resp = await api.client.get(f"/account/users/{user_id}", headers=api.auth(admin_token))
    return resp.json()["activationState"]


async def test_invite_then_activate(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    assert await _state(api, acme["token"], user["id"]) == "provisioned"

    invitation = await _invite(api, acme["token"], user["id"])
    assert invitation["email"] == "jane@acme.com"
    assert await _state(api, acme["token"], user["id"]) == "invited"

    query = parse_qs(urlparse(invitation["activationUrl"]).query)
    assert query["userId"] == [user["id"]]
    assert query["emailToken"] == [invitation["emailToken"]]
    assert query["resetToken"] == [invitation["resetToken"]]

    resp = await _activate(api, invitation)
    assert resp.status_code == 200, resp.text
    claims = decode_access_token(resp.json()["token"])
    assert claims["sub"] == user["id"]
    assert claims["tenantId"] == acme["companyId"]
    assert claims["role"] == ["User"]

    assert await _state(api, acme["token"], user["id"]) == "active"
    await api.login("jane@acme.com", NEW_PASSWORD)


async def test_provisioned_user_cannot_log_in(api, acme):
    await api.create_user(acme["token"], "jane@acme.com", password=None)
    resp = await api.client.post(
        "/account/login", json={"email": "jane@acme.com", "password": NEW_PASSWORD}
    )
    assert resp.status_code == 401


async def test_activation_artifacts_are_single_use(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    invitation = await _invite(api, acme["token"], user["id"])

    assert (await _activate(api, invitation)).status_code == 200

    resp = await _activate(api, invitation, password="Another-Passw0rd")
    assert resp.status_code == 400
    await api.login("jane@acme.com", NEW_PASSWORD)


async def test_bad_reset_token_leaves_email_token_unused(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    invitation = await _invite(api, acme["token"], user["id"])

    resp = await _activate(api, invitation, resetToken="bogus")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid or expired reset token"
    assert await _state(api, acme["token"], user["id"]) == "invited"

    resp = await _activate(api, invitation)
    assert resp.status_code == 200


async def test_bad_email_token_is_rejected(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    invitation = await _invite(api, acme["token"], user["id"])

    resp = await _activate(api, invitation, emailToken="bogus")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid or expired email token"


async def test_reinvite_keeps_earlier_artifacts_valid(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    first = await _invite(api, acme["token"], user["id"])
    second = await _invite(api, acme["token"], user["id"])
    assert first["resetToken"] != second["resetToken"]

    resp = await _activate(api, first)
    assert resp.status_code == 200


async def test_inviting_active_user_conflicts(api, acme):
    user = await api.create_user(acme["token"], "jane@acme.com", password=None)
    invitation = await _invite(api, acme["token"], user["id"])
    await _activate(api, invitation)

    resp = await api.client.post(
        f"/account/users/{user['id']}/invite", headers=api.auth(acme["token"])
    )
    assert resp.status_code == 409


async def test_activate_unknown_user(api):
    resp = await api.client.post(
        "/account/activate",
        json={
            "userId": "00000000-0000-0000-0000-000000000000",
            "emailToken": "x",
            "resetToken": "y",
            "password": NEW_PASSWORD,
        },
    )
    assert resp.status_code == 404
