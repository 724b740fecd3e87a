"""Credential redaction in structured logs."""

from erp_api.core.logging import REDACTED, redact_sensitive
from erp_api.core.security import create_refresh_token


def test_sensitive_keys_are_redacted():
    event = redact_sensitive(
        None,
        "info",
        {
            "event": "Login failed",
            "password": "hunter22",
            "Reset_Token": "abc",
            "user_id": "u-1",
        },
    )
    assert event["password"] == REDACTED
    assert event["Reset_Token"] == REDACTED
    assert event["user_id"] == "u-1"
    assert event["event"] == "Login failed"


def test_jwt_inside_free_text_is_masked():
    token = create_refresh_token("u-1")
    event = redact_sensitive(None, "warning", {"event": "x", "error": f"bad token {token} here"})
    assert token not in event["error"]
    assert event["error"] == f"bad token {REDACTED} here"
