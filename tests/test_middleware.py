"""Tests for the middleware stack — bearer extraction, auth context, headers, request IDs.

Learn: The authenticator is tested two ways. authenticate() and
extract_bearer_token() are pure functions, so most rules are checked
directly. The HTTP tests then confirm the permissive behaviour end to
end: a bad token never fails a request by itself, only a route that
needs a user does.
"""

from datetime import datetime, timedelta, timezone

import pytest
from structlog.testing import capture_logs

from taskguard.auth.context import ANONYMOUS
from taskguard.auth.jwt import create_access_token
from taskguard.middleware.authentication import authenticate, extract_bearer_token


# ═══════════════════════════════════════════════════════════
# Bearer extraction
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize("header,expected", [
    ("Bearer abc.def.ghi", "abc.def.ghi"),
    ("Bearer  abc", " abc"),  # only the single prefix space is stripped
    (None, None),
    ("", None),
    ("Bearer ", None),
    ("Bearer", None),
    ("bearer abc", None),
    ("BEARER abc", None),
    ("Basic dXNlcjpwYXNz", None),
    ("Token abc", None),
])
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


# ═══════════════════════════════════════════════════════════
# authenticate()
# ═══════════════════════════════════════════════════════════


def test_valid_token_sets_subject():
    token = create_access_token("alice@example.com", 3)
    identity = authenticate("/api/v1/tasks", f"Bearer {token}")
    assert identity.is_authenticated
    assert identity.subject == "alice@example.com"
    assert identity.user_id == 3


def test_no_header_is_anonymous():
    assert authenticate("/api/v1/tasks", None) is ANONYMOUS


def test_invalid_token_is_anonymous_not_an_error():
    assert authenticate("/api/v1/tasks", "Bearer nope") is ANONYMOUS


def test_expired_token_is_anonymous():
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token = create_access_token("alice@example.com", 3, expires_minutes=60, issued_at=issued)
    assert authenticate("/api/v1/tasks", f"Bearer {token}") is ANONYMOUS


@pytest.mark.parametrize("path", ["/api/v1/auth/register", "/api/v1/auth/login"])
def test_public_paths_skip_token_handling(path):
    token = create_access_token("alice@example.com", 3)
    assert authenticate(path, f"Bearer {token}") is ANONYMOUS


def test_me_is_not_a_public_path():
    token = create_access_token("alice@example.com", 3)
    assert authenticate("/api/v1/auth/me", f"Bearer {token}").is_authenticated


def test_rejected_token_is_logged_without_the_token():
    with capture_logs() as logs:
        authenticate("/api/v1/tasks", "Bearer secret-looking-garbage")
    events = [e for e in logs if e["event"] == "taskguard.auth.token_rejected"]
    assert len(events) == 1
    assert "secret-looking-garbage" not in str(events[0])


# ═══════════════════════════════════════════════════════════
# Through the app
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_protected_route_without_token_is_401(client):
    r = await client.get("/api/v1/tasks")
    assert r.status_code == 401
    assert r.json()["error"] == "NOT_AUTHENTICATED"
    assert r.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_bad_token_looks_like_no_token(client):
    """Malformed, forged and absent credentials all produce the same response."""
    responses = [
        await client.get("/api/v1/tasks"),
        await client.get("/api/v1/tasks", headers={"Authorization": "Bearer x.y.z"}),
        await client.get("/api/v1/tasks", headers={"Authorization": "Bearer garbage"}),
    ]
    assert {r.status_code for r in responses} == {401}
    assert len({r.text for r in responses}) == 1


@pytest.mark.asyncio
async def test_lowercase_bearer_is_not_accepted(client, register):
    headers, _ = await register("case@example.com")
    token = headers["Authorization"].removeprefix("Bearer ")
    r = await client.get("/api/v1/tasks", headers={"Authorization": f"bearer {token}"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_login_ignores_a_bad_token(client, register):
    """Public endpoints work even if the client still sends a stale token."""
    await register("stale@example.com")
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": "stale@example.com", "password": "password_123"},
        headers={"Authorization": "Bearer expired-or-garbage"},
    )
    assert r.status_code == 200


# ═══════════════════════════════════════════════════════════
# Security headers + request IDs
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/api/v1/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_auth_responses_are_not_cached(client, register):
    await register("nocache@example.com")
    r = await client.post(
        "/api/v1/auth/login",
        json={"email": "nocache@example.com", "password": "password_123"},
    )
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/api/v1/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/v1/health")
    r2 = await client.get("/api/v1/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": "test-trace-12345"})
    assert r.headers["X-Request-ID"] == "test-trace-12345"


@pytest.mark.asyncio
async def test_unsafe_request_id_replaced(client):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": "x" * 300})
    assert r.headers["X-Request-ID"] != "x" * 300
    assert len(r.headers["X-Request-ID"]) == 36
