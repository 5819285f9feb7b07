"""
Supabase auth client against a mocked transport: request shapes and error mapping.
"""

from __future__ import annotations

import json

import httpx
import pytest

from sweepstakes_hub.auth import ADMIN_ROLE, SupabaseAuthClient
from sweepstakes_hub.errors import AuthenticationFailed, RemoteUnavailable

_USER = {"id": "u-1", "email": "admin@example.com", "user_metadata": {"role": "admin"}}


def _client(handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        "https://project.supabase.co/", "anon-key", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_sign_in_posts_password_grant() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers.get("apikey")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"access_token": "at", "refresh_token": "rt", "expires_at": 1700000000, "user": _USER},
        )

    client = _client(handler)
    session = await client.sign_in("admin@example.com", "secret123")
    await client.aclose()

    assert seen["url"] == "https://project.supabase.co/auth/v1/token?grant_type=password"
    assert seen["apikey"] == "anon-key"
    assert seen["body"] == {"email": "admin@example.com", "password": "secret123"}
    assert session.access_token == "at"
    assert session.user.id == "u-1"
    assert session.user.role == ADMIN_ROLE


@pytest.mark.asyncio
async def test_rejected_credentials_surface_provider_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})

    client = _client(handler)
    with pytest.raises(AuthenticationFailed) as exc_info:
        await client.sign_in("admin@example.com", "wrong")
    await client.aclose()
    assert exc_info.value.message == "Invalid login credentials"


@pytest.mark.asyncio
async def test_server_error_is_remote_unavailable() -> None:
    client = _client(lambda request: httpx.Response(502, text="bad gateway"))
    with pytest.raises(RemoteUnavailable):
        await client.sign_in("admin@example.com", "secret123")
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_error_is_remote_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(RemoteUnavailable):
        await client.get_user("at")
    await client.aclose()


@pytest.mark.asyncio
async def test_sign_up_sends_role_metadata_and_reads_bare_user() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_USER)

    client = _client(handler)
    user = await client.sign_up("admin@example.com", "secret123", {"role": ADMIN_ROLE})
    await client.aclose()
    assert seen["path"] == "/auth/v1/signup"
    assert seen["body"]["data"] == {"role": "admin"}
    assert user.id == "u-1"


@pytest.mark.asyncio
async def test_sign_up_reads_user_inside_session() -> None:
    client = _client(lambda request: httpx.Response(200, json={"access_token": "at", "user": _USER}))
    user = await client.sign_up("admin@example.com", "secret123", {})
    await client.aclose()
    assert user.email == "admin@example.com"


@pytest.mark.asyncio
async def test_get_user_returns_none_for_expired_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        return httpx.Response(401, json={"msg": "JWT expired"})

    client = _client(handler)
    assert await client.get_user("stale") is None
    await client.aclose()
    assert seen["auth"] == "Bearer stale"


@pytest.mark.asyncio
async def test_sign_out_tolerates_already_revoked_token() -> None:
    client = _client(lambda request: httpx.Response(401, json={"msg": "invalid token"}))
    await client.sign_out("gone")
    await client.aclose()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call,body",
    [
        ("sign_in", {"json": {}}),
        ("sign_in", {"json": {"access_token": "at", "user": {"email": "x@example.com"}}}),
        ("sign_up", {"json": ["unexpected"]}),
        ("get_user", {"json": {"email": "x@example.com"}}),
        ("get_user", {"text": "<html>maintenance</html>"}),
    ],
)
async def test_malformed_success_body_is_remote_unavailable(call, body) -> None:
    client = _client(lambda request: httpx.Response(200, **body))
    with pytest.raises(RemoteUnavailable) as exc:
        if call == "sign_in":
            await client.sign_in("admin@example.com", "secret123")
        elif call == "sign_up":
            await client.sign_up("admin@example.com", "secret123", {"role": ADMIN_ROLE})
        else:
            await client.get_user("at")
    await client.aclose()
    assert "unexpected response" in exc.value.message
