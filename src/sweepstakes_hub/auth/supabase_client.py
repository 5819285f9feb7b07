"""
Supabase (GoTrue) auth client over httpx.

Endpoints: POST /auth/v1/token?grant_type=password, POST /auth/v1/signup,
POST /auth/v1/logout, GET /auth/v1/user. Every request carries the project's anon key
in the ``apikey`` header; session-scoped calls add the user's bearer token.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

import httpx

from sweepstakes_hub.errors import AuthenticationFailed, RemoteUnavailable

from .provider import AuthSession, AuthUser

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return default


@contextmanager
def _reading(path: str) -> Iterator[None]:
    """Turn a malformed success body into a typed error."""
    try:
        yield
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Auth provider %s returned an unexpected body: %r", path, e)
        raise RemoteUnavailable("The authentication service returned an unexpected response.") from e


class SupabaseAuthClient:
    """AuthProvider backed by the hosted Supabase auth REST API."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/auth/v1",
            headers={"apikey": anon_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else None
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Auth provider request %s %s failed: %s", method, path, e)
            raise RemoteUnavailable("The authentication service is unreachable. Please try again later.") from e
        if response.status_code >= 500:
            logger.warning("Auth provider %s %s returned %s", method, path, response.status_code)
            raise RemoteUnavailable("The authentication service is unavailable. Please try again later.")
        return response

    async def sign_in(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code >= 400:
            raise AuthenticationFailed(
                _error_message(response, "Failed to login. Please check your credentials.")
            )
        with _reading("/token"):
            body = response.json()
            return AuthSession(
                access_token=body["access_token"],
                refresh_token=body.get("refresh_token"),
                expires_at=body.get("expires_at"),
                user=AuthUser.from_payload(body["user"]),
            )

    async def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> AuthUser:
        response = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": dict(metadata)},
        )
        if response.status_code >= 400:
            raise AuthenticationFailed(
                _error_message(response, "Failed to create account. Please try again.")
            )
        with _reading("/signup"):
            body = response.json()
            # With email confirmation on, the user object is returned bare; otherwise inside a session.
            payload = body.get("user") if isinstance(body.get("user"), dict) else body
            return AuthUser.from_payload(payload)

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", access_token=access_token)
        if response.status_code >= 400 and response.status_code not in (401, 403, 404):
            raise AuthenticationFailed(_error_message(response, "Failed to sign out."))

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        response = await self._request("GET", "/user", access_token=access_token)
        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            raise AuthenticationFailed(_error_message(response, "Could not verify the session."))
        with _reading("/user"):
            return AuthUser.from_payload(response.json())
