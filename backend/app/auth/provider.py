"""Supabase Auth (GoTrue) REST client.

Users, passwords and sessions live in the managed auth service; this client
only forwards calls and parses the replies:

    POST /auth/v1/token?grant_type=password       sign in
    POST /auth/v1/token?grant_type=refresh_token  refresh a session
    POST /auth/v1/signup                          register
    POST /auth/v1/logout                          revoke the session
    POST /auth/v1/recover                         email a password reset link
    GET  /auth/v1/user                            resolve an access token
    PUT  /auth/v1/user                            change the password
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10.0


class AuthProviderError(Exception):
    """The provider rejected the call or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthUser(BaseModel):
    """Identity as reported by the provider. ``id`` is the ownership key."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    created_at: datetime | None = None
    email_confirmed_at: datetime | None = None


class AuthSession(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    expires_in: int = 3600
    token_type: str = "bearer"
    user: AuthUser


class SignUpResult(BaseModel):
    user: AuthUser | None = None
    session: AuthSession | None = None  # Present when email confirmation is off


class SupabaseAuthClient:
    """Async client for the Supabase Auth REST API."""

    def __init__(self, url: str, api_key: str, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self._base_url = url.rstrip("/") + "/auth/v1"
        self._api_key = api_key
        self._timeout = timeout

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        data = await self._request(
            "POST", "/token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession.model_validate(data)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        data = await self._request(
            "POST", "/token", params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return AuthSession.model_validate(data)

    async def sign_up(self, email: str, password: str, redirect_to: str | None = None) -> SignUpResult:
        params = {"redirect_to": redirect_to} if redirect_to else None
        data = await self._request("POST", "/signup", params=params, json={"email": email, "password": password})
        # With autoconfirm the reply is a session; otherwise it is the bare user.
        if "access_token" in data:
            session = AuthSession.model_validate(data)
            return SignUpResult(user=session.user, session=session)
        return SignUpResult(user=AuthUser.model_validate(data) if data.get("id") else None)

    async def sign_out(self, access_token: str) -> None:
        await self._request("POST", "/logout", access_token=access_token)

    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request("POST", "/recover", params=params, json={"email": email})

    async def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve an access token. Returns None when the provider rejects it."""
        try:
            data = await self._request("GET", "/user", access_token=access_token)
        except AuthProviderError as e:
            if e.status_code in (401, 403):
                logger.debug("Access token rejected by auth provider")
                return None
            raise
        return AuthUser.model_validate(data)

    async def update_user(self, access_token: str, password: str) -> AuthUser:
        data = await self._request("PUT", "/user", access_token=access_token, json={"password": password})
        return AuthUser.model_validate(data)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        headers = {"apikey": self._api_key, "Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(
                    method, self._base_url + path, params=params, json=json, headers=headers,
                )
        except httpx.HTTPError as e:
            logger.warning("Auth provider unreachable on %s %s: %s", method, path, e)
            raise AuthProviderError("Authentication service unavailable") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("Auth provider returned %d on %s %s: %s", resp.status_code, method, path, message)
            raise AuthProviderError(message, status_code=resp.status_code)

        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()


def _error_message(resp: httpx.Response) -> str:
    """Pull the human-readable message out of a GoTrue error body."""
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Authentication service error: {resp.status_code}"
