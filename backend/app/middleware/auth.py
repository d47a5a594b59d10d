"""Authentication gate middleware.

Resolves the caller once per request from the session cookie (or an
``Authorization: Bearer`` header) through the auth provider and stores the
result on ``request.state.user``. Routing policy:

    Public page/API      anonymous: allow      signed in: allow (/login, /register -> /)
    Protected API        anonymous: 401 JSON   signed in: allow
    Protected page       anonymous: -> /login  signed in: allow

Exempt paths (/health, /docs, /openapi.json, /redoc) skip the identity lookup.
When the access token is missing or rejected but a refresh token cookie is
present, the session is refreshed and the new cookies go out on the response,
unless the handler wrote session cookies of its own.
"""

from __future__ import annotations

import logging

from app.api.errors import UNAUTHORIZED, error_response
from app.auth.provider import AuthProviderError, AuthSession, AuthUser
from app.auth.session import (
    read_access_token,
    read_refresh_token,
    set_session_cookies,
    sets_session_cookie,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

logger = logging.getLogger(__name__)

# Paths that don't require authentication (exact match or sub-path)
PUBLIC_ROUTES = (
    "/login",
    "/register",
    "/forgot-password",
    "/reset-password",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/logout",
    "/api/auth/forgot-password",
    "/api/auth/reset-password",
)

# Infrastructure paths, no identity lookup at all
_EXEMPT_PATHS = frozenset({"/health", "/docs", "/docs/oauth2-redirect", "/openapi.json", "/redoc"})

# Signed-in users get bounced home from these
_AUTH_PAGES = frozenset({"/login", "/register"})


def is_public_route(path: str) -> bool:
    return any(path == route or path.startswith(route + "/") for route in PUBLIC_ROUTES)


def is_api_route(path: str) -> bool:
    return path.startswith("/api/")


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Applies the public/protected routing policy per request."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in _EXEMPT_PATHS:
            return await call_next(request)

        user, refreshed = await self._resolve_user(request)
        request.state.user = user
        request.state.refreshed_session = refreshed

        if user is None and not is_public_route(path):
            if is_api_route(path):
                return error_response("Authentication required", UNAUTHORIZED, 401)
            return RedirectResponse("/login", status_code=302)

        if user is not None and path in _AUTH_PAGES:
            response = RedirectResponse("/", status_code=302)
        else:
            response = await call_next(request)

        # Cookies written by the handler itself (login, logout) win over the refreshed session
        settings = request.app.state.settings
        if refreshed is not None and not sets_session_cookie(response, settings):
            set_session_cookies(response, refreshed, settings)
        return response

    @staticmethod
    async def _resolve_user(request: Request) -> tuple[AuthUser | None, AuthSession | None]:
        """Return (user, refreshed session). Provider outages count as anonymous."""
        settings = request.app.state.settings
        auth = request.app.state.auth_client

        try:
            token = read_access_token(request, settings)
            if token:
                user = await auth.get_user(token)
                if user is not None:
                    return user, None

            refresh_token = read_refresh_token(request, settings)
            if refresh_token:
                session = await auth.refresh_session(refresh_token)
                logger.debug("Session refreshed for user %s", session.user.id)
                return session.user, session
        except AuthProviderError as e:
            logger.warning("Could not resolve session on %s: %s", request.url.path, e.message)

        return None, None
