"""Session cookies carrying the provider's access and refresh tokens."""

from __future__ import annotations

from app.auth.provider import AuthSession
from app.config import Settings
from starlette.requests import Request
from starlette.responses import Response


def read_access_token(request: Request, settings: Settings) -> str | None:
    """Access token from the session cookie, else from an Authorization: Bearer header."""
    token = request.cookies.get(settings.access_cookie_name)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:] or None
    return None


def read_refresh_token(request: Request, settings: Settings) -> str | None:
    return request.cookies.get(settings.refresh_cookie_name) or None


def current_access_token(request: Request, settings: Settings) -> str | None:
    """Access token of the live session: the one refreshed by the gate, else the request's own."""
    refreshed = getattr(request.state, "refreshed_session", None)
    if refreshed is not None:
        return refreshed.access_token
    return read_access_token(request, settings)


def sets_session_cookie(response: Response, settings: Settings) -> bool:
    """True when the response already writes (or clears) the access cookie."""
    prefix = f"{settings.access_cookie_name}="
    return any(value.startswith(prefix) for value in response.headers.getlist("set-cookie"))


def set_session_cookies(response: Response, session: AuthSession, settings: Settings) -> None:
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        session.refresh_token,
        max_age=settings.refresh_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    for name in (settings.access_cookie_name, settings.refresh_cookie_name):
        response.delete_cookie(name, path="/", httponly=True, samesite="lax", secure=settings.cookie_secure)
