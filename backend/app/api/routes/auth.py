"""Authentication endpoints, all delegated to the managed auth provider.

POST /api/auth/login           — password sign-in, sets session cookies
POST /api/auth/register        — sign-up with email confirmation link
POST /api/auth/logout          — revoke session, clear cookies
POST /api/auth/forgot-password — email a reset link (same reply for unknown emails)
POST /api/auth/reset-password  — set a new password for the current/recovery session
"""

from __future__ import annotations

import logging

from app.api.deps import get_auth_client, get_settings
from app.api.errors import AuthFailed
from app.auth.provider import AuthProviderError, AuthUser, SupabaseAuthClient
from app.auth.session import clear_session_cookies, current_access_token, set_session_cookies
from app.config import Settings
from app.models.schemas import (
    Envelope,
    ForgotPasswordRequest,
    LoginRequest,
    MessageOut,
    RegisterRequest,
    ResetPasswordRequest,
)
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

REGISTERED_MESSAGE = "Registration successful! Please check your email to confirm your account."
RESET_EMAIL_MESSAGE = "If an account exists with this email, you will receive a password reset link."


class LoginOut(BaseModel):
    user: AuthUser


class RegisterOut(BaseModel):
    user: AuthUser | None = None
    message: str


class PasswordUpdatedOut(BaseModel):
    message: str
    user: AuthUser


def site_url(request: Request, settings: Settings) -> str:
    """Public origin for links in provider emails."""
    if settings.site_url:
        return settings.site_url.rstrip("/")
    return str(request.base_url).rstrip("/")


@router.post("/login", response_model=Envelope[LoginOut])
async def login(
    payload: LoginRequest,
    response: Response,
    auth: SupabaseAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    try:
        session = await auth.sign_in_with_password(payload.email, payload.password)
    except AuthProviderError as e:
        raise AuthFailed(e.message, status_code=401) from e

    set_session_cookies(response, session, settings)
    logger.info("User %s signed in", session.user.id)
    return Envelope(data=LoginOut(user=session.user))


@router.post("/register", response_model=Envelope[RegisterOut], status_code=201)
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    auth: SupabaseAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await auth.sign_up(
            payload.email,
            payload.password,
            redirect_to=f"{site_url(request, settings)}/login",
        )
    except AuthProviderError as e:
        raise AuthFailed(e.message, status_code=400) from e

    if result.session is not None:
        set_session_cookies(response, result.session, settings)
    return Envelope(data=RegisterOut(user=result.user, message=REGISTERED_MESSAGE))


@router.post("/logout", response_model=Envelope[MessageOut])
async def logout(
    request: Request,
    response: Response,
    auth: SupabaseAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    token = current_access_token(request, settings)
    if token:
        try:
            await auth.sign_out(token)
        except AuthProviderError as e:
            # Only a rejected token is fine to ignore; the session is gone either way.
            if e.status_code not in (401, 403):
                raise AuthFailed(e.message, status_code=500) from e

    clear_session_cookies(response, settings)
    return Envelope(data=MessageOut(message="Logged out successfully"))


@router.post("/forgot-password", response_model=Envelope[MessageOut])
async def forgot_password(
    payload: ForgotPasswordRequest,
    request: Request,
    auth: SupabaseAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    try:
        await auth.reset_password_for_email(
            payload.email,
            redirect_to=f"{site_url(request, settings)}/reset-password",
        )
    except AuthProviderError as e:
        raise AuthFailed(e.message, status_code=400) from e

    return Envelope(data=MessageOut(message=RESET_EMAIL_MESSAGE))


@router.post("/reset-password", response_model=Envelope[PasswordUpdatedOut])
async def reset_password(
    payload: ResetPasswordRequest,
    request: Request,
    auth: SupabaseAuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    token = payload.access_token or current_access_token(request, settings)
    if not token:
        raise AuthFailed("Auth session missing", status_code=400)

    try:
        user = await auth.update_user(token, payload.password)
    except AuthProviderError as e:
        raise AuthFailed(e.message, status_code=400) from e

    return Envelope(data=PasswordUpdatedOut(message="Password updated successfully", user=user))
