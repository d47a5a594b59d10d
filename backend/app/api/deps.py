"""FastAPI dependencies: per-request session, repositories, caller identity, clients.

Long-lived collaborators (engine, auth client, AI client, settings) are built
once by the application factory and stored on ``app.state``.
"""

from __future__ import annotations

from collections.abc import Iterator

from app.api.errors import ServiceUnavailable, Unauthorized, ValidationFailed, first_error_message
from app.auth.provider import AuthUser, SupabaseAuthClient
from app.config import Settings
from app.llm.openrouter import OpenRouterClient
from app.models.schemas import TaskQuery
from app.repositories.categories import CategoryRepository
from app.repositories.tasks import TaskRepository
from fastapi import Depends, Query, Request
from pydantic import ValidationError
from sqlmodel import Session

AI_NOT_CONFIGURED = "AI service not configured. Please add OPENROUTER_API_KEY to your environment."


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session


def get_task_repository(session: Session = Depends(get_session)) -> TaskRepository:
    return TaskRepository(session)


def get_category_repository(session: Session = Depends(get_session)) -> CategoryRepository:
    return CategoryRepository(session)


def get_auth_client(request: Request) -> SupabaseAuthClient:
    return request.app.state.auth_client


def get_current_user(request: Request) -> AuthUser:
    """The caller, as resolved by the auth gate. Protected routes depend on this."""
    user = getattr(request.state, "user", None)
    if user is None:
        raise Unauthorized()
    return user


def get_ai_client(request: Request) -> OpenRouterClient:
    client = request.app.state.ai_client
    if client is None:
        raise ServiceUnavailable(AI_NOT_CONFIGURED)
    return client


def get_task_query(
    status: str | None = Query(default=None),
    priority: str | None = Query(default=None),
    category_id: str | None = Query(default=None),
    sort: str | None = Query(default=None),
    order: str | None = Query(default=None),
) -> TaskQuery:
    """Validate list filters. Empty values are treated as absent."""
    raw = {
        "status": status,
        "priority": priority,
        "category_id": category_id,
        "sort": sort,
        "order": order,
    }
    try:
        return TaskQuery.model_validate({k: v for k, v in raw.items() if v})
    except ValidationError as e:
        raise ValidationFailed(first_error_message(e.errors())) from e
