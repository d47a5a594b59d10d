"""Server-rendered pages. Access control is the auth gate's job."""

from __future__ import annotations

from app.api.deps import get_category_repository, get_current_user, get_task_repository
from app.auth.provider import AuthUser
from app.models.schemas import CategoryOut, TaskOut, TaskQuery
from app.repositories.categories import CategoryRepository
from app.repositories.tasks import TaskRepository
from app.web.templates import (
    render_auth_page,
    render_forgot_password_page,
    render_home_page,
    render_reset_password_page,
)
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

router = APIRouter(include_in_schema=False)


def _page_query(request: Request) -> TaskQuery:
    """Filters from the query string. Bad values fall back to no filtering."""
    raw = {k: v for k, v in request.query_params.items() if k in TaskQuery.model_fields and v}
    try:
        return TaskQuery.model_validate(raw)
    except ValidationError:
        return TaskQuery()


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    user: AuthUser = Depends(get_current_user),
    tasks: TaskRepository = Depends(get_task_repository),
    categories: CategoryRepository = Depends(get_category_repository),
):
    query = _page_query(request)
    return render_home_page(
        email=user.email,
        tasks=[TaskOut.model_validate(t) for t in tasks.list(user.id, query)],
        categories=[CategoryOut.model_validate(c) for c in categories.list(user.id)],
        query=query,
        ai_enabled=request.app.state.ai_client is not None,
    )


@router.get("/login", response_class=HTMLResponse)
async def login_page():
    return render_auth_page("login")


@router.get("/register", response_class=HTMLResponse)
async def register_page():
    return render_auth_page("register")


@router.get("/forgot-password", response_class=HTMLResponse)
async def forgot_password_page():
    return render_forgot_password_page()


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_page():
    return render_reset_password_page()
