"""Task Planner FastAPI application.

Entry point for the backend server (``uvicorn app.main:app``).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from app.api.errors import register_exception_handlers
from app.api.health import VERSION
from app.api.health import router as health_router
from app.api.routes.ai import router as ai_router
from app.api.routes.auth import router as auth_router
from app.api.routes.categories import router as categories_router
from app.api.routes.tasks import router as tasks_router
from app.auth.provider import SupabaseAuthClient
from app.config import Settings, settings as default_settings
from app.db.database import build_engine, create_db_and_tables
from app.llm.openrouter import OpenRouterClient, build_ai_client
from app.middleware.auth import AuthGateMiddleware
from app.web.pages import router as pages_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_UNSET = object()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    create_db_and_tables(app.state.engine)
    logger.info(
        "Task Planner started (auth provider %s, AI suggestions %s)",
        "configured" if app.state.settings.auth_configured else "NOT configured",
        "enabled" if app.state.ai_client is not None else "disabled",
    )
    yield
    app.state.engine.dispose()


def create_app(
    settings: Settings | None = None,
    *,
    engine: Engine | None = None,
    auth_client: SupabaseAuthClient | None = None,
    ai_client: OpenRouterClient | None | object = _UNSET,
) -> FastAPI:
    """Build the application. Collaborators default to ones built from settings."""
    settings = settings or default_settings
    logging.getLogger("app").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="Task Planner",
        description="Task management with AI-assisted suggestions",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine if engine is not None else build_engine(settings.database_url)
    app.state.auth_client = auth_client or SupabaseAuthClient(
        settings.supabase_url, settings.supabase_key, timeout=settings.auth_timeout,
    )
    app.state.ai_client = build_ai_client(settings) if ai_client is _UNSET else ai_client

    # Middleware (order matters: last added = outermost)
    app.add_middleware(AuthGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    register_exception_handlers(app)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(categories_router)
    app.include_router(ai_router)
    app.include_router(pages_router)

    return app


app = create_app()
