"""Health check endpoint — database, auth provider and AI configuration."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel
from sqlalchemy import text

router = APIRouter()

VERSION = "0.1.0"


class HealthStatus(BaseModel):
    status: str  # "healthy" | "degraded" | "unhealthy"
    version: str
    checks: dict[str, dict]
    dependencies: dict[str, str]  # Simplified view for frontend
    timestamp: datetime


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request) -> HealthStatus:
    """Check storage connectivity and external service configuration."""
    settings = request.app.state.settings
    checks: dict[str, dict] = {}
    overall_healthy = True
    has_warning = False

    # 1. Database
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        checks["database"] = {"status": "ok", "detail": request.app.state.engine.dialect.name}
    except Exception as e:
        checks["database"] = {"status": "error", "detail": str(e)[:200]}
        overall_healthy = False

    # 2. Auth provider (config only; no network call)
    if settings.auth_configured:
        checks["auth_provider"] = {"status": "ok", "detail": "Supabase URL and key configured"}
    else:
        checks["auth_provider"] = {"status": "error", "detail": "SUPABASE_URL / SUPABASE_KEY not set"}
        overall_healthy = False

    # 3. AI suggestions (optional feature, never unhealthy)
    if request.app.state.ai_client is not None:
        checks["ai"] = {"status": "ok", "detail": f"model={settings.openrouter_model}"}
    elif not settings.ff_ai_suggestions:
        checks["ai"] = {"status": "disabled", "detail": "FF_AI_SUGGESTIONS=false"}
    else:
        checks["ai"] = {"status": "warning", "detail": "OPENROUTER_API_KEY not set (AI routes return 503)"}
        has_warning = True

    dependencies = {name: check["status"] for name, check in checks.items()}

    if overall_healthy:
        status = "degraded" if has_warning else "healthy"
    else:
        status = "unhealthy"

    return HealthStatus(
        status=status,
        version=VERSION,
        checks=checks,
        dependencies=dependencies,
        timestamp=datetime.now(timezone.utc),
    )
