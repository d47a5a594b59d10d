"""AI suggestion endpoints (OpenRouter).

POST /api/ai/suggest        — description / priority / improve suggestions
GET  /api/ai/summarize-week — prose summary of tasks completed in the last 7 days

Both answer 503 SERVICE_UNAVAILABLE when no OpenRouter key is configured.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from app.api.deps import get_ai_client, get_current_user, get_task_repository
from app.api.errors import InternalError, ValidationFailed
from app.auth.provider import AuthUser
from app.llm.openrouter import AIServiceError, CompletedTask, OpenRouterClient
from app.models.schemas import DateRange, Envelope, SuggestionOut, SuggestRequest, WeeklySummaryOut
from app.models.task import utcnow
from app.repositories.tasks import TaskRepository
from fastapi import APIRouter, Depends

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])

SUMMARY_WINDOW = timedelta(days=7)
EMPTY_WEEK_MESSAGE = (
    "No tasks completed in the past 7 days. "
    "Start marking tasks as done to see your weekly summary!"
)


@router.post("/suggest", response_model=Envelope[SuggestionOut])
async def suggest(
    payload: SuggestRequest,
    ai: OpenRouterClient = Depends(get_ai_client),
    user: AuthUser = Depends(get_current_user),
):
    try:
        if payload.type == "description":
            suggestion = await ai.suggest_description(payload.title)
        elif payload.type == "priority":
            suggestion = await ai.suggest_priority(payload.title, payload.description, payload.due_date)
        else:
            if not payload.description:
                raise ValidationFailed("Description is required for improve type")
            suggestion = await ai.improve_description(payload.title, payload.description)
    except AIServiceError as e:
        raise InternalError(str(e) or "AI service error") from e

    return Envelope(data=SuggestionOut(suggestion=suggestion, type=payload.type))


@router.get("/summarize-week", response_model=Envelope[WeeklySummaryOut])
async def summarize_week(
    ai: OpenRouterClient = Depends(get_ai_client),
    user: AuthUser = Depends(get_current_user),
    repo: TaskRepository = Depends(get_task_repository),
):
    end = utcnow()
    start = end - SUMMARY_WINDOW
    rows = repo.list_completed(user.id, since=start, until=end)
    date_range = DateRange(start=start, end=end)

    if not rows:
        return Envelope(data=WeeklySummaryOut(summary=EMPTY_WEEK_MESSAGE, task_count=0, date_range=date_range))

    completed = [
        CompletedTask(
            title=task.title,
            description=task.description,
            priority=task.priority,
            completed_at=task.completed_at,
            category=category_name,
        )
        for task, category_name in rows
    ]
    try:
        summary = await ai.summarize_week(completed)
    except AIServiceError as e:
        raise InternalError(str(e) or "Failed to generate summary") from e

    logger.info("Weekly summary generated over %d tasks", len(completed))
    return Envelope(data=WeeklySummaryOut(summary=summary, task_count=len(completed), date_range=date_range))
