"""OpenRouter chat-completion client for task suggestions and weekly summaries.

Each operation is one templated call to POST {base_url}/chat/completions;
the reply text is read from ``choices[0].message.content``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

import httpx
from app.config import Settings

logger = logging.getLogger(__name__)

Priority = Literal["low", "medium", "high"]
_PRIORITIES: frozenset[str] = frozenset({"low", "medium", "high"})

DEFAULT_MODEL = "google/gemini-2.0-flash-exp:free"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

_DESCRIPTION_SYSTEM = (
    "You are a helpful assistant that improves task descriptions. Given a task title, "
    "provide a clear, actionable description in 1-2 sentences. Be concise and practical."
)
_PRIORITY_SYSTEM = (
    "You are a helpful assistant that suggests task priorities. Analyze the task and respond "
    'with ONLY one word: "low", "medium", or "high". Consider urgency, importance, and due date.'
)
_IMPROVE_SYSTEM = (
    "You are a helpful assistant that improves task descriptions. Make the description clearer, "
    "more actionable, and well-structured. Keep it concise (2-3 sentences max). "
    "Do not add unnecessary details."
)
_SUMMARY_SYSTEM = """You are a helpful assistant that analyzes completed tasks and provides insightful weekly summaries. Create a concise summary (3-4 paragraphs) that:
1. Highlights key accomplishments
2. Identifies patterns or themes in the work
3. Notes productivity trends (high priority items, categories focused on)
4. Provides brief encouragement or actionable insights

Be specific, positive, and actionable. Format in markdown."""


class AIServiceError(Exception):
    """Upstream chat-completion call failed."""


@dataclass
class CompletedTask:
    """A finished task as fed into the weekly summary prompt."""

    title: str
    priority: str
    completed_at: datetime
    description: str | None = None
    category: str | None = None


class OpenRouterClient:
    """Async client for the OpenRouter chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        app_url: str = "https://task-planner.local",
        app_title: str = "Task Planner",
    ) -> None:
        self.model = model
        self._url = base_url.rstrip("/") + "/chat/completions"
        self._timeout = timeout
        self._headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": app_url,
            "X-Title": app_title,
        }

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        """Send one chat completion and return the reply text.

        Raises:
            AIServiceError: non-2xx status, transport failure or an empty reply.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self._url, json=payload, headers=self._headers)
        except httpx.HTTPError as e:
            logger.warning("OpenRouter request failed: %s", e)
            raise AIServiceError(f"AI service unavailable: {e}") from e

        if resp.status_code >= 400:
            message = _upstream_error(resp)
            logger.warning("OpenRouter returned %d: %s", resp.status_code, message)
            raise AIServiceError(message)

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            content = None
        if not content:
            raise AIServiceError("No response content from OpenRouter")
        return content

    async def suggest_description(self, title: str) -> str:
        messages = [
            {"role": "system", "content": _DESCRIPTION_SYSTEM},
            {"role": "user", "content": f'Suggest a description for this task: "{title}"'},
        ]
        return await self.chat(messages, temperature=0.7, max_tokens=150)

    async def suggest_priority(
        self,
        title: str,
        description: str | None = None,
        due_date: date | str | None = None,
    ) -> Priority:
        """Ask for a priority. Anything but low/medium/high comes back as "medium"."""
        lines = [f"Task title: {title}"]
        if description:
            lines.append(f"Description: {description}")
        if due_date:
            lines.append(f"Due date: {due_date}")
        messages = [
            {"role": "system", "content": _PRIORITY_SYSTEM},
            {"role": "user", "content": "\n".join(lines)},
        ]
        reply = await self.chat(messages, temperature=0.3, max_tokens=10)
        return normalize_priority(reply)

    async def improve_description(self, title: str, description: str) -> str:
        messages = [
            {"role": "system", "content": _IMPROVE_SYSTEM},
            {
                "role": "user",
                "content": f'Task: "{title}"\nCurrent description: "{description}"\n\nImprove this description:',
            },
        ]
        return await self.chat(messages, temperature=0.5, max_tokens=200)

    async def summarize_week(self, tasks: list[CompletedTask]) -> str:
        messages = [
            {"role": "system", "content": _SUMMARY_SYSTEM},
            {
                "role": "user",
                "content": (
                    "Here are my completed tasks from the past 7 days:\n\n"
                    f"{format_completed_tasks(tasks)}\n\nProvide a weekly summary."
                ),
            },
        ]
        return await self.chat(messages, temperature=0.7, max_tokens=500)


def normalize_priority(reply: str) -> Priority:
    priority = reply.strip().lower()
    if priority in _PRIORITIES:
        return priority  # type: ignore[return-value]
    return "medium"


def format_completed_tasks(tasks: list[CompletedTask]) -> str:
    blocks = []
    for index, task in enumerate(tasks, start=1):
        lines = [f"{index}. {task.title}"]
        if task.description:
            lines.append(f"   Description: {task.description}")
        lines.append(f"   Priority: {task.priority}")
        if task.category:
            lines.append(f"   Category: {task.category}")
        lines.append(f"   Completed: {task.completed_at.date().isoformat()}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _upstream_error(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"OpenRouter API error: {resp.status_code}"


def build_ai_client(settings: Settings) -> OpenRouterClient | None:
    """Build the client from settings, or None when AI suggestions are off."""
    if not settings.ai_enabled:
        return None
    return OpenRouterClient(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        timeout=settings.openrouter_timeout,
        app_url=settings.openrouter_app_url,
        app_title=settings.openrouter_app_title,
    )
