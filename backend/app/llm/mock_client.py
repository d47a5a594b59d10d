"""Mock chat client for testing without calling OpenRouter."""

from __future__ import annotations

from app.llm.openrouter import AIServiceError, OpenRouterClient


class MockChatClient(OpenRouterClient):
    """Replays canned replies in place of the HTTP round-trip.

    Prompt templating and reply post-processing still run, only ``chat`` is
    replaced.

    Usage:
        mock = MockChatClient(replies=["HIGH ", "Ship the release notes."])
        await mock.suggest_priority("Fix prod outage")   # -> "high"
        mock.call_log[0]["messages"][1]["content"]       # -> "Task title: Fix prod outage"
    """

    def __init__(
        self,
        replies: list[str] | None = None,
        default_reply: str = "Mock response",
        error: str | None = None,
    ) -> None:
        super().__init__(api_key="mock-key", model="mock-model")
        self.replies = list(replies or [])
        self.default_reply = default_reply
        self.error = error
        self.call_log: list[dict] = []

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 500,
    ) -> str:
        self.call_log.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise AIServiceError(self.error)
        if self.replies:
            return self.replies.pop(0)
        return self.default_reply
