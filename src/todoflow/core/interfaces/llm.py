"""LLM provider protocol used by the LLM-backed collaborators."""

from typing import Any, Protocol


class LLMProviderProtocol(Protocol):
    """
    Chat completion provider.

    `complete` never raises for model errors. It returns a dict with
    `success`, and either `content`/`tool_calls`/`usage` or `error`.
    """

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        ...
