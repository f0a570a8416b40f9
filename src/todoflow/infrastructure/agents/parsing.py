"""Helpers shared by the LLM-backed agents."""

import json
import re
from collections.abc import Sequence
from typing import Any

from todoflow.core.domain.models import ChatMessage

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_json_object(content: str | None) -> dict[str, Any]:
    """
    Parse a JSON object from model output, tolerating markdown fences.

    Raises:
        ValueError: If the content is empty or not a JSON object
    """
    if not content or not content.strip():
        raise ValueError("Empty model response")
    text = _FENCE_RE.sub("", content.strip())
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Model response is not a JSON object")
    return data


def history_to_messages(context: Sequence[ChatMessage]) -> list[dict[str, str]]:
    """Convert the conversation context into LLM chat messages."""
    return [message.to_llm_message() for message in context if message.content]
