"""
LLM Worker

Executes a planned operation by letting the model call exactly one of the
todo tools. The tool call becomes the turn's action; the model's text
becomes the explanation handed to the evaluator.
"""

import json
from collections.abc import Sequence
from typing import Any

import structlog

from todoflow.core.domain.models import Action, ChatMessage, ExecutionResult
from todoflow.core.interfaces.llm import LLMProviderProtocol
from todoflow.core.prompts.todo_prompts import WORKER_PROMPT
from todoflow.infrastructure.agents.parsing import history_to_messages
from todoflow.infrastructure.agents.todo_tools import get_todo_tool_specs

logger = structlog.get_logger()


class LLMWorker:
    """Action executor backed by native tool calling."""

    def __init__(self, llm_provider: LLMProviderProtocol, model: str | None = None):
        self.llm_provider = llm_provider
        self.model = model
        self.tool_specs = get_todo_tool_specs()
        self.logger = logger.bind(component="llm_worker")

    async def execute(
        self,
        operation: str,
        plan_context: dict[str, Any],
        message: str,
        context: Sequence[ChatMessage],
    ) -> ExecutionResult:
        system_prompt = WORKER_PROMPT.format(
            operation=operation,
            plan_context=json.dumps(plan_context, ensure_ascii=False, default=str),
        )
        messages = [{"role": "system", "content": system_prompt}, *history_to_messages(context)]

        result = await self.llm_provider.complete(
            messages, model=self.model, tools=self.tool_specs, tool_choice="required"
        )
        usage = result.get("usage")
        if not result.get("success"):
            return ExecutionResult(
                success=False,
                error=f"Worker LLM call failed: {result.get('error', 'unknown error')}",
                usage=usage,
            )

        content = (result.get("content") or "").strip()
        tool_calls = result.get("tool_calls") or []
        if not tool_calls:
            return ExecutionResult(
                success=False, explanation=content, error="No action generated", usage=usage
            )

        if len(tool_calls) > 1:
            self.logger.warning(
                "worker.extra_tool_calls_ignored",
                tools=[call.get("name") for call in tool_calls[1:]],
            )

        call = tool_calls[0]
        action = Action(name=str(call.get("name", "")), arguments=dict(call.get("arguments") or {}))
        explanation = content or (
            f"Running {action.name} with "
            f"{json.dumps(action.arguments, ensure_ascii=False, default=str)}."
        )
        return ExecutionResult(success=True, action=action, explanation=explanation, usage=usage)
