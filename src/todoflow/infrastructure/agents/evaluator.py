"""
LLM Evaluator

Scores the worker's explanation and rewrites it into the reply shown to
the user. Any model or parsing failure yields `success=False`, in which
case the orchestrator keeps the raw explanation.
"""

from collections.abc import Sequence

import structlog

from todoflow.core.domain.models import ChatMessage, EvaluationResult
from todoflow.core.interfaces.llm import LLMProviderProtocol
from todoflow.core.prompts.todo_prompts import EVALUATOR_PROMPT
from todoflow.infrastructure.agents.parsing import history_to_messages, parse_json_object

logger = structlog.get_logger()


class LLMEvaluator:
    def __init__(self, llm_provider: LLMProviderProtocol, model: str | None = None):
        self.llm_provider = llm_provider
        self.model = model
        self.logger = logger.bind(component="llm_evaluator")

    async def evaluate(
        self, message: str, explanation: str, context: Sequence[ChatMessage]
    ) -> EvaluationResult:
        messages = [
            {"role": "system", "content": EVALUATOR_PROMPT},
            *history_to_messages(context),
            {"role": "user", "content": f"Draft reply to review:\n{explanation}"},
        ]
        result = await self.llm_provider.complete(
            messages, model=self.model, response_format={"type": "json_object"}
        )
        usage = result.get("usage")
        if not result.get("success"):
            return EvaluationResult(success=False, error=result.get("error"), usage=usage)

        try:
            data = parse_json_object(result.get("content"))
        except ValueError as e:
            self.logger.warning("evaluator.invalid_response", error=str(e))
            return EvaluationResult(success=False, error=str(e), usage=usage)

        final_response = data.get("finalResponse")
        if not isinstance(final_response, str) or not final_response.strip():
            return EvaluationResult(success=False, error="Missing finalResponse", usage=usage)

        evaluation = data.get("evaluation")
        return EvaluationResult(
            success=True,
            final_response=final_response.strip(),
            evaluation=evaluation if isinstance(evaluation, dict) else None,
            usage=usage,
        )
