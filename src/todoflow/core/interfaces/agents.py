"""
Agent Collaborator Protocols

The planner, executor and evaluator are request/response collaborators.
The orchestrator only depends on these protocols, so tests can inject
deterministic stubs and production wires the LLM-backed implementations.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from todoflow.core.domain.models import (
    ChatMessage,
    EvaluationResult,
    ExecutionResult,
    OperationPlan,
)


class PlannerProtocol(Protocol):
    """Turns a user message into an OperationPlan."""

    async def plan(self, message: str, context: Sequence[ChatMessage]) -> OperationPlan:
        ...


class ActionExecutorProtocol(Protocol):
    """Turns an operation plan into one concrete action plus an explanation."""

    async def execute(
        self,
        operation: str,
        plan_context: dict[str, Any],
        message: str,
        context: Sequence[ChatMessage],
    ) -> ExecutionResult:
        ...


class EvaluatorProtocol(Protocol):
    """Scores the executor's explanation and rewrites it into the final reply."""

    async def evaluate(
        self, message: str, explanation: str, context: Sequence[ChatMessage]
    ) -> EvaluationResult:
        ...
