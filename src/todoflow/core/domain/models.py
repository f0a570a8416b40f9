"""
Core Domain Models

This module defines the values that flow through one chat turn:
the chat messages themselves, the planner's OperationPlan, the executor's
ExecutionResult, the dispatcher's DispatchOutcome, the evaluator's
EvaluationResult and the InteractionRecord handed to the metrics log.

All of them are created fresh for every turn. Wire representations use the
camelCase keys the chat clients expect.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from todoflow.core.domain.todos import parse_timestamp, utcnow

DEFAULT_AGENT_TYPE = "default"


def new_id() -> str:
    return str(uuid.uuid4())


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop unset keys so absent metadata stays absent on the wire."""
    return {key: value for key, value in data.items() if value is not None}


def merge_usage(*usages: dict[str, int] | None) -> dict[str, int] | None:
    """Sum token usage dicts from several LLM calls; None if none reported."""
    totals: dict[str, int] = {}
    for usage in usages:
        if not usage:
            continue
        for key, value in usage.items():
            if isinstance(value, (int, float)):
                totals[key] = totals.get(key, 0) + int(value)
    return totals or None


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class MatchedTask:
    """Weak reference to an existing todo the planner thinks the user means."""

    id: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchedTask":
        return cls(id=str(data.get("id", "")), content=str(data.get("content", "")))


@dataclass(frozen=True)
class ToolCallRecord:
    """Audit entry for one dispatched action, embedded in assistant metadata."""

    id: str
    name: str
    arguments: str
    error: str | None = None
    type: str = "function"

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "id": self.id,
                "type": self.type,
                "name": self.name,
                "arguments": self.arguments,
                "error": self.error,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCallRecord":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            arguments=str(data.get("arguments", "{}")),
            error=data.get("error"),
            type=str(data.get("type", "function")),
        )


@dataclass(frozen=True)
class MessageMetadata:
    """
    Provenance attached to a chat message.

    User messages only carry `active_agent`. Assistant messages carry the
    whole audit trail of the turn that produced them.
    """

    active_agent: str | None = None
    tool_calls: list[ToolCallRecord] | None = None
    todo_ids: list[str] | None = None
    error: str | None = None
    matched_task: MatchedTask | None = None
    matched_content: str | None = None
    plan: dict[str, Any] | None = None
    evaluation: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "activeAgent": self.active_agent,
                "toolCalls": (
                    [call.to_dict() for call in self.tool_calls]
                    if self.tool_calls is not None
                    else None
                ),
                "todoIds": list(self.todo_ids) if self.todo_ids is not None else None,
                "error": self.error,
                "matchedTask": self.matched_task.to_dict() if self.matched_task else None,
                "matchedContent": self.matched_content,
                "plan": self.plan,
                "evaluation": self.evaluation,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MessageMetadata":
        if not data:
            return cls()
        tool_calls = data.get("toolCalls")
        matched = data.get("matchedTask")
        return cls(
            active_agent=data.get("activeAgent"),
            tool_calls=(
                [ToolCallRecord.from_dict(call) for call in tool_calls]
                if isinstance(tool_calls, list)
                else None
            ),
            todo_ids=list(data["todoIds"]) if isinstance(data.get("todoIds"), list) else None,
            error=data.get("error"),
            matched_task=MatchedTask.from_dict(matched) if isinstance(matched, dict) else None,
            matched_content=data.get("matchedContent"),
            plan=data.get("plan"),
            evaluation=data.get("evaluation"),
        )


@dataclass(frozen=True)
class ChatMessage:
    """An immutable chat message (user or assistant)."""

    id: str
    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utcnow)
    metadata: MessageMetadata = field(default_factory=MessageMetadata)

    @classmethod
    def user(cls, content: str, agent_type: str) -> "ChatMessage":
        return cls(
            id=new_id(),
            role=MessageRole.USER,
            content=content,
            metadata=MessageMetadata(active_agent=agent_type),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata.to_dict(),
        }

    def to_llm_message(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        return cls(
            id=str(data.get("id") or new_id()),
            role=MessageRole(data.get("role", MessageRole.USER.value)),
            content=str(data.get("content", "")),
            timestamp=parse_timestamp(data.get("timestamp")),
            metadata=MessageMetadata.from_dict(data.get("metadata")),
        )


@dataclass(frozen=True)
class PlanDetails:
    """The `plan` block of an OperationPlan."""

    operation: str
    complexity: str = "simple"
    required_tools: list[str] = field(default_factory=list)
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "complexity": self.complexity,
            "requiredTools": list(self.required_tools),
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class OperationPlan:
    """Planner output, produced once per turn."""

    success: bool
    intent: str = ""
    plan: PlanDetails | None = None
    matched_task: MatchedTask | None = None
    error: str | None = None
    usage: dict[str, int] | None = None

    @classmethod
    def failure(cls, error: str, usage: dict[str, int] | None = None) -> "OperationPlan":
        return cls(success=False, error=error, usage=usage)


@dataclass(frozen=True)
class Action:
    """A concrete store-applicable action as emitted by the executor."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExecutionResult:
    """Executor output: the chosen action plus a natural-language explanation."""

    success: bool
    action: Action | None = None
    explanation: str = ""
    error: str | None = None
    usage: dict[str, int] | None = None


@dataclass(frozen=True)
class EvaluationResult:
    """Evaluator output. On failure the raw explanation becomes the reply."""

    success: bool
    final_response: str | None = None
    evaluation: dict[str, Any] | None = None
    error: str | None = None
    usage: dict[str, int] | None = None


@dataclass(frozen=True)
class DispatchOutcome:
    """
    Accumulated result of applying actions to the task store.

    The value is immutable; `record_success` and `record_failure` return a
    new outcome so counters are threaded explicitly through the dispatch
    step. `success_count + fail_count` equals the number of store
    sub-operations attempted.
    """

    applied_ids: tuple[str, ...] = ()
    success_count: int = 0
    fail_count: int = 0
    error: str | None = None

    def record_success(self, ids: list[str] | tuple[str, ...] = ()) -> "DispatchOutcome":
        return replace(
            self,
            applied_ids=self.applied_ids + tuple(ids),
            success_count=self.success_count + 1,
        )

    def record_failure(self, error: str) -> "DispatchOutcome":
        return replace(self, fail_count=self.fail_count + 1, error=error)

    @property
    def attempted(self) -> int:
        return self.success_count + self.fail_count

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class TurnMetrics:
    """Counters and timing for one turn, as passed to the recorder."""

    response_time_ms: int
    success: bool
    todo_success_count: int
    todo_fail_count: int
    token_usage: dict[str, int] | None = None


@dataclass(frozen=True)
class InteractionRecord:
    """Write-once record handed to the metrics collaborator."""

    agent_type: str
    user_message: str
    assistant_message: ChatMessage
    response_time_ms: int
    success: bool
    todo_success_count: int
    todo_fail_count: int
    token_usage: dict[str, int] | None = None
    recorded_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "agentType": self.agent_type,
                "userMessage": self.user_message,
                "assistantMessage": self.assistant_message.to_dict(),
                "responseTimeMs": self.response_time_ms,
                "success": self.success,
                "todoSuccessCount": self.todo_success_count,
                "todoFailCount": self.todo_fail_count,
                "tokenUsage": self.token_usage,
                "recordedAt": self.recorded_at.isoformat(),
            }
        )


@dataclass(frozen=True)
class TurnResponse:
    """Outward response for one chat request."""

    success: bool
    message: ChatMessage | None = None
    error: str | None = None
    user_message: ChatMessage | None = None

    @classmethod
    def ok(
        cls, message: ChatMessage, user_message: ChatMessage | None = None
    ) -> "TurnResponse":
        return cls(success=True, message=message, user_message=user_message)

    @classmethod
    def failure(cls, error: str) -> "TurnResponse":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success and self.message is not None:
            return {"success": True, "message": self.message.to_dict()}
        return {"success": False, "error": self.error or "Failed to process message"}
