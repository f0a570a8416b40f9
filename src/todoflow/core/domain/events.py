"""
Tool Execution Events

Every dispatched action is published as a ToolExecutionEvent so observers
(the SSE tool log, the CLI) can follow what the pipeline did. A dispatch
produces a `pending` event followed by a `success` or `error` event that
share the same id.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from todoflow.core.domain.todos import utcnow


class ToolEventStatus(str, Enum):
    """Lifecycle status of a dispatched action."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ToolExecutionEvent:
    """
    One entry of the live tool-execution log.

    Attributes:
        id: Tool call identifier (matches the ToolCallRecord id)
        tool: Action name, e.g. "createTodo"
        input: Action arguments
        output: Dispatch result payload (None while pending)
        status: pending, success or error
        timestamp: When the event was emitted
    """

    id: str
    tool: str
    input: dict[str, Any]
    output: Any = None
    status: ToolEventStatus = ToolEventStatus.PENDING
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "tool": self.tool,
            "input": self.input,
            "output": self.output,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
        }
