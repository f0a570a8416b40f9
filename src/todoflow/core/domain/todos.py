"""
Todo Domain Entities

The task store owns todos; the pipeline only ever sees them through
StoreResult values returned by a TodoStoreProtocol implementation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return utcnow()


@dataclass(frozen=True)
class Todo:
    """
    A single task in the todo list.

    Attributes:
        id: Store-assigned identifier
        content: Task text as shown to the user
        agent_type: Tag of the agent the todo belongs to
        created_by: "user" or "agent"
        completed: Completion flag
        priority: 0 means no priority, higher is more urgent
        labels: Free-form labels
        complexity: Estimated effort between 0.0 and 1.0
    """

    id: str
    content: str
    agent_type: str
    created_by: str = "user"
    completed: bool = False
    priority: int = 0
    labels: list[str] = field(default_factory=list)
    complexity: float = 0.0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "agentType": self.agent_type,
            "createdBy": self.created_by,
            "completed": self.completed,
            "priority": self.priority,
            "labels": list(self.labels),
            "complexity": self.complexity,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Todo":
        return cls(
            id=str(data["id"]),
            content=str(data.get("content", "")),
            agent_type=str(data.get("agentType", "")),
            created_by=str(data.get("createdBy", "user")),
            completed=bool(data.get("completed", False)),
            priority=int(data.get("priority") or 0),
            labels=[str(label) for label in data.get("labels") or []],
            complexity=float(data.get("complexity") or 0.0),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


@dataclass(frozen=True)
class StoreResult:
    """Outcome of one task-store call: `{success, todo?|todos?, error?}`."""

    success: bool
    todo: Todo | None = None
    todos: list[Todo] | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> "StoreResult":
        return cls(success=False, error=error)
