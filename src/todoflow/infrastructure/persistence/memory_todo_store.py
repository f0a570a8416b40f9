"""
In-Memory Todo Store

Reference implementation of TodoStoreProtocol. Mutations are serialized
with an asyncio.Lock so concurrent turns touching the same todo see a
consistent order. Each mutation builds the next state, hands it to
`_persist` and only then replaces the current one. FileTodoStore builds on
it by writing the next state to disk.
"""

import asyncio
import uuid
from dataclasses import replace

import structlog

from todoflow.core.domain.todos import StoreResult, Todo, utcnow

logger = structlog.get_logger()


def _clamp_complexity(value: float | None) -> float:
    if value is None:
        return 0.0
    return min(1.0, max(0.0, float(value)))


def _matches(
    todo: Todo,
    agent_type: str | None,
    completed: bool | None,
    priority: int | None,
    labels: list[str] | None,
) -> bool:
    if agent_type is not None and todo.agent_type != agent_type:
        return False
    if completed is not None and todo.completed != completed:
        return False
    if priority is not None and todo.priority != priority:
        return False
    if labels and not set(labels).issubset(todo.labels):
        return False
    return True


class InMemoryTodoStore:
    """Todo store keeping everything in a dict keyed by todo id."""

    def __init__(self, todos: list[Todo] | None = None):
        self._todos: dict[str, Todo] = {todo.id: todo for todo in todos or []}
        self._lock = asyncio.Lock()
        self.logger = logger.bind(component=type(self).__name__)

    async def _persist(self, todos: dict[str, Todo]) -> None:
        """Hook called with the next state before it replaces the current one."""

    async def _commit(self, todos: dict[str, Todo]) -> None:
        # A failed write must leave the current state untouched.
        await self._persist(todos)
        self._todos = todos

    async def _ensure_loaded(self) -> None:
        """Hook called before every operation, inside the lock."""

    async def create_todo(
        self,
        content: str,
        agent_type: str,
        created_by: str = "user",
        priority: int | None = None,
        labels: list[str] | None = None,
        complexity: float | None = None,
    ) -> StoreResult:
        if not content or not content.strip():
            return StoreResult.failure("Todo content must not be empty")

        async with self._lock:
            await self._ensure_loaded()
            now = utcnow()
            todo = Todo(
                id=str(uuid.uuid4()),
                content=content.strip(),
                agent_type=agent_type,
                created_by=created_by,
                priority=priority or 0,
                labels=list(labels or []),
                complexity=_clamp_complexity(complexity),
                created_at=now,
                updated_at=now,
            )
            await self._commit({**self._todos, todo.id: todo})

        self.logger.info("todo.created", todo_id=todo.id, agent_type=agent_type)
        return StoreResult(success=True, todo=todo)

    async def update_todo(
        self,
        id: str,
        content: str | None = None,
        completed: bool | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
        complexity: float | None = None,
    ) -> StoreResult:
        async with self._lock:
            await self._ensure_loaded()
            current = self._todos.get(id)
            if current is None:
                return StoreResult.failure(f"Todo not found: {id}")

            changes: dict = {}
            if content is not None:
                if not content.strip():
                    return StoreResult.failure("Todo content must not be empty")
                changes["content"] = content.strip()
            if completed is not None:
                changes["completed"] = completed
            if priority is not None:
                changes["priority"] = priority
            if labels is not None:
                changes["labels"] = list(labels)
            if complexity is not None:
                changes["complexity"] = _clamp_complexity(complexity)

            todo = replace(current, updated_at=utcnow(), **changes)
            await self._commit({**self._todos, id: todo})

        self.logger.info("todo.updated", todo_id=id, fields=sorted(changes))
        return StoreResult(success=True, todo=todo)

    async def delete_todo(self, id: str) -> StoreResult:
        async with self._lock:
            await self._ensure_loaded()
            todo = self._todos.get(id)
            if todo is None:
                return StoreResult.failure(f"Todo not found: {id}")
            await self._commit({key: value for key, value in self._todos.items() if key != id})

        self.logger.info("todo.deleted", todo_id=id)
        return StoreResult(success=True, todo=todo)

    async def list_todos(
        self,
        agent_type: str | None = None,
        completed: bool | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
    ) -> StoreResult:
        async with self._lock:
            await self._ensure_loaded()
            todos = [
                todo
                for todo in self._todos.values()
                if _matches(todo, agent_type, completed, priority, labels)
            ]
        todos.sort(key=lambda todo: todo.created_at)
        return StoreResult(success=True, todos=todos)
