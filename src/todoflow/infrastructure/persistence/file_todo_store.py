"""
File-Based Todo Store
=====================

Persists todos as a single JSON document:

    {"todos": [{...}, ...]}

Writes go to a temp file that is then renamed over the target, so a crash
mid-write never leaves a truncated document behind. The file is loaded
lazily on first use.
"""

import json
import os
from pathlib import Path

import aiofiles

from todoflow.core.domain.todos import Todo
from todoflow.infrastructure.persistence.memory_todo_store import InMemoryTodoStore


class FileTodoStore(InMemoryTodoStore):
    """
    Todo store persisted to a JSON file.

    Example:
        >>> store = FileTodoStore(".todoflow/todos.json")
        >>> result = await store.create_todo("buy milk", agent_type="default")
        >>> assert result.success
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self._loaded = False

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self.path.exists():
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
            data = json.loads(raw) if raw.strip() else {}
            self._todos = {
                todo.id: todo for todo in (Todo.from_dict(item) for item in data.get("todos", []))
            }
            self.logger.debug("todos.loaded", path=str(self.path), count=len(self._todos))
        self._loaded = True

    async def _persist(self, todos: dict[str, Todo]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            {"todos": [todo.to_dict() for todo in todos.values()]},
            ensure_ascii=False,
            indent=2,
        )
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(payload)
        os.replace(tmp_path, self.path)
