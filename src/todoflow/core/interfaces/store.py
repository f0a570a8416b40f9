"""
Task Store Protocol

Contract of the external todo store. Every call returns a StoreResult;
not-found and validation problems are reported through `success=False`.
Implementations may still raise on I/O errors.
"""

from typing import Protocol

from todoflow.core.domain.todos import StoreResult


class TodoStoreProtocol(Protocol):
    """Create/update/delete/list primitives over todos."""

    async def create_todo(
        self,
        content: str,
        agent_type: str,
        created_by: str = "user",
        priority: int | None = None,
        labels: list[str] | None = None,
        complexity: float | None = None,
    ) -> StoreResult:
        """Create a todo; `result.todo` holds the new entity."""
        ...

    async def update_todo(
        self,
        id: str,
        content: str | None = None,
        completed: bool | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
        complexity: float | None = None,
    ) -> StoreResult:
        """Update only the fields that are not None."""
        ...

    async def delete_todo(self, id: str) -> StoreResult:
        ...

    async def list_todos(
        self,
        agent_type: str | None = None,
        completed: bool | None = None,
        priority: int | None = None,
        labels: list[str] | None = None,
    ) -> StoreResult:
        """List todos matching every given filter; `result.todos` is ordered by creation."""
        ...
