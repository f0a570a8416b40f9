"""Tool execution event sink protocol."""

from typing import Protocol

from todoflow.core.domain.events import ToolExecutionEvent


class ToolEventSinkProtocol(Protocol):
    """Receives tool execution events for live observers."""

    async def publish(self, event: ToolExecutionEvent) -> None:
        ...
