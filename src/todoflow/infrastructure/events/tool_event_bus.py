"""
Tool Event Bus

In-process fan-out of ToolExecutionEvents to live observers (the SSE tool
log endpoint, tests). Each subscriber gets its own asyncio.Queue; a bounded
buffer of recent events is kept for late joiners.
"""

import asyncio
from collections import deque
from collections.abc import AsyncIterator

import structlog

from todoflow.core.domain.events import ToolExecutionEvent

logger = structlog.get_logger()


class ToolEventBus:
    def __init__(self, buffer_size: int = 200, queue_size: int = 100):
        self._recent: deque[ToolExecutionEvent] = deque(maxlen=buffer_size)
        self._subscribers: set[asyncio.Queue[ToolExecutionEvent]] = set()
        self._queue_size = queue_size
        self.logger = logger.bind(component="tool_event_bus")

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def recent(self, limit: int | None = None) -> list[ToolExecutionEvent]:
        events = list(self._recent)
        return events[-limit:] if limit else events

    async def publish(self, event: ToolExecutionEvent) -> None:
        self._recent.append(event)
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                # Slow consumer: drop the oldest event to make room.
                queue.get_nowait()
                queue.put_nowait(event)
                self.logger.warning("tool_event.dropped", tool=event.tool)

    def open_queue(self) -> asyncio.Queue[ToolExecutionEvent]:
        queue: asyncio.Queue[ToolExecutionEvent] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers.add(queue)
        return queue

    def close_queue(self, queue: asyncio.Queue[ToolExecutionEvent]) -> None:
        self._subscribers.discard(queue)

    async def subscribe(self) -> AsyncIterator[ToolExecutionEvent]:
        """Yield events published after subscription until the consumer stops."""
        queue = self.open_queue()
        try:
            while True:
                yield await queue.get()
        finally:
            self.close_queue(queue)
