import json

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from todoflow.api.routes.dependencies import get_chat_service
from todoflow.application.chat_service import ChatService
from todoflow.infrastructure.events.tool_event_bus import ToolEventBus

router = APIRouter()


def _event_bus(service: ChatService) -> ToolEventBus:
    if service.event_bus is None:
        raise HTTPException(status_code=404, detail="Tool event stream is not enabled")
    return service.event_bus


@router.get("/tools/recent")
async def recent_tool_events(limit: int = 50, service: ChatService = Depends(get_chat_service)):
    """Most recent tool execution events, oldest first."""
    events = _event_bus(service).recent(limit)
    return {"events": [event.to_dict() for event in events]}


@router.get("/tools/stream")
async def stream_tool_events(service: ChatService = Depends(get_chat_service)):
    """Live tool execution log via SSE."""
    bus = _event_bus(service)

    async def event_generator():
        async for event in bus.subscribe():
            yield f"data: {json.dumps(event.to_dict(), default=str)}\n\n"

    return StreamingResponse(event_generator(), media_type="text/event-stream")
