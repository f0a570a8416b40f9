from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from todoflow.api.routes.dependencies import get_chat_service
from todoflow.application.chat_service import ChatService
from todoflow.core.domain.models import DEFAULT_AGENT_TYPE

router = APIRouter()


class ChatRequest(BaseModel):
    """One chat turn."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    agent_type: str = Field(default=DEFAULT_AGENT_TYPE, alias="agentType")
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    """Prior conversation as chat message dicts.

    Example: [
        {"id": "...", "role": "user", "content": "add buy milk",
         "timestamp": "2024-01-01T10:00:00+00:00", "metadata": {"activeAgent": "default"}}
    ]
    """


@router.post("/chat")
async def chat(request: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """Run one chat turn.

    Returns `{success: true, message}` or, with status 500,
    `{success: false, error}` when the turn was aborted.
    """
    result = await service.handle(
        message=request.message,
        agent_type=request.agent_type,
        messages=request.messages,
    )
    if not result.success:
        return JSONResponse(status_code=500, content=result.to_dict())
    return result.to_dict()
