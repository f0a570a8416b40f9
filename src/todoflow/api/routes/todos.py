from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from todoflow.api.routes.dependencies import get_chat_service
from todoflow.application.chat_service import ChatService

router = APIRouter()


@router.get("/todos")
async def list_todos(
    agent_type: Optional[str] = Query(None, alias="agentType"),
    completed: Optional[bool] = None,
    priority: Optional[int] = None,
    labels: Optional[List[str]] = Query(None),
    service: ChatService = Depends(get_chat_service),
):
    """List todos, optionally filtered by agent, completion, priority and labels."""
    result = await service.store.list_todos(
        agent_type=agent_type, completed=completed, priority=priority, labels=labels
    )
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error or "Failed to list todos")
    return {"success": True, "todos": [todo.to_dict() for todo in result.todos or []]}
