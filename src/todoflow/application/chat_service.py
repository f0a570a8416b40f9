"""
Application Layer - Chat Service

Entry point shared by the HTTP API and the CLI. Converts one chat request
into a TurnResponse: `{success: true, message}` when the turn completed,
`{success: false, error}` when it was aborted or failed unexpectedly.
"""

from collections.abc import Sequence
from typing import Any

import structlog

from todoflow.core.domain.errors import TurnAbortedError
from todoflow.core.domain.models import ChatMessage, TurnResponse
from todoflow.core.domain.orchestrator import TurnOrchestrator
from todoflow.core.interfaces.store import TodoStoreProtocol
from todoflow.infrastructure.events.tool_event_bus import ToolEventBus

logger = structlog.get_logger()


class ChatService:
    """Service layer wrapping the TurnOrchestrator for outer surfaces."""

    def __init__(
        self,
        orchestrator: TurnOrchestrator,
        store: TodoStoreProtocol,
        event_bus: ToolEventBus | None = None,
    ):
        self.orchestrator = orchestrator
        self.store = store
        self.event_bus = event_bus
        self.logger = logger.bind(component="chat_service")

    async def handle(
        self,
        message: str,
        agent_type: str,
        messages: Sequence[ChatMessage | dict[str, Any]] | None = None,
    ) -> TurnResponse:
        """
        Run one turn and wrap the outcome.

        Args:
            message: User message text
            agent_type: Active agent tag
            messages: Prior conversation, as ChatMessage objects or wire dicts

        Returns:
            TurnResponse carrying the assistant reply and the user message
            the turn was run with; never raises
        """
        try:
            history = [
                item if isinstance(item, ChatMessage) else ChatMessage.from_dict(item)
                for item in messages or []
            ]
            user_message = ChatMessage.user(message, agent_type)
            reply = await self.orchestrator.run_turn(
                message, agent_type, history, user_message=user_message
            )
        except TurnAbortedError as e:
            self.logger.warning("chat.turn.aborted", stage=e.stage, error=e.message)
            return TurnResponse.failure(e.message)
        except Exception as e:
            self.logger.error(
                "chat.turn.failed", error=str(e), error_type=type(e).__name__
            )
            return TurnResponse.failure(str(e) or "Failed to process message")

        return TurnResponse.ok(reply, user_message)
