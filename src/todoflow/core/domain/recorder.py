"""
Interaction Recorder

Packages a finished turn into an InteractionRecord and hands it to the
metrics collaborator. Recording is best-effort: failures are logged and
swallowed so they never change the reply already computed for the turn.
"""

import structlog

from todoflow.core.domain.models import ChatMessage, InteractionRecord, TurnMetrics
from todoflow.core.interfaces.metrics import InteractionLogProtocol

logger = structlog.get_logger()


class InteractionRecorder:
    def __init__(self, interaction_log: InteractionLogProtocol | None = None):
        self.interaction_log = interaction_log
        self.logger = logger.bind(component="interaction_recorder")

    async def record(
        self,
        agent_type: str,
        user_message: str,
        assistant_message: ChatMessage,
        metrics: TurnMetrics,
    ) -> InteractionRecord | None:
        """Track one turn. Returns the record, or None if tracking failed."""
        if self.interaction_log is None:
            return None

        try:
            record = InteractionRecord(
                agent_type=agent_type,
                user_message=user_message,
                assistant_message=assistant_message,
                response_time_ms=max(0, metrics.response_time_ms),
                success=metrics.success,
                todo_success_count=metrics.todo_success_count,
                todo_fail_count=metrics.todo_fail_count,
                token_usage=metrics.token_usage,
            )
            await self.interaction_log.track(record)
        except Exception as e:
            self.logger.warning(
                "interaction.record_failed",
                agent_type=agent_type,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        self.logger.debug(
            "interaction.recorded",
            agent_type=agent_type,
            response_time_ms=record.response_time_ms,
            success=record.success,
        )
        return record
