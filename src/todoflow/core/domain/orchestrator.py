"""
Turn Orchestrator

Drives one chat turn through the pipeline:

1. Build the user message and the turn's conversation context
2. Plan the operation (planner)
3. Choose a concrete action (executor)
4. Apply the action to the task store (dispatcher)
5. Evaluate and rewrite the explanation (evaluator)
6. Assemble the assistant message
7. Record the interaction
8. Return the assistant message

Stages run strictly in sequence. Planner and executor failures abort the
turn with TurnAbortedError before the store is touched. Dispatch failures
are folded into the reply metadata. Evaluator failures fall back to the raw
explanation. Recorder failures are swallowed.
"""

import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace

import structlog

from todoflow.core.domain.actions import ActionName
from todoflow.core.domain.assembler import assemble_response
from todoflow.core.domain.dispatcher import ActionDispatcher
from todoflow.core.domain.errors import TurnAbortedError
from todoflow.core.domain.events import ToolEventStatus, ToolExecutionEvent
from todoflow.core.domain.models import (
    Action,
    ChatMessage,
    DispatchOutcome,
    EvaluationResult,
    ExecutionResult,
    OperationPlan,
    TurnMetrics,
    merge_usage,
    new_id,
)
from todoflow.core.domain.recorder import InteractionRecorder
from todoflow.core.interfaces.agents import (
    ActionExecutorProtocol,
    EvaluatorProtocol,
    PlannerProtocol,
)
from todoflow.core.interfaces.events import ToolEventSinkProtocol

logger = structlog.get_logger()

MATCHED_CONTENT_ACTIONS = {ActionName.COMPLETE.value, ActionName.UPDATE.value}


def matched_content_for(plan: OperationPlan, action: Action | None) -> str | None:
    """
    Content of the planner's matched task, surfaced for update/complete only.

    Informational: it lets the user confirm which task was acted on and has
    no influence on dispatch.
    """
    if action is None or action.name not in MATCHED_CONTENT_ACTIONS:
        return None
    if plan.matched_task is not None:
        return plan.matched_task.content
    matched = plan.plan.context.get("matchedTodo") if plan.plan else None
    if isinstance(matched, dict) and matched.get("content"):
        return str(matched["content"])
    return None


class TurnOrchestrator:
    """
    Runs the plan → execute → dispatch → evaluate pipeline for one turn.

    The orchestrator holds no turn-scoped state; concurrent turns can share
    one instance.
    """

    def __init__(
        self,
        planner: PlannerProtocol,
        executor: ActionExecutorProtocol,
        evaluator: EvaluatorProtocol,
        dispatcher: ActionDispatcher,
        recorder: InteractionRecorder,
        event_sink: ToolEventSinkProtocol | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.planner = planner
        self.executor = executor
        self.evaluator = evaluator
        self.dispatcher = dispatcher
        self.recorder = recorder
        self.event_sink = event_sink
        self._clock = clock
        self.logger = logger.bind(component="turn_orchestrator")

    async def run_turn(
        self,
        message: str,
        agent_type: str,
        prior_history: Sequence[ChatMessage] = (),
        user_message: ChatMessage | None = None,
    ) -> ChatMessage:
        """
        Process one chat message end to end.

        Args:
            message: The user's message text
            agent_type: Active agent tag
            prior_history: Earlier messages of the conversation
            user_message: The user message for `message`; built here if omitted

        Returns:
            The assistant ChatMessage for this turn

        Raises:
            TurnAbortedError: If the planner or executor failed
        """
        start = self._clock()
        user_message = user_message or ChatMessage.user(message, agent_type)
        context: tuple[ChatMessage, ...] = (*prior_history, user_message)

        self.logger.info(
            "turn.started",
            agent_type=agent_type,
            message=message[:100],
            history_length=len(prior_history),
        )

        plan = await self._plan(message, context)
        execution = await self._execute(plan, message, context)
        action = execution.action

        matched_content = matched_content_for(plan, action)
        tool_call_id = new_id()
        outcome = await self._dispatch(action, agent_type, tool_call_id)

        evaluation = await self._evaluate(message, execution.explanation, context)

        assistant_message = assemble_response(
            evaluation=evaluation,
            execution=execution,
            outcome=outcome,
            plan=plan,
            agent_type=agent_type,
            matched_content=matched_content,
            tool_call_id=tool_call_id,
        )

        response_time_ms = max(0, int((self._clock() - start) * 1000))
        await self.recorder.record(
            agent_type,
            message,
            assistant_message,
            TurnMetrics(
                response_time_ms=response_time_ms,
                success=outcome.error is None,
                todo_success_count=outcome.success_count,
                todo_fail_count=outcome.fail_count,
                token_usage=merge_usage(plan.usage, execution.usage, evaluation.usage),
            ),
        )

        self.logger.info(
            "turn.completed",
            agent_type=agent_type,
            action=action.name,
            todo_ids=list(outcome.applied_ids),
            error=outcome.error,
            evaluated=evaluation.success,
            response_time_ms=response_time_ms,
        )
        return assistant_message

    async def _plan(self, message: str, context: Sequence[ChatMessage]) -> OperationPlan:
        try:
            plan = await self.planner.plan(message, context)
        except Exception as e:
            self.logger.error("turn.plan.exception", error=str(e), error_type=type(e).__name__)
            raise TurnAbortedError("plan", str(e) or "Planning failed") from e

        if not plan.success or plan.plan is None:
            error = plan.error or "Planning failed"
            self.logger.warning("turn.plan.failed", error=error)
            raise TurnAbortedError("plan", error)

        self.logger.info(
            "turn.plan.completed",
            intent=plan.intent,
            operation=plan.plan.operation,
            complexity=plan.plan.complexity,
            tools=plan.plan.required_tools,
            matched_task=plan.matched_task.id if plan.matched_task else None,
        )
        return plan

    async def _execute(
        self, plan: OperationPlan, message: str, context: Sequence[ChatMessage]
    ) -> ExecutionResult:
        details = plan.plan
        try:
            execution = await self.executor.execute(
                details.operation, details.context, message, context
            )
        except Exception as e:
            self.logger.error("turn.execute.exception", error=str(e), error_type=type(e).__name__)
            raise TurnAbortedError("execute", str(e) or "No action generated") from e

        if not execution.success or execution.action is None:
            error = execution.error or "No action generated"
            self.logger.warning("turn.execute.failed", error=error)
            raise TurnAbortedError("execute", error)

        arguments = execution.action.arguments
        if not isinstance(arguments, dict):
            # Actions past this point always carry a dict of arguments.
            arguments = dict(arguments) if isinstance(arguments, Mapping) else {}
            execution = replace(execution, action=Action(execution.action.name, arguments))

        self.logger.info(
            "turn.execute.completed",
            action=execution.action.name,
            argument_keys=sorted(execution.action.arguments.keys()),
        )
        return execution

    async def _dispatch(
        self, action: Action, agent_type: str, tool_call_id: str
    ) -> DispatchOutcome:
        await self._publish(
            ToolExecutionEvent(id=tool_call_id, tool=action.name, input=dict(action.arguments))
        )
        outcome = await self.dispatcher.dispatch(action, agent_type)
        if outcome.error is None:
            status = ToolEventStatus.SUCCESS
            output = {"todoIds": list(outcome.applied_ids)}
        else:
            status = ToolEventStatus.ERROR
            output = {"error": outcome.error}
        await self._publish(
            ToolExecutionEvent(
                id=tool_call_id,
                tool=action.name,
                input=dict(action.arguments),
                output=output,
                status=status,
            )
        )
        return outcome

    async def _evaluate(
        self, message: str, explanation: str, context: Sequence[ChatMessage]
    ) -> EvaluationResult:
        try:
            return await self.evaluator.evaluate(message, explanation, context)
        except Exception as e:
            # The store may already be mutated; keep the turn and reply with the raw explanation.
            self.logger.warning(
                "turn.evaluate.exception", error=str(e), error_type=type(e).__name__
            )
            return EvaluationResult(success=False, error=str(e))

    async def _publish(self, event: ToolExecutionEvent) -> None:
        if self.event_sink is None:
            return
        try:
            await self.event_sink.publish(event)
        except Exception as e:
            self.logger.warning(
                "turn.tool_event.publish_failed", tool=event.tool, error=str(e)
            )
