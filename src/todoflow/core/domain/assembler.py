"""
Response Assembler

Builds the assistant ChatMessage for a turn from the intermediate results
of the pipeline. The function is pure: no I/O and no collaborator calls.
"""

import json

from todoflow.core.domain.models import (
    ChatMessage,
    DispatchOutcome,
    EvaluationResult,
    ExecutionResult,
    MessageMetadata,
    MessageRole,
    OperationPlan,
    ToolCallRecord,
    new_id,
)


def select_content(evaluation: EvaluationResult, explanation: str) -> str:
    """Evaluator's rewrite when it succeeded, otherwise the raw explanation."""
    if evaluation.success and evaluation.final_response is not None:
        return evaluation.final_response
    return explanation


def build_tool_call(
    execution: ExecutionResult, outcome: DispatchOutcome, tool_call_id: str | None = None
) -> ToolCallRecord:
    action = execution.action
    name = action.name if action else ""
    arguments = action.arguments if action else {}
    return ToolCallRecord(
        id=tool_call_id or new_id(),
        name=name,
        arguments=json.dumps(arguments, ensure_ascii=False, default=str),
        error=outcome.error,
    )


def assemble_response(
    evaluation: EvaluationResult,
    execution: ExecutionResult,
    outcome: DispatchOutcome,
    plan: OperationPlan,
    agent_type: str,
    matched_content: str | None = None,
    tool_call_id: str | None = None,
) -> ChatMessage:
    """
    Build the assistant message for a completed turn.

    Args:
        evaluation: Evaluator result; its final response wins when successful
        execution: Executor result (action and explanation)
        outcome: Dispatch outcome (applied ids, error)
        plan: Planner result; plan details are merged with the intent
        agent_type: Active agent tag
        matched_content: Content of the matched task, if surfaced
        tool_call_id: Id to reuse for the tool call record

    Returns:
        Assistant ChatMessage whose metadata describes the whole turn
    """
    plan_payload = plan.plan.to_dict() if plan.plan else {}
    plan_payload["intent"] = plan.intent

    metadata = MessageMetadata(
        active_agent=agent_type,
        tool_calls=[build_tool_call(execution, outcome, tool_call_id)],
        todo_ids=list(outcome.applied_ids),
        error=outcome.error,
        matched_task=plan.matched_task,
        matched_content=matched_content,
        plan=plan_payload,
        evaluation=evaluation.evaluation if evaluation.success else None,
    )

    return ChatMessage(
        id=new_id(),
        role=MessageRole.ASSISTANT,
        content=select_content(evaluation, execution.explanation),
        metadata=metadata,
    )
