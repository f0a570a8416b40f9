"""Unit tests for the response assembler."""

import json

from factories import make_execution, make_plan
from todoflow.core.domain.assembler import assemble_response, select_content
from todoflow.core.domain.models import (
    DispatchOutcome,
    EvaluationResult,
    MatchedTask,
    MessageRole,
)


def test_select_content_prefers_evaluator_rewrite():
    evaluation = EvaluationResult(success=True, final_response="Done!")
    assert select_content(evaluation, "raw") == "Done!"


def test_select_content_falls_back_to_explanation_unchanged():
    explanation = "  I'll mark 'buy milk' as done.\n"
    evaluation = EvaluationResult(success=False, final_response="ignored")
    assert select_content(evaluation, explanation) == explanation


class TestAssembleResponse:
    def test_successful_turn_metadata(self):
        execution = make_execution("createTodo", "Adding it.", content="buy milk")
        outcome = DispatchOutcome().record_success(["t1"])

        message = assemble_response(
            evaluation=EvaluationResult(
                success=True, final_response="Added!", evaluation={"score": 0.8}
            ),
            execution=execution,
            outcome=outcome,
            plan=make_plan("create"),
            agent_type="default",
            tool_call_id="call-1",
        )

        assert message.role == MessageRole.ASSISTANT
        assert message.content == "Added!"
        metadata = message.to_dict()["metadata"]
        assert metadata["activeAgent"] == "default"
        assert metadata["todoIds"] == ["t1"]
        assert "error" not in metadata
        assert metadata["evaluation"] == {"score": 0.8}
        assert metadata["plan"] == {
            "operation": "create",
            "complexity": "simple",
            "requiredTools": [],
            "context": {},
            "intent": "create a todo",
        }
        [call] = metadata["toolCalls"]
        assert call["id"] == "call-1"
        assert call["type"] == "function"
        assert call["name"] == "createTodo"
        assert json.loads(call["arguments"]) == {"content": "buy milk"}

    def test_failed_dispatch_is_folded_into_metadata(self):
        outcome = DispatchOutcome().record_failure("Unknown action: archiveTodo")

        message = assemble_response(
            evaluation=EvaluationResult(success=False),
            execution=make_execution("archiveTodo", "Archiving.", id="t1"),
            outcome=outcome,
            plan=make_plan("update"),
            agent_type="default",
        )

        metadata = message.to_dict()["metadata"]
        assert message.content == "Archiving."
        assert metadata["error"] == "Unknown action: archiveTodo"
        assert metadata["todoIds"] == []
        assert metadata["toolCalls"][0]["error"] == "Unknown action: archiveTodo"
        assert "evaluation" not in metadata

    def test_matched_task_and_content(self):
        matched = MatchedTask(id="t1", content="buy milk")

        message = assemble_response(
            evaluation=EvaluationResult(success=True, final_response="Done."),
            execution=make_execution("completeTodo", id="t1"),
            outcome=DispatchOutcome().record_success(["t1"]),
            plan=make_plan("complete", matched_task=matched),
            agent_type="default",
            matched_content="buy milk",
        )

        metadata = message.to_dict()["metadata"]
        assert metadata["matchedTask"] == {"id": "t1", "content": "buy milk"}
        assert metadata["matchedContent"] == "buy milk"
