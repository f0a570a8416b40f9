"""
Tests for ChatService.

The first group drives a complete turn through the real pipeline with a
scripted LLM provider; the rest use a mocked orchestrator.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from todoflow.application.chat_service import ChatService
from todoflow.application.factory import TodoflowFactory
from todoflow.core.domain.errors import TurnAbortedError
from todoflow.core.domain.models import ChatMessage

CONFIG_DIR = Path(__file__).resolve().parents[3] / "configs"


def _scripted_provider(*replies):
    provider = AsyncMock()
    provider.complete.side_effect = [
        {"success": True, "tool_calls": [], "usage": {"total_tokens": 5}, **reply}
        for reply in replies
    ]
    return provider


class TestChatServicePipeline:
    @pytest.mark.asyncio
    async def test_turn_creates_todo(self):
        provider = _scripted_provider(
            {"content": '{"success": true, "intent": "Add buy milk", "operation": "create"}'},
            {
                "content": "Adding 'buy milk'.",
                "tool_calls": [
                    {"id": "c1", "name": "createTodo", "arguments": {"content": "buy milk"}}
                ],
            },
            {"content": '{"finalResponse": "Added buy milk.", "evaluation": {"score": 1}}'},
        )
        service = TodoflowFactory(str(CONFIG_DIR)).create_chat_service(
            "test", llm_provider=provider
        )

        response = await service.handle("add buy milk", "default")

        assert response.success
        assert response.message.content == "Added buy milk."
        todos = (await service.store.list_todos()).todos
        assert [todo.content for todo in todos] == ["buy milk"]
        assert todos[0].created_by == "agent"
        assert response.message.metadata.todo_ids == [todos[0].id]
        [record] = service.orchestrator.recorder.interaction_log.records
        assert record.token_usage == {"total_tokens": 15}

    @pytest.mark.asyncio
    async def test_planner_refusal_returns_failure(self):
        provider = _scripted_provider(
            {"content": '{"success": false, "error": "ambiguous request"}'}
        )
        service = TodoflowFactory(str(CONFIG_DIR)).create_chat_service(
            "test", llm_provider=provider
        )

        response = await service.handle("do the thing", "default")

        assert response.to_dict() == {"success": False, "error": "ambiguous request"}
        assert provider.complete.await_count == 1
        assert (await service.store.list_todos()).todos == []


class TestChatServiceErrors:
    @pytest.fixture
    def mock_orchestrator(self):
        return AsyncMock()

    @pytest.mark.asyncio
    async def test_history_dicts_are_parsed(self, mock_orchestrator, mock_store):
        reply = ChatMessage.user("ok", "default")
        mock_orchestrator.run_turn.return_value = reply
        service = ChatService(mock_orchestrator, mock_store)

        response = await service.handle(
            "add x", "default", [{"role": "user", "content": "hello"}]
        )

        assert response.message is reply
        _, _, history = mock_orchestrator.run_turn.await_args.args
        assert [item.content for item in history] == ["hello"]

    @pytest.mark.asyncio
    async def test_aborted_turn(self, mock_orchestrator, mock_store):
        mock_orchestrator.run_turn.side_effect = TurnAbortedError("execute", "No action generated")

        response = await ChatService(mock_orchestrator, mock_store).handle("x", "default")

        assert not response.success
        assert response.error == "No action generated"

    @pytest.mark.asyncio
    async def test_unexpected_exception(self, mock_orchestrator, mock_store):
        mock_orchestrator.run_turn.side_effect = RuntimeError()

        response = await ChatService(mock_orchestrator, mock_store).handle("x", "default")

        assert response.error == "Failed to process message"

    @pytest.mark.asyncio
    async def test_response_carries_user_message_of_the_turn(
        self, mock_orchestrator, mock_store
    ):
        mock_orchestrator.run_turn.return_value = ChatMessage.user("ok", "default")
        service = ChatService(mock_orchestrator, mock_store)

        response = await service.handle("add x", "work")

        sent = mock_orchestrator.run_turn.await_args.kwargs["user_message"]
        assert response.user_message is sent
        assert sent.content == "add x"
        assert sent.metadata.active_agent == "work"
        assert "userMessage" not in response.to_dict()

    def test_interactions_are_recorded_by_the_orchestrator_only(self):
        service = TodoflowFactory(str(CONFIG_DIR)).create_chat_service(
            "test", llm_provider=AsyncMock()
        )

        assert not hasattr(service, "interaction_log")
        assert service.orchestrator.recorder.interaction_log is not None
