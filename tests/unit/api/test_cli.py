"""Tests for the todoflow CLI commands."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from typer.testing import CliRunner

from factories import make_todo
from todoflow.api.cli.log_config import configure_logging
from todoflow.api.cli.main import app
from todoflow.core.domain.models import ChatMessage, InteractionRecord, TurnResponse

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path):
    """Profile directory with a file store and a JSONL log under tmp_path."""
    (tmp_path / "local.yaml").write_text(
        f"store:\n  type: file\n  path: {tmp_path / 'todos.json'}\n"
        f"metrics:\n  type: jsonl\n  path: {tmp_path / 'interactions.jsonl'}\n",
        encoding="utf-8",
    )
    (tmp_path / "volatile.yaml").write_text("store:\n  type: memory\n", encoding="utf-8")
    return tmp_path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "todoflow" in result.stdout


class TestSend:
    @pytest.fixture
    def service(self, monkeypatch):
        service = MagicMock()
        service.handle = AsyncMock()
        factory = MagicMock()
        factory.return_value.create_chat_service.return_value = service
        monkeypatch.setattr("todoflow.api.cli.commands.send.TodoflowFactory", factory)
        return service

    def test_prints_json_reply(self, service):
        service.handle.return_value = TurnResponse.ok(ChatMessage.user("Added.", "work"))

        result = runner.invoke(app, ["--agent", "work", "send", "add buy milk", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["message"]["content"] == "Added."
        service.handle.assert_awaited_once_with("add buy milk", "work")

    def test_aborted_turn_exits_1(self, service):
        service.handle.return_value = TurnResponse.failure("ambiguous request")

        result = runner.invoke(app, ["send", "do it", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"success": False, "error": "ambiguous request"}


class TestChat:
    def test_history_keeps_user_message_of_each_turn(self, monkeypatch):
        turns = [
            (ChatMessage.user("add milk", "default"), ChatMessage.user("Added.", "default")),
            (ChatMessage.user("list", "default"), ChatMessage.user("One todo.", "default")),
        ]
        histories = []

        async def handle(message, agent_type, history):
            histories.append(list(history))
            user_message, reply = turns[len(histories) - 1]
            return TurnResponse.ok(reply, user_message)

        service = MagicMock()
        service.handle = AsyncMock(side_effect=handle)
        factory = MagicMock()
        factory.return_value.create_chat_service.return_value = service
        monkeypatch.setattr("todoflow.api.cli.commands.chat.TodoflowFactory", factory)

        result = runner.invoke(app, ["chat"], input="add milk\nlist\nexit\n")

        assert result.exit_code == 0
        assert histories[0] == []
        first_user, first_reply = turns[0]
        assert histories[1][0] is first_user
        assert histories[1][1] is first_reply


class TestTodosList:
    def test_lists_todos_from_file_store(self, config_dir):
        todos = [make_todo("t1", "buy milk"), make_todo("t2", "ship release", agent_type="work")]
        (config_dir / "todos.json").write_text(
            json.dumps({"todos": [todo.to_dict() for todo in todos]}), encoding="utf-8"
        )

        result = runner.invoke(
            app, ["--config-dir", str(config_dir), "--profile", "local", "todos", "list"]
        )

        assert result.exit_code == 0
        assert "buy milk" in result.stdout
        assert "ship release" not in result.stdout


class TestMetricsSummary:
    def test_summary_from_profile_log(self, config_dir):
        record = InteractionRecord(
            agent_type="default",
            user_message="add x",
            assistant_message=ChatMessage.user("x", "default"),
            response_time_ms=80,
            success=True,
            todo_success_count=1,
            todo_fail_count=0,
        )
        (config_dir / "interactions.jsonl").write_text(
            json.dumps(record.to_dict()) + "\n", encoding="utf-8"
        )

        result = runner.invoke(
            app,
            ["--config-dir", str(config_dir), "--profile", "local", "metrics", "summary", "--json"],
        )

        assert result.exit_code == 0
        summary = json.loads(result.stdout)
        assert summary["count"] == 1
        assert summary["success_rate"] == 1.0
        assert summary["todo_success_total"] == 1

    def test_profile_without_jsonl_log(self, config_dir):
        result = runner.invoke(
            app, ["--config-dir", str(config_dir), "--profile", "volatile", "metrics", "summary"]
        )

        assert result.exit_code == 1


class TestLogging:
    def test_logging_survives_finished_invocation(self):
        runner.invoke(app, ["version"])

        structlog.get_logger().bind(component="after_cli").warning("cli.finished")

    def test_configure_logging_routes_through_stdlib(self):
        configure_logging(debug=True)

        config = structlog.get_config()
        assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
        structlog.get_logger().debug("cli.debug_enabled")
