"""Tests for TodoflowFactory profile loading and wiring."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from todoflow.application.chat_service import ChatService
from todoflow.application.factory import TodoflowFactory
from todoflow.infrastructure.metrics.interaction_log import (
    InMemoryInteractionLog,
    JsonlInteractionLog,
)
from todoflow.infrastructure.persistence.file_todo_store import FileTodoStore
from todoflow.infrastructure.persistence.memory_todo_store import InMemoryTodoStore

CONFIG_DIR = Path(__file__).resolve().parents[3] / "configs"


@pytest.fixture
def factory():
    return TodoflowFactory(str(CONFIG_DIR))


def test_load_profile(factory):
    config = factory.load_profile("test")

    assert config["store"]["type"] == "memory"
    assert config["llm"]["worker_model"] == "main"


def test_missing_profile_raises(factory):
    with pytest.raises(FileNotFoundError, match="Profile not found"):
        factory.load_profile("nope")


def test_non_mapping_profile_raises(tmp_path):
    (tmp_path / "bad.yaml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        TodoflowFactory(str(tmp_path)).load_profile("bad")


def test_store_and_log_selection(factory, tmp_path):
    file_config = {
        "store": {"type": "file", "path": str(tmp_path / "todos.json")},
        "metrics": {"type": "jsonl", "path": str(tmp_path / "log.jsonl")},
    }

    assert isinstance(factory.create_store({}), InMemoryTodoStore)
    assert isinstance(factory.create_store(file_config), FileTodoStore)
    assert isinstance(factory.create_interaction_log({}), InMemoryInteractionLog)
    assert isinstance(factory.create_interaction_log(file_config), JsonlInteractionLog)
    with pytest.raises(ValueError, match="Unknown store type"):
        factory.create_store({"store": {"type": "redis"}})


def test_create_chat_service_with_injected_provider(factory):
    provider = AsyncMock()

    service = factory.create_chat_service("test", llm_provider=provider)

    assert isinstance(service, ChatService)
    assert isinstance(service.store, InMemoryTodoStore)
    assert service.event_bus is not None
    orchestrator = service.orchestrator
    assert orchestrator.planner.llm_provider is provider
    assert orchestrator.planner.model == "fast"
    assert orchestrator.executor.model == "main"
    assert orchestrator.dispatcher.store is service.store
