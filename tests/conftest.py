"""Shared fixtures for todoflow tests."""

from unittest.mock import AsyncMock

import pytest
import structlog

from factories import make_execution, make_plan, make_todo
from todoflow.core.domain.dispatcher import ActionDispatcher
from todoflow.core.domain.models import EvaluationResult
from todoflow.core.domain.orchestrator import TurnOrchestrator
from todoflow.core.domain.recorder import InteractionRecorder
from todoflow.core.domain.todos import StoreResult
from todoflow.infrastructure.events.tool_event_bus import ToolEventBus
from todoflow.infrastructure.metrics.interaction_log import InMemoryInteractionLog


@pytest.fixture
def mock_store():
    """Mock TodoStoreProtocol with successful defaults."""
    store = AsyncMock()
    store.create_todo.return_value = StoreResult(success=True, todo=make_todo())
    store.update_todo.return_value = StoreResult(success=True, todo=make_todo())
    store.delete_todo.return_value = StoreResult(success=True)
    store.list_todos.return_value = StoreResult(success=True, todos=[make_todo()])
    return store


@pytest.fixture
def mock_planner():
    """Mock PlannerProtocol planning a create."""
    planner = AsyncMock()
    planner.plan.return_value = make_plan("create")
    return planner


@pytest.fixture
def mock_executor():
    """Mock ActionExecutorProtocol emitting createTodo."""
    executor = AsyncMock()
    executor.execute.return_value = make_execution(
        "createTodo", "I'll add 'buy milk' to your list.", content="buy milk"
    )
    return executor


@pytest.fixture
def mock_evaluator():
    evaluator = AsyncMock()
    evaluator.evaluate.return_value = EvaluationResult(
        success=True,
        final_response="Added 'buy milk' to your todos.",
        evaluation={"score": 0.9, "feedback": "clear"},
    )
    return evaluator


@pytest.fixture
def interaction_log():
    return InMemoryInteractionLog()


@pytest.fixture
def event_bus():
    return ToolEventBus(buffer_size=20)


@pytest.fixture
def orchestrator(
    mock_planner, mock_executor, mock_evaluator, mock_store, interaction_log, event_bus
):
    """TurnOrchestrator with mocked collaborators."""
    return TurnOrchestrator(
        planner=mock_planner,
        executor=mock_executor,
        evaluator=mock_evaluator,
        dispatcher=ActionDispatcher(mock_store),
        recorder=InteractionRecorder(interaction_log),
        event_sink=event_bus,
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration applied by CLI commands."""
    yield
    structlog.reset_defaults()
