"""
Application Layer - Todoflow Factory

Dependency injection factory wiring the turn pipeline from a YAML profile.

A profile (`configs/<profile>.yaml`) selects:
- store:   `memory` or `file` (with `path`)
- metrics: `memory` or `jsonl` (with `path`)
- events:  tool event buffer size
- llm:     LLM config path and the model alias for each agent
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from todoflow.application.chat_service import ChatService
from todoflow.core.domain.dispatcher import ActionDispatcher
from todoflow.core.domain.orchestrator import TurnOrchestrator
from todoflow.core.domain.recorder import InteractionRecorder
from todoflow.core.interfaces.llm import LLMProviderProtocol
from todoflow.core.interfaces.metrics import InteractionLogProtocol
from todoflow.core.interfaces.store import TodoStoreProtocol
from todoflow.infrastructure.agents.evaluator import LLMEvaluator
from todoflow.infrastructure.agents.planner import LLMPlanner
from todoflow.infrastructure.agents.worker import LLMWorker
from todoflow.infrastructure.events.tool_event_bus import ToolEventBus
from todoflow.infrastructure.llm.llm_service import LLMService
from todoflow.infrastructure.metrics.interaction_log import (
    InMemoryInteractionLog,
    JsonlInteractionLog,
)
from todoflow.infrastructure.persistence.file_todo_store import FileTodoStore
from todoflow.infrastructure.persistence.memory_todo_store import InMemoryTodoStore

DEFAULT_STORE_PATH = ".todoflow/todos.json"
DEFAULT_METRICS_PATH = ".todoflow/interactions.jsonl"


class TodoflowFactory:
    """
    Builds stores, logs and the chat service for a configuration profile.

    Example:
        >>> factory = TodoflowFactory()
        >>> service = factory.create_chat_service(profile="dev")
        >>> response = await service.handle("add buy milk", agent_type="default")
    """

    def __init__(self, config_dir: str = "configs"):
        self.config_dir = Path(config_dir)
        self.logger = structlog.get_logger().bind(component="todoflow_factory")

    def load_profile(self, profile: str) -> dict[str, Any]:
        """
        Load a profile YAML.

        Raises:
            FileNotFoundError: If the profile file does not exist
            ValueError: If the file does not contain a mapping
        """
        profile_path = self.config_dir / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile_path}")

        with open(profile_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
        if not isinstance(config, dict):
            raise ValueError(f"Profile must be a mapping: {profile_path}")

        self.logger.debug("profile.loaded", profile=profile, path=str(profile_path))
        return config

    def create_store(self, config: dict[str, Any]) -> TodoStoreProtocol:
        store_config = config.get("store", {})
        store_type = store_config.get("type", "memory")
        if store_type == "memory":
            return InMemoryTodoStore()
        if store_type == "file":
            return FileTodoStore(store_config.get("path", DEFAULT_STORE_PATH))
        raise ValueError(f"Unknown store type: {store_type}")

    def create_interaction_log(self, config: dict[str, Any]) -> InteractionLogProtocol:
        metrics_config = config.get("metrics", {})
        metrics_type = metrics_config.get("type", "memory")
        if metrics_type == "memory":
            return InMemoryInteractionLog()
        if metrics_type == "jsonl":
            return JsonlInteractionLog(metrics_config.get("path", DEFAULT_METRICS_PATH))
        raise ValueError(f"Unknown metrics type: {metrics_type}")

    def create_event_bus(self, config: dict[str, Any]) -> ToolEventBus:
        return ToolEventBus(buffer_size=int(config.get("events", {}).get("buffer_size", 200)))

    def create_llm_provider(self, config: dict[str, Any]) -> LLMProviderProtocol:
        return LLMService(config.get("llm", {}).get("config_path", "configs/llm_config.yaml"))

    def create_chat_service(
        self,
        profile: str = "dev",
        llm_provider: LLMProviderProtocol | None = None,
        store: TodoStoreProtocol | None = None,
    ) -> ChatService:
        """
        Wire the complete pipeline for `profile`.

        Args:
            profile: Profile name under the config directory
            llm_provider: Override for the LLM provider (tests, custom backends)
            store: Override for the todo store

        Returns:
            ChatService exposing the orchestrator, store and event bus
        """
        config = self.load_profile(profile)
        llm_config = config.get("llm", {})

        store = store or self.create_store(config)
        interaction_log = self.create_interaction_log(config)
        event_bus = self.create_event_bus(config)
        llm_provider = llm_provider or self.create_llm_provider(config)

        orchestrator = TurnOrchestrator(
            planner=LLMPlanner(llm_provider, store, model=llm_config.get("planner_model")),
            executor=LLMWorker(llm_provider, model=llm_config.get("worker_model")),
            evaluator=LLMEvaluator(llm_provider, model=llm_config.get("evaluator_model")),
            dispatcher=ActionDispatcher(store),
            recorder=InteractionRecorder(interaction_log),
            event_sink=event_bus,
        )

        self.logger.info(
            "chat_service.created",
            profile=profile,
            store=config.get("store", {}).get("type", "memory"),
            metrics=config.get("metrics", {}).get("type", "memory"),
        )
        return ChatService(
            orchestrator=orchestrator,
            store=store,
            event_bus=event_bus,
        )
