"""
Action Dispatcher

Applies one executor action to the task store and reports the result as a
DispatchOutcome. Dispatch failures are recoverable: they are returned as
part of the outcome, never raised. Any exception coming out of the store
(or out of argument parsing) is caught here and converted into a failure.
"""

import structlog

from todoflow.core.domain.actions import (
    CompleteTodo,
    CreateTodo,
    DeleteTodo,
    ListTodos,
    TodoAction,
    UnknownAction,
    UpdateTodo,
    parse_action,
)
from todoflow.core.domain.models import Action, DispatchOutcome
from todoflow.core.interfaces.store import TodoStoreProtocol

logger = structlog.get_logger()

AGENT_CREATOR = "agent"
DATABASE_FAILURE = "Database operation failed"


class ActionDispatcher:
    """
    Maps a named action onto exactly one task-store operation.

    Each recognized action contributes one success or one failure to the
    outcome counters. Unknown action names count as one failure and never
    reach the store.
    """

    def __init__(self, store: TodoStoreProtocol):
        self.store = store
        self.logger = logger.bind(component="action_dispatcher")

    async def dispatch(
        self,
        action: Action,
        agent_type: str,
        outcome: DispatchOutcome | None = None,
    ) -> DispatchOutcome:
        """
        Apply `action` for `agent_type`.

        Args:
            action: Raw action emitted by the executor
            agent_type: Agent tag the todos belong to
            outcome: Accumulator to extend; a fresh one by default

        Returns:
            The accumulator extended with this action's success or failure
        """
        outcome = outcome or DispatchOutcome()
        try:
            parsed = parse_action(action)
            result = await self._apply(parsed, agent_type, outcome)
        except Exception as e:
            self.logger.error(
                "dispatch.exception",
                action=action.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return outcome.record_failure(str(e) or DATABASE_FAILURE)

        if result.fail_count > outcome.fail_count:
            self.logger.warning("dispatch.failed", action=action.name, error=result.error)
        else:
            self.logger.info(
                "dispatch.completed",
                action=action.name,
                applied_ids=list(result.applied_ids[len(outcome.applied_ids):]),
            )
        return result

    async def _apply(
        self, action: TodoAction, agent_type: str, outcome: DispatchOutcome
    ) -> DispatchOutcome:
        match action:
            case CreateTodo():
                result = await self.store.create_todo(
                    content=action.content,
                    agent_type=agent_type,
                    created_by=AGENT_CREATOR,
                    priority=action.priority,
                    labels=action.labels,
                    complexity=action.complexity,
                )
                if result.success and result.todo:
                    return outcome.record_success([result.todo.id])
                return outcome.record_failure("Failed to create todo")

            case UpdateTodo():
                result = await self.store.update_todo(
                    id=action.id,
                    content=action.content,
                    completed=action.completed,
                    priority=action.priority,
                    labels=action.labels,
                    complexity=action.complexity,
                )
                if result.success and result.todo:
                    return outcome.record_success([result.todo.id])
                return outcome.record_failure(result.error or "Failed to update todo")

            case CompleteTodo():
                result = await self.store.update_todo(id=action.id, completed=action.completed)
                if result.success and result.todo:
                    return outcome.record_success([result.todo.id])
                return outcome.record_failure(
                    result.error or "Failed to update todo completion status"
                )

            case DeleteTodo():
                result = await self.store.delete_todo(action.id)
                if result.success:
                    return outcome.record_success([action.id])
                return outcome.record_failure(result.error or "Failed to delete todo")

            case ListTodos():
                result = await self.store.list_todos(
                    agent_type=agent_type,
                    completed=action.completed,
                    priority=action.priority,
                    labels=action.labels,
                )
                if result.success and result.todos is not None:
                    return outcome.record_success([todo.id for todo in result.todos])
                return outcome.record_failure("Failed to list todos")

            case UnknownAction(name=name):
                return outcome.record_failure(f"Unknown action: {name}")
