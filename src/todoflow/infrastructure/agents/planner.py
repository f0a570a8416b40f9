"""
LLM Planner

Classifies the user's request into one todo operation and, when the user
refers to an existing todo by its text, resolves it into a matched task.
Only the todos of the agent named on the latest message are considered.
"""

from collections.abc import Sequence

import structlog

from todoflow.core.domain.models import ChatMessage, MatchedTask, OperationPlan, PlanDetails
from todoflow.core.domain.todos import Todo
from todoflow.core.interfaces.llm import LLMProviderProtocol
from todoflow.core.interfaces.store import TodoStoreProtocol
from todoflow.core.prompts.todo_prompts import PLANNER_PROMPT
from todoflow.infrastructure.agents.parsing import history_to_messages, parse_json_object

logger = structlog.get_logger()

OPERATIONS = {"create", "update", "complete", "delete", "list"}
MAX_PROMPT_TODOS = 50


def _format_todos(todos: list[Todo]) -> str:
    if not todos:
        return "(no todos yet)"
    lines = []
    for todo in todos[:MAX_PROMPT_TODOS]:
        status = "done" if todo.completed else "open"
        lines.append(f"- [{todo.id}] {todo.content} ({status})")
    return "\n".join(lines)


class LLMPlanner:
    """Planner backed by a chat model returning a JSON plan."""

    def __init__(
        self,
        llm_provider: LLMProviderProtocol,
        store: TodoStoreProtocol,
        model: str | None = None,
    ):
        self.llm_provider = llm_provider
        self.store = store
        self.model = model
        self.logger = logger.bind(component="llm_planner")

    async def plan(self, message: str, context: Sequence[ChatMessage]) -> OperationPlan:
        agent_type = context[-1].metadata.active_agent if context else None
        listing = await self.store.list_todos(agent_type=agent_type)
        todos = listing.todos if listing.success and listing.todos else []

        messages = [
            {"role": "system", "content": PLANNER_PROMPT.format(todos=_format_todos(todos))},
            *history_to_messages(context),
        ]
        result = await self.llm_provider.complete(
            messages, model=self.model, response_format={"type": "json_object"}
        )
        usage = result.get("usage")
        if not result.get("success"):
            return OperationPlan.failure(
                f"Planner LLM call failed: {result.get('error', 'unknown error')}", usage
            )

        try:
            data = parse_json_object(result.get("content"))
        except ValueError as e:
            self.logger.warning("planner.invalid_response", error=str(e))
            return OperationPlan.failure(f"Planner returned invalid JSON: {e}", usage)

        if data.get("success") is False:
            return OperationPlan.failure(
                str(data.get("error") or "Planner could not plan the request"), usage
            )

        operation = str(data.get("operation", "")).strip().lower()
        if operation not in OPERATIONS:
            return OperationPlan.failure(f"Unsupported operation: {operation or '(none)'}", usage)

        plan_context = data.get("context") if isinstance(data.get("context"), dict) else {}
        matched_task = self._resolve_match(data.get("matchedTaskId"), todos)
        if matched_task is not None:
            plan_context = {**plan_context, "matchedTodo": matched_task.to_dict()}

        required_tools = data.get("requiredTools") or []
        return OperationPlan(
            success=True,
            intent=str(data.get("intent", "")),
            plan=PlanDetails(
                operation=operation,
                complexity=str(data.get("complexity") or "simple"),
                required_tools=[str(tool) for tool in required_tools],
                context=plan_context,
            ),
            matched_task=matched_task,
            usage=usage,
        )

    def _resolve_match(self, matched_id: object, todos: list[Todo]) -> MatchedTask | None:
        if not matched_id:
            return None
        for todo in todos:
            if todo.id == str(matched_id):
                return MatchedTask(id=todo.id, content=todo.content)
        self.logger.debug("planner.matched_task_unknown", matched_task_id=matched_id)
        return None
