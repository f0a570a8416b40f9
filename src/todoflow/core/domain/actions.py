"""
Todo Actions

The executor emits actions as a loose `{name, arguments}` pair. This module
turns them into a closed set of typed variants, one per store operation,
so the dispatcher can match on the variant instead of comparing strings.

Variants:
- CreateTodo:   createTodo(content, priority?, labels?, complexity?)
- UpdateTodo:   updateTodo(id, content?, completed?, priority?, labels?, complexity?)
- CompleteTodo: completeTodo(id, completed)
- DeleteTodo:   deleteTodo(id)
- ListTodos:    listTodos(completed?, priority?, labels?)
- UnknownAction: anything else
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from todoflow.core.domain.errors import ActionArgumentError
from todoflow.core.domain.models import Action


class ActionName(str, Enum):
    """Wire names of the supported todo actions."""

    CREATE = "createTodo"
    UPDATE = "updateTodo"
    COMPLETE = "completeTodo"
    DELETE = "deleteTodo"
    LIST = "listTodos"


@dataclass(frozen=True)
class CreateTodo:
    content: str
    priority: int | None = None
    labels: list[str] | None = None
    complexity: float | None = None


@dataclass(frozen=True)
class UpdateTodo:
    id: str
    content: str | None = None
    completed: bool | None = None
    priority: int | None = None
    labels: list[str] | None = None
    complexity: float | None = None


@dataclass(frozen=True)
class CompleteTodo:
    id: str
    completed: bool = True


@dataclass(frozen=True)
class DeleteTodo:
    id: str


@dataclass(frozen=True)
class ListTodos:
    completed: bool | None = None
    priority: int | None = None
    labels: list[str] | None = None


@dataclass(frozen=True)
class UnknownAction:
    name: str


TodoAction = CreateTodo | UpdateTodo | CompleteTodo | DeleteTodo | ListTodos | UnknownAction


def _require(args: dict[str, Any], key: str, action: ActionName) -> str:
    value = args.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ActionArgumentError(f"Missing required argument '{key}' for {action.value}")
    return str(value)


def _as_labels(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


def _as_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "done"}
    return bool(value)


def _as_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _as_float(value: Any) -> float | None:
    return None if value is None else float(value)


def parse_action(action: Action) -> TodoAction:
    """
    Convert a raw executor action into its typed variant.

    Unknown names become UnknownAction; they are never an error here.

    Raises:
        ActionArgumentError: If a recognized action lacks a required argument
        ValueError: If an argument cannot be coerced to its field type
    """
    try:
        name = ActionName(action.name)
    except ValueError:
        return UnknownAction(name=action.name)

    args = action.arguments or {}
    match name:
        case ActionName.CREATE:
            return CreateTodo(
                content=_require(args, "content", name),
                priority=_as_int(args.get("priority")),
                labels=_as_labels(args.get("labels")),
                complexity=_as_float(args.get("complexity")),
            )
        case ActionName.UPDATE:
            return UpdateTodo(
                id=_require(args, "id", name),
                content=args.get("content"),
                completed=_as_bool(args.get("completed")),
                priority=_as_int(args.get("priority")),
                labels=_as_labels(args.get("labels")),
                complexity=_as_float(args.get("complexity")),
            )
        case ActionName.COMPLETE:
            completed = _as_bool(args.get("completed"))
            return CompleteTodo(
                id=_require(args, "id", name),
                completed=True if completed is None else completed,
            )
        case ActionName.DELETE:
            return DeleteTodo(id=_require(args, "id", name))
        case ActionName.LIST:
            return ListTodos(
                completed=_as_bool(args.get("completed")),
                priority=_as_int(args.get("priority")),
                labels=_as_labels(args.get("labels")),
            )
