"""
Todo tool specifications for native function calling.

The worker exposes the five todo actions to the model as OpenAI-style
function specs. Specs are kept small and typed to reduce hallucinated
arguments.
"""

from typing import Any

from todoflow.core.domain.actions import ActionName


def _tool_spec(name: str, description: str, parameters: dict[str, Any]) -> dict[str, Any]:
    """Build an OpenAI function spec."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": parameters.get("properties", {}),
                "required": parameters.get("required", []),
                "additionalProperties": False,
            },
        },
    }


_LABELS = {"type": "array", "items": {"type": "string"}}
_PRIORITY = {"type": "integer", "minimum": 0, "description": "0 = none, higher = more urgent"}
_COMPLEXITY = {"type": "number", "minimum": 0, "maximum": 1}


def get_todo_tool_specs() -> list[dict[str, Any]]:
    """JSON schemas describing the todo actions exposed to the model."""
    return [
        _tool_spec(
            ActionName.CREATE.value,
            "Create a new todo.",
            {
                "properties": {
                    "content": {"type": "string"},
                    "priority": _PRIORITY,
                    "labels": _LABELS,
                    "complexity": _COMPLEXITY,
                },
                "required": ["content"],
            },
        ),
        _tool_spec(
            ActionName.UPDATE.value,
            "Update fields of an existing todo.",
            {
                "properties": {
                    "id": {"type": "string"},
                    "content": {"type": "string"},
                    "completed": {"type": "boolean"},
                    "priority": _PRIORITY,
                    "labels": _LABELS,
                    "complexity": _COMPLEXITY,
                },
                "required": ["id"],
            },
        ),
        _tool_spec(
            ActionName.COMPLETE.value,
            "Mark a todo as completed, or reopen it with completed=false.",
            {
                "properties": {
                    "id": {"type": "string"},
                    "completed": {"type": "boolean", "default": True},
                },
                "required": ["id"],
            },
        ),
        _tool_spec(
            ActionName.DELETE.value,
            "Delete a todo.",
            {
                "properties": {"id": {"type": "string"}},
                "required": ["id"],
            },
        ),
        _tool_spec(
            ActionName.LIST.value,
            "List todos, optionally filtered.",
            {
                "properties": {
                    "completed": {"type": "boolean"},
                    "priority": _PRIORITY,
                    "labels": _LABELS,
                },
                "required": [],
            },
        ),
    ]
