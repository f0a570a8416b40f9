"""Unit tests for typed action parsing."""

import pytest

from todoflow.core.domain.actions import (
    CompleteTodo,
    CreateTodo,
    DeleteTodo,
    ListTodos,
    UnknownAction,
    UpdateTodo,
    parse_action,
)
from todoflow.core.domain.errors import ActionArgumentError
from todoflow.core.domain.models import Action


class TestParseAction:
    def test_create_with_optional_fields(self):
        parsed = parse_action(
            Action(
                "createTodo",
                {"content": "buy milk", "priority": "2", "labels": ["home"], "complexity": 0.3},
            )
        )
        assert parsed == CreateTodo(content="buy milk", priority=2, labels=["home"], complexity=0.3)

    def test_create_requires_content(self):
        with pytest.raises(ActionArgumentError, match="content"):
            parse_action(Action("createTodo", {"content": "   "}))

    def test_update_keeps_unset_fields_none(self):
        parsed = parse_action(Action("updateTodo", {"id": "t1", "content": "buy oat milk"}))
        assert parsed == UpdateTodo(id="t1", content="buy oat milk")

    def test_complete_defaults_to_completed(self):
        assert parse_action(Action("completeTodo", {"id": "t1"})) == CompleteTodo(id="t1")

    def test_complete_can_reopen(self):
        parsed = parse_action(Action("completeTodo", {"id": "t1", "completed": "false"}))
        assert parsed == CompleteTodo(id="t1", completed=False)

    def test_delete_requires_id(self):
        with pytest.raises(ActionArgumentError):
            parse_action(Action("deleteTodo", {}))
        assert parse_action(Action("deleteTodo", {"id": "t9"})) == DeleteTodo(id="t9")

    def test_list_accepts_comma_separated_labels(self):
        parsed = parse_action(Action("listTodos", {"labels": "home, work", "completed": False}))
        assert parsed == ListTodos(completed=False, labels=["home", "work"])

    def test_unknown_name_is_not_an_error(self):
        assert parse_action(Action("archiveTodo", {"id": "t1"})) == UnknownAction("archiveTodo")

    def test_uncoercible_priority_raises_value_error(self):
        with pytest.raises(ValueError):
            parse_action(Action("createTodo", {"content": "x", "priority": "urgent"}))
