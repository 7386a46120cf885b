"""Tests for the data models."""

from datetime import date

import pytest
from pydantic import ValidationError

from tasksync.models.filters import FilterState
from tasksync.models.state import AppState, find_by_id
from tasksync.models.task import Priority, Subtask, Task, same_id
from tasksync.models.user import User, user_from_payload


class TestTask:
    """Test Task parsing of server payloads."""

    def test_defaults(self):
        task = Task(id=1)
        assert task.title == ""
        assert task.priority == Priority.MEDIUM
        assert task.due_date is None
        assert task.eta is None
        assert task.completed is False

    def test_datetime_due_date_truncated_to_date(self):
        """Test that a full timestamp keeps only its date part."""
        task = Task(id=1, due_date="2024-05-01T00:00:00Z")
        assert task.due_date == date(2024, 5, 1)

    def test_empty_due_date_is_none(self):
        assert Task(id=1, due_date="").due_date is None

    def test_null_title_and_priority_take_defaults(self):
        """Test that nulls from older server rows fall back to the form defaults."""
        task = Task(id=1, title=None, priority=None)
        assert task.title == ""
        assert task.priority == "medium"
        assert Subtask(id=2, title=None).title == ""

    def test_negative_eta_rejected(self):
        with pytest.raises(ValidationError):
            Task(id=1, eta=-1)

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError):
            Task(id=1, priority="urgent")

    def test_extra_server_fields_kept(self):
        task = Task(id=1, title="A", created_at="2024-01-01")
        assert task.model_extra["created_at"] == "2024-01-01"

    def test_frozen(self):
        task = Task(id=1, title="A")
        with pytest.raises(ValidationError):
            task.title = "B"

    def test_subtask(self):
        subtask = Subtask(id="s1", title="Outline")
        assert subtask.completed is False


class TestIds:
    def test_same_id_across_types(self):
        assert same_id(3, "3")
        assert not same_id(3, 4)
        assert not same_id(None, None)

    def test_find_by_id(self):
        tasks = [Task(id=3, title="A"), Task(id=5, title="B")]
        assert find_by_id(tasks, "5").title == "B"
        assert find_by_id(tasks, 9) is None
        assert find_by_id(tasks, None) is None


class TestUserFromPayload:
    """Test extraction of the user from /auth/me responses."""

    def test_bare_user(self):
        user = user_from_payload({"id": 1, "username": "alice"})
        assert user == User(id=1, username="alice")

    def test_wrapped_user(self):
        assert user_from_payload({"user": {"id": 1, "username": "alice"}}).username == "alice"

    def test_null_user_is_anonymous(self):
        assert user_from_payload({"user": None}) is None

    def test_empty_or_non_object_payload(self):
        assert user_from_payload({}) is None
        assert user_from_payload(None) is None
        assert user_from_payload("alice") is None
        assert user_from_payload([{"id": 1}]) is None

    def test_message_body_is_not_a_user(self):
        """Test that a wrapped text body is not mistaken for a user."""
        assert user_from_payload({"message": "<html>login</html>"}) is None

    def test_display_name(self):
        assert User(username="alice", name="Alice A").display_name == "alice"
        assert User(name="Alice A").display_name == "Alice A"
        assert User(id=1).display_name == "User"


class TestFilterState:
    def test_defaults(self):
        filters = FilterState()
        assert filters.search == ""
        assert filters.sort == ""
        assert filters.priorities == []
        assert filters.due_within_days is None

    def test_priorities_deduplicated_in_order(self):
        filters = FilterState(priorities=["high", "low", "high"])
        assert filters.priorities == ["high", "low"]

    def test_negative_days_rejected(self):
        with pytest.raises(ValidationError):
            FilterState(due_within_days=-1)

    def test_unknown_sort_rejected(self):
        with pytest.raises(ValidationError):
            FilterState(sort="title")


class TestAppState:
    def test_initial_state(self):
        state = AppState()
        assert state.session_status == "unknown"
        assert not state.is_authenticated
        assert state.tasks == ()
        assert state.selected_task is None

    def test_selected_task_resolved_from_collection(self):
        state = AppState(tasks=(Task(id=3, title="A"),), selected_task_id="3")
        assert state.selected_task.title == "A"

    def test_cleared_selection_closes_edit_of_that_task(self):
        task = Task(id=3, title="A")
        state = AppState(
            tasks=(task,),
            selected_task_id=3,
            editing_task=task,
            form_open=True,
            subtasks=(Subtask(id=1, title="x"),),
            subtasks_version=4,
        )
        changes = state.cleared_selection()
        assert changes == {
            "selected_task_id": None,
            "subtasks": (),
            "subtasks_version": 5,
            "editing_task": None,
            "form_open": False,
        }

    def test_cleared_selection_keeps_create_form(self):
        state = AppState(selected_task_id=3, form_open=True)
        changes = state.cleared_selection()
        assert "form_open" not in changes
