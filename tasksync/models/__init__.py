"""Data models for tasksync."""

from tasksync.models.task import Task, Subtask, Priority, TaskId, same_id
from tasksync.models.user import User, user_from_payload
from tasksync.models.filters import FilterState, SortKey
from tasksync.models.state import AppState, Notification, NotificationKind, SessionStatus, find_by_id

__all__ = [
    "Task",
    "Subtask",
    "Priority",
    "TaskId",
    "same_id",
    "User",
    "user_from_payload",
    "FilterState",
    "SortKey",
    "AppState",
    "Notification",
    "NotificationKind",
    "SessionStatus",
    "find_by_id",
]
