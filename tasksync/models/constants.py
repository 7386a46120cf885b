"""Constants for tasksync.

This module centralizes the default values and user-facing messages used throughout the client.
"""

from tasksync.models.task import Priority


# API location
DEFAULT_SERVER_URL = "http://localhost:8000"
DEFAULT_API_BASE = "/api"

# Notification lifetimes (seconds), measured from the moment a notification is raised
FLASH_DURATION_SEC = 2.5
ERROR_DURATION_SEC = 4.0

# Task form defaults
DEFAULT_PRIORITY = Priority.MEDIUM

# Confirmation prompts
CONFIRM_DELETE_TASK = "Delete this task?"
CONFIRM_DELETE_SUBTASK = "Delete this subtask?"

# Messages
MSG_WELCOME = "Welcome back!"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_LOGIN_FAILED = "Login failed"
MSG_REQUEST_FAILED = "Request failed"
MSG_SOMETHING_WENT_WRONG = "Something went wrong"
MSG_TASK_CREATED = "Task created"
MSG_TASK_UPDATED = "Task updated"
MSG_TASK_DELETED = "Task deleted"
MSG_TASK_COMPLETED = "Task completed"
MSG_TASK_REOPENED = "Task reopened"
MSG_SUBTASK_ADDED = "Subtask added"
MSG_SUBTASK_UPDATED = "Subtask updated"
MSG_SUBTASK_DELETED = "Subtask deleted"
MSG_SUBTASK_COMPLETED = "Subtask completed"
MSG_SUBTASK_REOPENED = "Subtask reopened"
