"""Application state snapshot for tasksync.

The engine never edits a snapshot in place: every change produces a new
AppState (see tasksync.engine.store), so subscribers can compare snapshots
or version counters to see what changed.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, Field

from tasksync.models.filters import FilterState
from tasksync.models.task import Subtask, Task, TaskId, same_id
from tasksync.models.user import User


class SessionStatus(str, Enum):
    """Where the session state machine currently is."""
    UNKNOWN = "unknown"  # Before the startup probe has answered
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class NotificationKind(str, Enum):
    """Transient notification kinds."""
    FLASH = "flash"
    ERROR = "error"


class Notification(BaseModel):
    """A transient, auto-expiring message."""

    id: int = Field(..., description="Monotonic id; distinguishes a replaced notification")
    kind: NotificationKind
    message: str
    raised_at: float = Field(..., description="Scheduler time at which it was raised")
    expires_after: float = Field(..., description="Lifetime in seconds")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


class AppState(BaseModel):
    """Everything the presentation layer needs to render."""

    # Session
    session_status: SessionStatus = SessionStatus.UNKNOWN
    user: Optional[User] = None
    auth_error: Optional[str] = None
    session_epoch: int = Field(0, description="Bumped on every session reset")

    # Collections (replaced wholesale, never patched)
    tasks: Tuple[Task, ...] = ()
    tasks_version: int = 0
    subtasks: Tuple[Subtask, ...] = ()
    subtasks_version: int = 0
    loading: bool = False

    filters: FilterState = Field(default_factory=FilterState)

    # Selection / form
    selected_task_id: Optional[TaskId] = None
    form_open: bool = False
    editing_task: Optional[Task] = None

    # Notifications
    flash: Optional[Notification] = None
    error: Optional[Notification] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def selected_task(self) -> Optional[Task]:
        """Look the selection up in the current collection (never cached)."""
        return find_by_id(self.tasks, self.selected_task_id)

    def cleared_selection(self) -> Dict[str, Any]:
        """Changes that drop the selection.

        Subtasks belong to the selected task, so they go too, and an edit
        targeting the deselected task is closed.
        """
        changes: Dict[str, Any] = {
            "selected_task_id": None,
            "subtasks": (),
            "subtasks_version": self.subtasks_version + 1,
        }
        if self.editing_task is not None and same_id(self.editing_task.id, self.selected_task_id):
            changes["editing_task"] = None
            changes["form_open"] = False
        return changes

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


def find_by_id(items, item_id):
    """Return the item whose id matches item_id, or None."""
    if item_id is None:
        return None
    for item in items:
        if same_id(item.id, item_id):
            return item
    return None
