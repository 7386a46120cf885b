"""Observable holder of the current AppState snapshot."""

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from tasksync.models.state import AppState, SessionStatus
from tasksync.models.task import Subtask, Task

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


class StateStore:
    """Holds one immutable AppState and tells subscribers when it is replaced.

    Collections are only ever swapped as a whole through replace_tasks /
    replace_subtasks, which bump the matching version counter.
    """

    def __init__(self, initial: Optional[AppState] = None):
        self._state = initial or AppState()
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        with self._lock:
            # Copy-on-write: _emit iterates the list it grabbed under the lock
            self._listeners = [*self._listeners, listener]

        def unsubscribe() -> None:
            with self._lock:
                self._listeners = [registered for registered in self._listeners if registered is not listener]

        return unsubscribe

    def update(self, **changes) -> AppState:
        """Replace the snapshot with a copy carrying the given field changes."""
        if not changes:
            return self._state
        return self.apply(lambda state: changes)

    def replace_tasks(self, tasks: Iterable[Task], **changes) -> AppState:
        tasks = tuple(tasks)
        return self.apply(
            lambda state: {"tasks": tasks, "tasks_version": state.tasks_version + 1, **changes}
        )

    def replace_subtasks(self, subtasks: Iterable[Subtask], **changes) -> AppState:
        subtasks = tuple(subtasks)
        return self.apply(
            lambda state: {"subtasks": subtasks, "subtasks_version": state.subtasks_version + 1, **changes}
        )

    def reset_session(self) -> AppState:
        """Drop everything tied to the logged-in identity.

        Filters survive; notifications expire on their own timers.
        """
        return self.apply(
            lambda state: {
                "session_status": SessionStatus.ANONYMOUS.value,
                "user": None,
                "auth_error": None,
                "session_epoch": state.session_epoch + 1,
                "tasks": (),
                "tasks_version": state.tasks_version + 1,
                "subtasks": (),
                "subtasks_version": state.subtasks_version + 1,
                "loading": False,
                "selected_task_id": None,
                "form_open": False,
                "editing_task": None,
            }
        )

    def apply(self, compute: Callable[[AppState], Dict[str, Any]]) -> AppState:
        """Derive changes from the current snapshot and apply them atomically."""
        with self._lock:
            changes = compute(self._state)
            if not changes:
                return self._state
            self._state = self._state.model_copy(update=changes)
            new_state = self._state
            listeners = self._listeners
        self._emit(new_state, listeners)
        return new_state

    def _emit(self, state: AppState, listeners: List[Listener]) -> None:
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")
