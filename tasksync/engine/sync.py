"""SyncEngine: the single entry point a presentation layer talks to.

The presentation layer calls intent methods (login, select_task,
toggle_task_complete, ...) and subscribes to state snapshots; it never holds
callbacks into the engine's internals.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from tasksync.api.client import ApiClient
from tasksync.engine.filters import apply_filter_patch, toggle_priority
from tasksync.engine.loader import CollectionLoader
from tasksync.engine.mutations import Confirm, MutationOrchestrator
from tasksync.engine.notifications import NotificationStaging
from tasksync.engine.session import SessionManager
from tasksync.engine.store import Listener, StateStore
from tasksync.engine.view_state import ViewStateCoordinator
from tasksync.models.state import AppState
from tasksync.models.task import Priority, Task, TaskId

logger = logging.getLogger(__name__)


class SyncEngine:
    """Client-side synchronization engine for the task server."""

    def __init__(
        self,
        api: Optional[ApiClient] = None,
        *,
        scheduler=None,
        confirm: Optional[Confirm] = None,
    ):
        """Wire the engine components together.

        Args:
            api: API client; one configured from the environment by default
            scheduler: Timer source for notification expiry (ThreadingScheduler by default)
            confirm: Asked before deletions; None approves every deletion
        """
        self.api = api or ApiClient()
        self.store = StateStore()
        self.notifications = NotificationStaging(self.store, scheduler)
        self.loader = CollectionLoader(self.api, self.store, self.notifications)
        self.session = SessionManager(self.api, self.store, self.loader, self.notifications)
        self.view = ViewStateCoordinator(self.store, self.loader)
        self.mutations = MutationOrchestrator(
            self.api, self.store, self.loader, self.notifications, confirm=confirm
        )

    # Observation

    @property
    def state(self) -> AppState:
        return self.store.state

    @property
    def selected_task(self) -> Optional[Task]:
        return self.store.state.selected_task

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new state snapshot; returns an unsubscribe function."""
        return self.store.subscribe(listener)

    # Session

    def start(self) -> None:
        """Probe the server for an existing session (call once at startup)."""
        self.session.probe()

    def login(self, username: str, password: str) -> bool:
        return self.session.login(username, password)

    def logout(self) -> None:
        self.session.logout()

    # Task list

    def refresh(self) -> bool:
        return self.loader.load_tasks()

    def set_filters(self, **patch: Any) -> bool:
        """Change filters (search, sort, priorities, due_within_days) and reload.

        Raises:
            pydantic.ValidationError: If a value is not valid for its field
        """
        filters = apply_filter_patch(self.store.state.filters, **patch)
        return self._replace_filters(filters)

    def toggle_priority(self, priority: Priority) -> bool:
        return self._replace_filters(toggle_priority(self.store.state.filters, priority))

    def _replace_filters(self, filters) -> bool:
        if filters == self.store.state.filters:
            return False
        self.store.update(filters=filters)
        return self.loader.load_tasks()

    # Selection and form

    def select_task(self, task_id: Optional[TaskId]) -> None:
        self.view.select_task(task_id)

    def clear_selection(self) -> None:
        self.view.clear_selection()

    def start_create_task(self) -> None:
        self.view.start_create_task()

    def start_edit_task(self) -> bool:
        return self.view.start_edit_task()

    def cancel_form(self) -> None:
        self.view.cancel_form()

    def form_initial_values(self) -> Dict[str, Any]:
        return self.view.form_initial_values()

    # Mutations

    def save_task(self, form: Mapping[str, Any]) -> bool:
        return self.mutations.save_task(form)

    def delete_task(self, task_id: Optional[TaskId] = None) -> bool:
        return self.mutations.delete_task(task_id)

    def toggle_task_complete(self, task_id: TaskId) -> bool:
        return self.mutations.toggle_task_complete(task_id)

    def add_subtask(self, title: str) -> bool:
        return self.mutations.add_subtask(title)

    def update_subtask(self, subtask_id: TaskId, data: Dict[str, Any]) -> bool:
        return self.mutations.update_subtask(subtask_id, data)

    def delete_subtask(self, subtask_id: TaskId) -> bool:
        return self.mutations.delete_subtask(subtask_id)

    def toggle_subtask_complete(self, subtask_id: TaskId) -> bool:
        return self.mutations.toggle_subtask_complete(subtask_id)

    def close(self) -> None:
        """Cancel pending timers and close the HTTP session."""
        self.notifications.close()
        self.api.close()
