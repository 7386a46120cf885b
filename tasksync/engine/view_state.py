"""Selection and form state."""

import logging
from typing import Any, Dict, Optional

from tasksync.engine.loader import CollectionLoader
from tasksync.engine.store import StateStore
from tasksync.models.state import find_by_id
from tasksync.models.task import Task, TaskId, same_id
from tasksync.models.task_factory import form_values_from_task

logger = logging.getLogger(__name__)


class ViewStateCoordinator:
    """Tracks the selected task and the create/edit form."""

    def __init__(self, store: StateStore, loader: CollectionLoader):
        self.store = store
        self.loader = loader

    @property
    def selected_task(self) -> Optional[Task]:
        return self.store.state.selected_task

    def select_task(self, task_id: Optional[TaskId]) -> None:
        """Select a task and load its subtasks; None clears the selection."""
        if task_id is None:
            self.clear_selection()
            return
        state = self.store.state
        if same_id(state.selected_task_id, task_id):
            return
        task = find_by_id(state.tasks, task_id)
        if task is None:
            logger.warning(f"Cannot select task {task_id}: not in the current list")
            return
        # The old task's subtasks must never show next to the new selection
        self.store.replace_subtasks([], selected_task_id=task.id)
        self.loader.load_subtasks()

    def clear_selection(self) -> None:
        self.store.apply(lambda state: state.cleared_selection() if state.selected_task_id is not None else {})

    def start_create_task(self) -> None:
        self.store.update(editing_task=None, form_open=True)

    def start_edit_task(self) -> bool:
        """Open the form pre-filled with the selected task (no-op without one)."""
        task = self.selected_task
        if task is None:
            return False
        self.store.update(editing_task=task, form_open=True)
        return True

    def cancel_form(self) -> None:
        self.store.update(editing_task=None, form_open=False)

    def form_initial_values(self) -> Dict[str, Any]:
        """Initial values for the open form (defaults when creating)."""
        return form_values_from_task(self.store.state.editing_task)
