"""Create/update/delete/complete for tasks and subtasks.

Every mutation follows the same path: issue the request; on success raise a
flash notification and reload the affected collection from the server; on
failure raise an error notification and leave the collections untouched.
Nothing is patched locally, so the displayed state is always the last
successful server read.

Completion uses a two-step protocol. The dedicated POST .../complete endpoint
is tried first; if (and only if) it answers 404, a generic PATCH of the
``completed`` field is sent instead. This keeps the client working against
servers that never grew the dedicated endpoint.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from tasksync.api.client import ApiClient
from tasksync.api.errors import ApiError, TaskSyncError
from tasksync.engine.loader import CollectionLoader
from tasksync.engine.notifications import NotificationStaging
from tasksync.engine.store import StateStore
from tasksync.models.constants import (
    CONFIRM_DELETE_SUBTASK,
    CONFIRM_DELETE_TASK,
    MSG_SUBTASK_ADDED,
    MSG_SUBTASK_COMPLETED,
    MSG_SUBTASK_DELETED,
    MSG_SUBTASK_REOPENED,
    MSG_SUBTASK_UPDATED,
    MSG_TASK_COMPLETED,
    MSG_TASK_CREATED,
    MSG_TASK_DELETED,
    MSG_TASK_REOPENED,
    MSG_TASK_UPDATED,
)
from tasksync.models.state import find_by_id
from tasksync.models.task import Task, TaskId, same_id
from tasksync.models.task_factory import build_task_payload, can_add_subtask, can_submit_task

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


def complete_with_fallback(
    primary: Callable[[], Any],
    fallback: Callable[[], Any],
    target: str,
) -> Any:
    """Run primary; on a 404 ApiError run fallback instead.

    Any other failure propagates unchanged.
    """
    try:
        return primary()
    except ApiError as e:
        if e.status != 404:
            raise
        logger.info(f"Complete endpoint missing for {target} (404); falling back to partial update")
        return fallback()


class MutationOrchestrator:
    """Turns user intents into API calls followed by a full reload."""

    def __init__(
        self,
        api: ApiClient,
        store: StateStore,
        loader: CollectionLoader,
        notifications: NotificationStaging,
        confirm: Optional[Confirm] = None,
    ):
        self.api = api
        self.store = store
        self.loader = loader
        self.notifications = notifications
        self.confirm = confirm

    # Tasks

    def save_task(self, form: Mapping[str, Any]) -> bool:
        """Create a task, or update the one being edited, from form values."""
        state = self.store.state
        if not state.is_authenticated:
            return False
        if not can_submit_task(form):
            logger.debug("Task form submitted without a title; ignoring")
            return False
        try:
            payload = build_task_payload(form)
        except ValueError as e:
            self.notifications.error(str(e))
            return False

        editing = state.editing_task
        if editing is not None:
            action = lambda: self.api.update_task(editing.id, payload)
            message = MSG_TASK_UPDATED
            target_id: Optional[TaskId] = editing.id
        else:
            action = lambda: self.api.create_task(payload)
            message = MSG_TASK_CREATED
            target_id = None

        def after() -> None:
            self.store.update(form_open=False, editing_task=None)
            self._reload_after_task_mutation(target_id)

        return self._run(action, message, after, "save task")

    def delete_task(self, task_id: Optional[TaskId] = None) -> bool:
        """Delete a task (the selected one by default) after confirmation.

        A declined confirmation is a no-op, not an error.
        """
        state = self.store.state
        if not state.is_authenticated:
            return False
        task = state.selected_task if task_id is None else find_by_id(state.tasks, task_id)
        if task is None:
            return False
        if not self._confirmed(CONFIRM_DELETE_TASK):
            logger.debug(f"Deletion of task {task.id} declined")
            return False

        def after() -> None:
            self.store.apply(
                lambda current: current.cleared_selection() if same_id(current.selected_task_id, task.id) else {}
            )
            self.loader.load_tasks()

        return self._run(lambda: self.api.delete_task(task.id), MSG_TASK_DELETED, after, f"delete task {task.id}")

    def toggle_task_complete(self, task_id: TaskId) -> bool:
        """Flip a task's completion flag."""
        task = self._find_task(task_id)
        if task is None:
            return False
        completed = not task.completed
        action = lambda: complete_with_fallback(
            lambda: self.api.complete_task(task.id, completed),
            lambda: self.api.update_task(task.id, {"completed": completed}),
            f"task {task.id}",
        )
        message = MSG_TASK_COMPLETED if completed else MSG_TASK_REOPENED
        return self._run(
            action,
            message,
            lambda: self._reload_after_task_mutation(task.id),
            f"toggle task {task.id}",
        )

    # Subtasks (always of the selected task)

    def add_subtask(self, title: str) -> bool:
        task = self._selected_task()
        if task is None or not can_add_subtask(title):
            return False
        data = {"title": title.strip()}
        return self._run(
            lambda: self.api.create_subtask(task.id, data),
            MSG_SUBTASK_ADDED,
            self.loader.load_subtasks,
            f"add subtask to task {task.id}",
        )

    def update_subtask(self, subtask_id: TaskId, data: Dict[str, Any]) -> bool:
        task = self._selected_task()
        if task is None:
            return False
        return self._run(
            lambda: self.api.update_subtask(task.id, subtask_id, dict(data)),
            MSG_SUBTASK_UPDATED,
            self.loader.load_subtasks,
            f"update subtask {subtask_id}",
        )

    def delete_subtask(self, subtask_id: TaskId) -> bool:
        task = self._selected_task()
        if task is None:
            return False
        if not self._confirmed(CONFIRM_DELETE_SUBTASK):
            logger.debug(f"Deletion of subtask {subtask_id} declined")
            return False
        return self._run(
            lambda: self.api.delete_subtask(task.id, subtask_id),
            MSG_SUBTASK_DELETED,
            self.loader.load_subtasks,
            f"delete subtask {subtask_id}",
        )

    def toggle_subtask_complete(self, subtask_id: TaskId) -> bool:
        task = self._selected_task()
        if task is None:
            return False
        subtask = find_by_id(self.store.state.subtasks, subtask_id)
        if subtask is None:
            logger.warning(f"Cannot toggle subtask {subtask_id}: not loaded")
            return False
        completed = not subtask.completed
        action = lambda: complete_with_fallback(
            lambda: self.api.complete_subtask(task.id, subtask.id, completed),
            lambda: self.api.update_subtask(task.id, subtask.id, {"completed": completed}),
            f"subtask {subtask.id}",
        )
        message = MSG_SUBTASK_COMPLETED if completed else MSG_SUBTASK_REOPENED
        return self._run(action, message, self.loader.load_subtasks, f"toggle subtask {subtask.id}")

    # Helpers

    def _run(
        self,
        action: Callable[[], Any],
        message: str,
        after: Callable[[], Any],
        description: str,
    ) -> bool:
        """Issue the request, then notify and reload (strictly in that order)."""
        epoch = self.store.state.session_epoch
        try:
            action()
        except TaskSyncError as e:
            if self.store.state.session_epoch == epoch:
                logger.error(f"Failed to {description}: {type(e).__name__}: {e}")
                self.notifications.show_error(e)
            return False

        if self.store.state.session_epoch != epoch:
            logger.debug(f"Ignoring result of '{description}': session was reset meanwhile")
            return False

        self.notifications.flash(message)
        after()
        return True

    def _reload_after_task_mutation(self, task_id: Optional[TaskId]) -> None:
        self.loader.load_tasks()
        if task_id is not None and same_id(self.store.state.selected_task_id, task_id):
            self.loader.load_subtasks()

    def _find_task(self, task_id: TaskId) -> Optional[Task]:
        state = self.store.state
        if not state.is_authenticated:
            return None
        task = find_by_id(state.tasks, task_id)
        if task is None:
            logger.warning(f"Task {task_id} is not in the current list")
        return task

    def _selected_task(self) -> Optional[Task]:
        state = self.store.state
        if not state.is_authenticated:
            return None
        return state.selected_task

    def _confirmed(self, prompt: str) -> bool:
        if self.confirm is None:
            return True
        return bool(self.confirm(prompt))
