"""Loading of the task and subtask collections.

Every load replaces the collection wholesale. Responses that arrive after the
session was reset (logout) are dropped: the epoch they were requested under
no longer matches.
"""

import logging
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from tasksync.api.client import ApiClient, items_from_payload
from tasksync.api.errors import TaskSyncError
from tasksync.engine.filters import build_task_query
from tasksync.engine.notifications import NotificationStaging
from tasksync.engine.store import StateStore
from tasksync.models.state import NotificationKind, find_by_id
from tasksync.models.task import Subtask, Task, same_id

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_items(payload: Any, model: Type[ModelT]) -> List[ModelT]:
    """Validate every item of a list payload, skipping malformed entries."""
    items: List[ModelT] = []
    for raw in items_from_payload(payload):
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {model.__name__} in server response: {e.error_count()} error(s)")
    return items


class CollectionLoader:
    """Fetches tasks/subtasks for the current session and stores them."""

    def __init__(self, api: ApiClient, store: StateStore, notifications: NotificationStaging):
        self.api = api
        self.store = store
        self.notifications = notifications

    def load_tasks(self) -> bool:
        """Reload the task list with the current filters.

        Clears the selection (and subtasks) when the selected task is not in
        the fresh list.

        Returns:
            True if the collection was replaced
        """
        state = self.store.state
        if not state.is_authenticated:
            logger.debug("Not loading tasks: no authenticated user")
            return False
        epoch = state.session_epoch
        params = build_task_query(state.filters)

        self.store.update(loading=True)
        self.notifications.clear(NotificationKind.ERROR)
        try:
            payload = self.api.get_tasks(params)
        except TaskSyncError as e:
            if self._is_current(epoch):
                logger.error(f"Failed to load tasks: {type(e).__name__}: {e}")
                self.store.update(loading=False)
                self.notifications.show_error(e)
            return False

        if not self._is_current(epoch):
            logger.debug("Discarding task list that arrived after the session was reset")
            return False

        tasks = parse_items(payload, Task)

        def changes(current):
            # Re-checked under the store lock; a logout may have landed meanwhile
            if current.session_epoch != epoch:
                return {}
            result = {
                "tasks": tuple(tasks),
                "tasks_version": current.tasks_version + 1,
                "loading": False,
            }
            selected_id = current.selected_task_id
            if selected_id is not None and find_by_id(tasks, selected_id) is None:
                logger.debug(f"Selected task {selected_id} is gone; clearing selection")
                result.update(current.cleared_selection())
            return result

        if self.store.apply(changes).session_epoch != epoch:
            logger.debug("Discarding task list that arrived after the session was reset")
            return False
        logger.debug(f"Loaded {len(tasks)} tasks")
        return True

    def load_subtasks(self) -> bool:
        """Reload the subtasks of the selected task (empties them without one).

        Returns:
            True if the collection was replaced
        """
        state = self.store.state
        task_id = state.selected_task_id
        if task_id is None:
            if state.subtasks:
                self.store.replace_subtasks([])
            return True
        if not state.is_authenticated:
            return False
        epoch = state.session_epoch

        try:
            payload = self.api.list_subtasks(task_id)
        except TaskSyncError as e:
            if self._is_current(epoch):
                logger.error(f"Failed to load subtasks of task {task_id}: {type(e).__name__}: {e}")
                self.notifications.show_error(e)
            return False

        subtasks = parse_items(payload, Subtask)

        def changes(current):
            # Dropped if the session was reset or the selection moved meanwhile
            if current.session_epoch != epoch or not same_id(current.selected_task_id, task_id):
                return {}
            return {"subtasks": tuple(subtasks), "subtasks_version": current.subtasks_version + 1}

        before = self.store.state.subtasks_version
        after = self.store.apply(changes).subtasks_version
        if after == before:
            logger.debug(f"Discarding stale subtasks of task {task_id}")
            return False
        return True

    def _is_current(self, epoch: int) -> bool:
        return self.store.state.session_epoch == epoch
