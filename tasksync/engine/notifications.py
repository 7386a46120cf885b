"""Transient flash/error notifications with timed expiry."""

import itertools
import logging
from typing import Dict, Optional

from tasksync.api.errors import describe_error
from tasksync.engine.store import StateStore
from tasksync.engine.timers import ThreadingScheduler, TimerHandle
from tasksync.models.constants import ERROR_DURATION_SEC, FLASH_DURATION_SEC
from tasksync.models.state import Notification, NotificationKind

logger = logging.getLogger(__name__)

DURATIONS_SEC = {
    NotificationKind.FLASH: FLASH_DURATION_SEC,
    NotificationKind.ERROR: ERROR_DURATION_SEC,
}

# AppState field holding each kind
_FIELDS = {
    NotificationKind.FLASH: "flash",
    NotificationKind.ERROR: "error",
}


class NotificationStaging:
    """Keeps at most one live notification per kind.

    Raising a notification replaces the current one of that kind and cancels
    its timer, so the new message always gets its full lifetime.
    """

    def __init__(self, store: StateStore, scheduler=None):
        self.store = store
        self.scheduler = scheduler or ThreadingScheduler()
        self._ids = itertools.count(1)
        self._timers: Dict[NotificationKind, TimerHandle] = {}

    def notify(self, kind: NotificationKind, message: str) -> Notification:
        kind = NotificationKind(kind)
        notification = Notification(
            id=next(self._ids),
            kind=kind,
            message=message,
            raised_at=self.scheduler.now(),
            expires_after=DURATIONS_SEC[kind],
        )
        self._cancel_timer(kind)
        self.store.update(**{_FIELDS[kind]: notification})
        self._timers[kind] = self.scheduler.schedule(
            notification.expires_after,
            lambda: self._expire(kind, notification.id),
        )
        logger.debug(f"{kind.value} notification raised: {message}")
        return notification

    def flash(self, message: str) -> Notification:
        return self.notify(NotificationKind.FLASH, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationKind.ERROR, message)

    def show_error(self, exc: BaseException) -> Notification:
        """Raise an error notification describing exc."""
        return self.error(describe_error(exc))

    def clear(self, kind: NotificationKind) -> None:
        kind = NotificationKind(kind)
        self._cancel_timer(kind)
        field = _FIELDS[kind]
        self.store.apply(lambda state: {field: None} if getattr(state, field) is not None else {})

    def close(self) -> None:
        """Cancel every pending expiry timer."""
        for kind in list(self._timers):
            self._cancel_timer(kind)

    def _cancel_timer(self, kind: NotificationKind) -> None:
        handle: Optional[TimerHandle] = self._timers.pop(kind, None)
        if handle is not None:
            handle.cancel()

    def _expire(self, kind: NotificationKind, notification_id: int) -> None:
        field = _FIELDS[kind]

        def changes(state):
            current = getattr(state, field)
            # Only clear the notification this timer was scheduled for
            if current is not None and current.id == notification_id:
                return {field: None}
            return {}

        self.store.apply(changes)
