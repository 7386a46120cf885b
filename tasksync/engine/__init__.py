"""Client-side synchronization engine for tasksync."""

from tasksync.engine.filters import build_task_query, parse_due_within_days, toggle_priority, apply_filter_patch
from tasksync.engine.loader import CollectionLoader
from tasksync.engine.mutations import MutationOrchestrator, complete_with_fallback
from tasksync.engine.notifications import NotificationStaging
from tasksync.engine.session import SessionManager
from tasksync.engine.store import StateStore
from tasksync.engine.sync import SyncEngine
from tasksync.engine.timers import ManualScheduler, ThreadingScheduler, TimerHandle
from tasksync.engine.view_state import ViewStateCoordinator

__all__ = [
    "build_task_query",
    "parse_due_within_days",
    "toggle_priority",
    "apply_filter_patch",
    "CollectionLoader",
    "MutationOrchestrator",
    "complete_with_fallback",
    "NotificationStaging",
    "SessionManager",
    "StateStore",
    "SyncEngine",
    "ManualScheduler",
    "ThreadingScheduler",
    "TimerHandle",
    "ViewStateCoordinator",
]
