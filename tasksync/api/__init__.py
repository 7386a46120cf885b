"""HTTP API access for tasksync."""

from tasksync.api.client import ApiClient, items_from_payload
from tasksync.api.errors import ApiError, ParseError, TaskSyncError, TransportError, describe_error
from tasksync.api.query import to_query_params

__all__ = [
    "ApiClient",
    "items_from_payload",
    "ApiError",
    "ParseError",
    "TaskSyncError",
    "TransportError",
    "describe_error",
    "to_query_params",
]
