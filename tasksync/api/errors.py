"""Error types raised by the tasksync API client."""

from typing import Any, Optional

from tasksync.models.constants import MSG_REQUEST_FAILED, MSG_SOMETHING_WENT_WRONG


class TaskSyncError(Exception):
    """Base class for every error the API client raises."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(TaskSyncError):
    """The request never got a response (DNS, refused connection, timeout...)."""


class ApiError(TaskSyncError):
    """The server answered with a non-2xx status.

    Attributes:
        status: HTTP status code, if a response was received
        data: Parsed response body, for callers that want to inspect it
    """

    def __init__(self, message: str, status: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status={self.status!r})"


class ParseError(ApiError):
    """The server claimed success but the body could not be decoded."""


def describe_error(exc: BaseException) -> str:
    """Turn an exception into the message shown to the user."""
    if isinstance(exc, ApiError):
        data = exc.data
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return exc.message or MSG_REQUEST_FAILED
    return str(exc) or MSG_SOMETHING_WENT_WRONG
