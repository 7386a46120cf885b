"""HTTP client for the task server API.

Session-aware: one requests.Session carries the login cookie on every call.
Non-2xx responses raise ApiError, undecodable success bodies raise ParseError
and requests that never got a response raise TransportError.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import requests
from requests.structures import CaseInsensitiveDict

from tasksync.api.errors import ApiError, ParseError, TransportError
from tasksync.api.query import to_query_params
from tasksync.config import get_settings
from tasksync.models.task import TaskId

logger = logging.getLogger(__name__)


def _seg(value: TaskId) -> str:
    """Quote an id for use as a single path segment."""
    return quote(str(value), safe="")


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or None
    return None


class ApiClient:
    """Client for the task server REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the API client.

        Args:
            base_url: Full API base URL (e.g. http://localhost:8000/api).
                      If None, built from TASKSYNC_SERVER_URL / TASKSYNC_API_BASE.
            session: requests.Session to use (owns the cookie jar). A new one by default.
            timeout: Transport timeout in seconds. None waits indefinitely.
        """
        if base_url is None:
            settings = get_settings()
            base_url = settings.base_url
            if timeout is None:
                timeout = settings.request_timeout_sec
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        cleaned = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{cleaned}"

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        expect_json: bool = True,
    ) -> Any:
        """Perform a request and return the parsed response body.

        Args:
            path: API path, relative to the base URL
            method: HTTP method
            body: Dict/list bodies are sent as JSON unless a Content-Type is
                  already set; anything else (bytes, form data) is sent as-is
            params: Query parameters (empty values are dropped)
            headers: Extra request headers
            expect_json: Wrap non-JSON responses as {"message": text}

        Returns:
            Decoded JSON, or text / {"message": text} for non-JSON responses

        Raises:
            TransportError: If no response was received
            ApiError: If the status is not 2xx
            ParseError: If the status is 2xx but the body cannot be decoded
        """
        final_headers = CaseInsensitiveDict(headers or {})
        data = body
        if isinstance(body, (dict, list)) and "Content-Type" not in final_headers:
            final_headers["Content-Type"] = "application/json"
            data = json.dumps(body)
        if "Accept" not in final_headers:
            final_headers["Accept"] = "application/json"

        query = to_query_params(params) or None
        url = self._url(path)
        logger.debug(f"{method} {url} params={query}")

        try:
            resp = self.session.request(
                method,
                url,
                params=query,
                data=data,
                headers=dict(final_headers),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"{method} {url} failed without a response: {type(e).__name__}: {e}")
            raise TransportError(f"Network error during {method} {path}: {e}") from e

        status = resp.status_code
        is_success = 200 <= status < 300
        content_type = resp.headers.get("Content-Type", "") or ""

        try:
            if "application/json" in content_type:
                payload = resp.json()
            else:
                text = resp.text
                payload = {"message": text} if expect_json else text
        except ValueError as e:
            if not is_success:
                raise ApiError(f"Request failed with status {status}", status) from e
            raise ParseError("Failed to parse server response", status) from e

        logger.debug(f"{method} {url} -> {status}")
        if not is_success:
            message = _error_message(payload) or f"Request failed with status {status}"
            raise ApiError(message, status, payload)
        return payload

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    # Authentication

    def login(self, username: str, password: str) -> Any:
        """Log in; the server sets the session cookie."""
        return self.request("/auth/login", "POST", {"username": username, "password": password})

    def logout(self) -> Any:
        """Log out the current session."""
        return self.request("/auth/logout", "POST")

    def current_user(self) -> Any:
        """Fetch the currently authenticated user payload."""
        return self.request("/auth/me", "GET")

    # Tasks

    def get_tasks(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        """List tasks.

        Args:
            params: search, sort, priority (str or list) and due_within_days

        Returns:
            List of task dicts, or {"items": [...]} depending on the server
        """
        return self.request("/tasks", "GET", params=params)

    def get_task(self, task_id: TaskId) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}", "GET")

    def create_task(self, data: Dict[str, Any]) -> Any:
        return self.request("/tasks", "POST", data)

    def update_task(self, task_id: TaskId, data: Dict[str, Any]) -> Any:
        """Partially update a task (only the given fields change)."""
        return self.request(f"/tasks/{_seg(task_id)}", "PATCH", data)

    def delete_task(self, task_id: TaskId) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}", "DELETE")

    def complete_task(self, task_id: TaskId, completed: bool = True) -> Any:
        """Set completion through the dedicated endpoint.

        Servers without this endpoint answer 404; see
        MutationOrchestrator for the fallback to update_task.
        """
        return self.request(f"/tasks/{_seg(task_id)}/complete", "POST", {"completed": completed})

    # Subtasks

    def list_subtasks(self, task_id: TaskId) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}/subtasks", "GET")

    def get_subtask(self, task_id: TaskId, subtask_id: TaskId) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}/subtasks/{_seg(subtask_id)}", "GET")

    def create_subtask(self, task_id: TaskId, data: Dict[str, Any]) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}/subtasks", "POST", data)

    def update_subtask(self, task_id: TaskId, subtask_id: TaskId, data: Dict[str, Any]) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}/subtasks/{_seg(subtask_id)}", "PATCH", data)

    def delete_subtask(self, task_id: TaskId, subtask_id: TaskId) -> Any:
        return self.request(f"/tasks/{_seg(task_id)}/subtasks/{_seg(subtask_id)}", "DELETE")

    def complete_subtask(self, task_id: TaskId, subtask_id: TaskId, completed: bool = True) -> Any:
        """Set subtask completion through the dedicated endpoint (may 404)."""
        return self.request(
            f"/tasks/{_seg(task_id)}/subtasks/{_seg(subtask_id)}/complete",
            "POST",
            {"completed": completed},
        )


def items_from_payload(payload: Any) -> List[Any]:
    """Normalize a list response: a bare array or {"items": [...]}."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return payload["items"]
    return []
