"""Task form helpers for tasksync.

This module converts between the task form (text inputs, as a user types
them) and the payload sent to POST/PATCH /tasks, so empty inputs become
"no value" instead of 0 or "".
"""

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Union

from tasksync.models.task import Priority, Task
from tasksync.models.constants import DEFAULT_PRIORITY


def create_form_defaults() -> Dict[str, Any]:
    """Get the values of an empty "New Task" form.

    Returns:
        Dictionary with default form field values
    """
    return {
        "title": "",
        "description": "",
        "priority": DEFAULT_PRIORITY.value,
        "eta": "",
        "due_date": "",
        "completed": False,
    }


def form_values_from_task(task: Optional[Task]) -> Dict[str, Any]:
    """Get the initial form values for editing a task.

    Args:
        task: Task being edited, or None for a new task

    Returns:
        Dictionary of form values (due date rendered as YYYY-MM-DD)
    """
    values = create_form_defaults()
    if task is None:
        return values
    values.update(
        {
            "title": task.title or "",
            "description": task.description or "",
            "priority": task.priority or DEFAULT_PRIORITY.value,
            "eta": _format_eta(task.eta),
            "due_date": task.due_date.isoformat() if task.due_date else "",
            "completed": bool(task.completed),
        }
    )
    return values


def _format_eta(eta: Optional[float]) -> str:
    if eta is None:
        return ""
    return str(int(eta)) if float(eta).is_integer() else str(eta)


def coerce_eta(value: Any) -> Optional[Union[int, float]]:
    """Convert the ETA input to a number of hours.

    Empty input means "no estimate" (None), not 0.

    Raises:
        ValueError: If the input is not a number or is negative
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("ETA must be a number of hours")
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError as e:
            raise ValueError(f"ETA must be a number of hours, got {text!r}") from e
    if number < 0:
        raise ValueError("ETA cannot be negative")
    return int(number) if number.is_integer() else number


def coerce_due_date(value: Any) -> Optional[str]:
    """Convert the due date input to an ISO date string.

    Empty input means "no due date" (None), never "", so the server can tell
    clearing the date apart from a malformed one.

    Raises:
        ValueError: If the input is not a YYYY-MM-DD date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError as e:
        raise ValueError(f"Due date must be YYYY-MM-DD, got {text!r}") from e


def coerce_priority(value: Any) -> str:
    """Validate the priority input, defaulting to medium when empty.

    Raises:
        ValueError: If the value is not a known priority
    """
    if value is None or value == "":
        return DEFAULT_PRIORITY.value
    try:
        return Priority(value).value
    except ValueError as e:
        allowed = ", ".join(p.value for p in Priority)
        raise ValueError(f"Priority must be one of {allowed}, got {value!r}") from e


def build_task_payload(form: Mapping[str, Any]) -> Dict[str, Any]:
    """Build the POST/PATCH /tasks body from form values.

    Unknown keys are passed through untouched.

    Args:
        form: Form values (missing fields take the form defaults)

    Returns:
        JSON-serializable payload

    Raises:
        ValueError: If eta, due_date or priority cannot be coerced
    """
    payload = {**create_form_defaults(), **dict(form)}
    payload["title"] = str(payload.get("title") or "")
    payload["description"] = str(payload.get("description") or "")
    payload["priority"] = coerce_priority(payload.get("priority"))
    payload["eta"] = coerce_eta(payload.get("eta"))
    payload["due_date"] = coerce_due_date(payload.get("due_date"))
    payload["completed"] = bool(payload.get("completed"))
    return payload


def can_submit_task(form: Mapping[str, Any]) -> bool:
    """Whether the task form's submit control is enabled (title required)."""
    return bool(str(form.get("title") or "").strip())


def can_add_subtask(title: Optional[str]) -> bool:
    """Whether the "add subtask" control is enabled."""
    return bool((title or "").strip())
