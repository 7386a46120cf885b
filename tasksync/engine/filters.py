"""Filter query builder for the task list.

Turns FilterState into GET /tasks parameters, leaving out every field that is
empty or unset so the server applies its own defaults.
"""

import math
from typing import Any, Dict, Optional

from tasksync.models.filters import FilterState
from tasksync.models.task import Priority


def build_task_query(filters: FilterState) -> Dict[str, Any]:
    """Build GET /tasks query parameters.

    - search / sort: only when non-empty
    - priority: the list of selected priorities, only when non-empty
    - due_within_days: only when set (0 is a real value, None means "no filter")

    Args:
        filters: Current filter state

    Returns:
        Dict of parameters (empty when no filter is active)
    """
    params: Dict[str, Any] = {}
    if filters.search:
        params["search"] = filters.search
    if filters.sort:
        params["sort"] = filters.sort
    if filters.priorities:
        params["priority"] = list(filters.priorities)
    if filters.due_within_days is not None:
        params["due_within_days"] = filters.due_within_days
    return params


def parse_due_within_days(value: Any) -> Optional[int]:
    """Parse the "due within (days)" input.

    Empty input clears the filter; anything else is clamped to a
    non-negative whole number (unparseable or non-finite input counts as 0).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return 0
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return max(0, int(number))


def toggle_priority(filters: FilterState, priority: Priority) -> FilterState:
    """Add the priority to the filter set, or remove it if already there."""
    value = Priority(priority).value
    current = list(filters.priorities)
    if value in current:
        current.remove(value)
    else:
        current.append(value)
    return apply_filter_patch(filters, priorities=current)


def apply_filter_patch(filters: FilterState, **patch: Any) -> FilterState:
    """Return a validated copy of filters with the given fields replaced.

    ``due_within_days`` accepts raw input text (see parse_due_within_days).

    Raises:
        pydantic.ValidationError: If a value is not valid for its field
    """
    if "due_within_days" in patch:
        patch["due_within_days"] = parse_due_within_days(patch["due_within_days"])
    return FilterState.model_validate({**filters.model_dump(), **patch})
