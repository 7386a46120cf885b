"""Query string helpers for the tasksync API client."""

from typing import Any, List, Mapping, Optional, Tuple


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def to_query_params(params: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """Flatten a params mapping into (key, value) pairs for requests.

    None and "" values are dropped rather than sent as empty parameters;
    list/tuple/set values become one pair per element.

    Args:
        params: Mapping of parameter name to value

    Returns:
        List of (name, value) pairs, empty when nothing is left
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in (params or {}).items():
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if not _is_empty(item):
                    pairs.append((key, _to_str(item)))
        elif not _is_empty(value):
            pairs.append((key, _to_str(value)))
    return pairs


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    # Enums are (str, Enum); send the raw value
    return str(getattr(value, "value", value))
