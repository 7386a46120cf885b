"""Task list filter model for tasksync."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from tasksync.models.task import Priority


class SortKey(str, Enum):
    """Server-side sort order for the task list."""
    NONE = ""
    PRIORITY = "priority"
    DUE_DATE = "due_date"
    ETA = "eta"


class FilterState(BaseModel):
    """Search/sort/filter inputs driving GET /tasks.

    ``due_within_days`` uses None for "no filter" so that 0 ("due today")
    stays a real filter value.
    """

    search: str = Field("", description="Free-text search")
    sort: SortKey = Field(SortKey.NONE, description="Sort key ('' for server default)")
    priorities: List[Priority] = Field(default_factory=list, description="Selected priorities")
    due_within_days: Optional[int] = Field(None, ge=0, description="Only tasks due within N days")

    @field_validator("priorities")
    @classmethod
    def _dedupe_priorities(cls, v):
        # Set semantics, but keep the order the user picked them in
        seen = set()
        out: List[Priority] = []
        for priority in v:
            if priority not in seen:
                seen.add(priority)
                out.append(priority)
        return out

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True
