"""Task and subtask data models for tasksync."""

from datetime import date
from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field, field_validator


TaskId = Union[int, str]


class Priority(str, Enum):
    """Task priority enumeration."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def same_id(left: Optional[TaskId], right: Optional[TaskId]) -> bool:
    """Compare two ids the way the server does (1 and "1" are the same task)."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


class Task(BaseModel):
    """Snapshot of a server-side task.

    Never mutated locally; a fresh copy arrives with every task list reload.
    """

    id: TaskId = Field(..., description="Server-assigned task identifier")
    title: str = Field("", description="Task title")
    description: Optional[str] = Field(None, description="Free-form task description")
    priority: Priority = Field(Priority.MEDIUM, description="Task priority")
    due_date: Optional[date] = Field(None, description="Due date (date-only)")
    eta: Optional[float] = Field(None, ge=0.0, description="Estimated effort in hours")
    completed: bool = Field(False, description="Whether the task is done")

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, v: Any):
        return "" if v is None else v

    @field_validator("priority", mode="before")
    @classmethod
    def _null_priority(cls, v: Any):
        # Older tasks may carry no priority at all
        return Priority.MEDIUM if v is None or v == "" else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_part_only(cls, v: Any):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            # "2024-05-01T00:00:00Z" -> "2024-05-01"
            if len(v) > 10:
                return v[:10]
        return v

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        extra = "allow"
        frozen = True


class Subtask(BaseModel):
    """Checklist item belonging to exactly one task."""

    id: TaskId = Field(..., description="Server-assigned subtask identifier")
    title: str = Field("", description="Subtask title")
    completed: bool = Field(False, description="Whether the subtask is done")

    @field_validator("title", mode="before")
    @classmethod
    def _null_title(cls, v: Any):
        return "" if v is None else v

    class Config:
        """Pydantic configuration."""
        extra = "allow"
        frozen = True
