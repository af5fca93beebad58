"""Task schemas."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from tasklane.models.task import MAX_PRIORITY, MIN_PRIORITY
from tasklane.services.task_lifecycle import PresentedStatus


class TaskView(str, Enum):
    TODAY = "today"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    notes: str | None = None
    due_at: datetime | None = None
    priority: int = Field(0, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    project_id: int | None = Field(None, gt=0)
    workspace_id: int | None = Field(None, gt=0)
    responsible: str | None = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class TaskUpdate(BaseModel):
    """Partial update. Absent fields are untouched; explicit null clears."""

    title: str | None = Field(None, min_length=1, max_length=120)
    notes: str | None = None
    due_at: datetime | None = None
    priority: int | None = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    project_id: int | None = Field(None, gt=0)
    status: PresentedStatus | None = None
    responsible: str | None = Field(None, max_length=100)

    @field_validator("title")
    @classmethod
    def _strip_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v


class TaskProjectSummary(BaseModel):
    id: int
    user_id: int
    name: str
    color: str | None


class TaskRead(BaseModel):
    """Task as returned to clients.

    ``status`` uses the Kanban vocabulary; ``persisted_status`` is the stored value.
    """

    id: int
    user_id: int
    workspace_id: int
    project_id: int | None
    title: str
    notes: str | None
    due_at: datetime | None
    priority: int
    status: PresentedStatus
    persisted_status: str
    completed_at: datetime | None
    responsible: str | None
    responsible_id: int | None
    created_at: datetime
    updated_at: datetime
    project: TaskProjectSummary | None = None


class TaskListResponse(BaseModel):
    tasks: list[TaskRead]


class TaskResponse(BaseModel):
    task: TaskRead


class TaskFilters(BaseModel):
    """Query filters for task listing."""

    status: PresentedStatus | None = None
    project_id: int | None = None
    view: TaskView | None = None
    search: str | None = None
    priority: int | None = Field(None, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    responsible: str | None = None
    date_from: date | None = None
    date_to: date | None = None


class BoardResponse(BaseModel):
    project_id: int
    lanes: dict[str, list[TaskRead]]
