"""Project schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tasklane.schemas.auth import UserSummary
from tasklane.schemas.workspace import WorkspaceSummary

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=60)
    color: str | None = Field(None, pattern=COLOR_PATTERN)


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = Field(None, min_length=1, max_length=60)
    color: str | None = Field(None, pattern=COLOR_PATTERN)


class ProjectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    workspace_id: int
    name: str
    color: str | None
    created_at: datetime
    updated_at: datetime
    task_count: int = 0
    workspace: WorkspaceSummary | None = None


class ProjectListResponse(BaseModel):
    projects: list[ProjectRead]


class ProjectMemberAdd(BaseModel):
    user_id: int = Field(..., gt=0)


class ProjectMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    user: UserSummary
    created_at: datetime


class ProjectMemberListResponse(BaseModel):
    members: list[ProjectMemberRead]
