"""Notification and activity schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tasklane.schemas.auth import UserSummary


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    title: str
    message: str
    link: str | None
    read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]


class NotificationMarkRequest(BaseModel):
    notification_ids: list[int] = Field(..., max_length=500)
    read: bool


class NotificationMarkResponse(BaseModel):
    updated: int


class ActivityTaskSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class ActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    workspace_id: int
    task_id: int | None
    project_id: int | None
    type: str
    description: str
    metadata: dict[str, Any] | None = Field(None, validation_alias="details")
    user: UserSummary
    task: ActivityTaskSummary | None
    created_at: datetime


class ActivityListResponse(BaseModel):
    activities: list[ActivityRead]
