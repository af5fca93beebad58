"""Admin schemas: user management and team roster."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from tasklane.models.user import UserRole
from tasklane.schemas.auth import UserSummary


class AdminUserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: str
    created_at: datetime
    updated_at: datetime
    task_count: int = 0
    project_count: int = 0


class AdminUserListResponse(BaseModel):
    users: list[AdminUserRead]


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str | None = Field(None, min_length=1)
    send_invitation: bool = False


class AdminUserCreateResponse(BaseModel):
    user: AdminUserRead
    message: str
    temporary_password: str | None = None


class AdminUserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    role: UserRole | None = None


class TeamMemberAdd(BaseModel):
    email: EmailStr


class TeamMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    admin_id: int
    user: UserSummary
    created_at: datetime


class TeamMemberListResponse(BaseModel):
    team_members: list[TeamMemberRead]
