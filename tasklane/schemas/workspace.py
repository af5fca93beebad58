"""Workspace, membership and invitation schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr

from tasklane.schemas.auth import UserSummary


class WorkspaceMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    role: str
    user: UserSummary
    created_at: datetime


class WorkspaceRead(BaseModel):
    id: int
    name: str
    user_id: int | None
    is_owner: bool
    members: list[WorkspaceMemberRead]
    created_at: datetime
    updated_at: datetime


class WorkspaceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class WorkspaceListResponse(BaseModel):
    workspaces: list[WorkspaceSummary]


class WorkspaceMemberListResponse(BaseModel):
    members: list[WorkspaceMemberRead]


class InviteMemberRequest(BaseModel):
    email: EmailStr


class InvitationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    workspace: WorkspaceSummary
    inviter: UserSummary | None
    status: str
    created_at: datetime


class InvitationListResponse(BaseModel):
    invitations: list[InvitationRead]
