"""Workspace, membership and invitation API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.workspace import (
    InvitationListResponse,
    InvitationRead,
    InviteMemberRequest,
    WorkspaceListResponse,
    WorkspaceMemberListResponse,
    WorkspaceMemberRead,
    WorkspaceRead,
    WorkspaceSummary,
)
from tasklane.services import workspace_service
from tasklane.services.access import Identity, is_workspace_owner

router = APIRouter()


@router.get("", response_model=WorkspaceRead)
def api_get_workspace(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> WorkspaceRead:
    """Primary workspace: the one the caller owns, else their first membership."""
    workspace = workspace_service.get_primary_workspace(db, identity)
    return WorkspaceRead(
        id=workspace.id,
        name=workspace.name,
        user_id=workspace.user_id,
        is_owner=is_workspace_owner(identity, workspace),
        members=[WorkspaceMemberRead.model_validate(m) for m in workspace.members],
        created_at=workspace.created_at,
        updated_at=workspace.updated_at,
    )


@router.get("/all", response_model=WorkspaceListResponse)
def api_list_workspaces(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> WorkspaceListResponse:
    workspaces = workspace_service.list_accessible_workspaces(db, identity)
    return WorkspaceListResponse(
        workspaces=[WorkspaceSummary.model_validate(w) for w in workspaces]
    )


@router.get("/members", response_model=WorkspaceMemberListResponse)
def api_list_members(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> WorkspaceMemberListResponse:
    members = workspace_service.list_members(db, identity)
    return WorkspaceMemberListResponse(
        members=[WorkspaceMemberRead.model_validate(m) for m in members]
    )


@router.post("/members", response_model=InvitationRead, status_code=status.HTTP_201_CREATED)
def api_invite_member(
    body: InviteMemberRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> InvitationRead:
    """Invite a registered user (by email) into the caller's workspace."""
    invitation = workspace_service.invite_member(db, identity, str(body.email))
    return InvitationRead.model_validate(invitation)


@router.delete("/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_remove_member(
    member_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> None:
    workspace_service.remove_member(db, identity, member_id)


@router.get("/invitations", response_model=InvitationListResponse)
def api_list_invitations(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> InvitationListResponse:
    """Pending invitations addressed to the caller."""
    invitations = workspace_service.list_pending_invitations(db, identity)
    return InvitationListResponse(
        invitations=[InvitationRead.model_validate(i) for i in invitations]
    )


@router.post("/invitations/{invitation_id}", response_model=WorkspaceMemberRead)
def api_accept_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> WorkspaceMemberRead:
    member = workspace_service.accept_invitation(db, identity, invitation_id)
    return WorkspaceMemberRead.model_validate(member)


@router.delete("/invitations/{invitation_id}", response_model=InvitationRead)
def api_deny_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> InvitationRead:
    invitation = workspace_service.deny_invitation(db, identity, invitation_id)
    return InvitationRead.model_validate(invitation)
