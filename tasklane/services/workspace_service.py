"""Workspace service: membership, invitations, and the caller's primary workspace."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasklane.models.user import User
from tasklane.models.workspace import Workspace
from tasklane.models.workspace_invitation import InvitationStatus, WorkspaceInvitation
from tasklane.models.workspace_member import MemberRole, WorkspaceMember
from tasklane.services.access import (
    Identity,
    accessible_workspace_ids,
    can_access_workspace,
    require_workspace_owner,
)
from tasklane.services.auth import normalize_email
from tasklane.services.errors import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)


def get_owned_workspace(db: Session, identity: Identity) -> Workspace | None:
    return (
        db.query(Workspace)
        .filter(Workspace.user_id == identity.user_id)
        .order_by(Workspace.id.asc())
        .first()
    )


def get_primary_workspace(db: Session, identity: Identity) -> Workspace:
    """Owned workspace first, otherwise the earliest membership.

    Raises NotFoundError when the caller has neither.
    """
    workspace = get_owned_workspace(db, identity)
    if workspace is not None:
        return workspace
    membership = (
        db.query(WorkspaceMember)
        .filter(WorkspaceMember.user_id == identity.user_id)
        .order_by(WorkspaceMember.created_at.asc(), WorkspaceMember.id.asc())
        .first()
    )
    if membership is None:
        raise NotFoundError("Workspace not found")
    return membership.workspace


def list_accessible_workspaces(db: Session, identity: Identity) -> list[Workspace]:
    ids = accessible_workspace_ids(db, identity)
    if not ids:
        return []
    return db.query(Workspace).filter(Workspace.id.in_(ids)).order_by(Workspace.id.asc()).all()


def list_members(db: Session, identity: Identity) -> list[WorkspaceMember]:
    """Members (not the owner) of the caller's primary workspace, oldest first."""
    workspace = get_primary_workspace(db, identity)
    return (
        db.query(WorkspaceMember)
        .filter(WorkspaceMember.workspace_id == workspace.id)
        .order_by(WorkspaceMember.created_at.asc(), WorkspaceMember.id.asc())
        .all()
    )


def invite_member(db: Session, identity: Identity, email: str) -> WorkspaceInvitation:
    """Invite a registered user into the caller's owned workspace.

    A previous invitation for the same pair is reset to PENDING (re-inviting
    a user who denied). Raises AccessDeniedError if the caller owns no
    workspace, NotFoundError for an unknown email, ValidationFailedError for a
    self-invite and ConflictError if the user is already a member or already
    has a pending invitation.
    """
    workspace = get_owned_workspace(db, identity)
    if workspace is None:
        raise AccessDeniedError("Only the workspace owner can invite members")

    invitee = db.query(User).filter(User.email == normalize_email(email)).first()
    if invitee is None:
        raise NotFoundError("User with this email not found")
    if invitee.id == identity.user_id:
        raise ValidationFailedError("Cannot invite yourself")

    existing_member = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == workspace.id,
            WorkspaceMember.user_id == invitee.id,
        )
        .first()
    )
    if existing_member is not None:
        raise ConflictError("User is already a workspace member")

    invitation = (
        db.query(WorkspaceInvitation)
        .filter(
            WorkspaceInvitation.workspace_id == workspace.id,
            WorkspaceInvitation.user_id == invitee.id,
        )
        .first()
    )
    if invitation is not None and invitation.status == InvitationStatus.PENDING.value:
        raise ConflictError("Invitation already sent")

    if invitation is None:
        invitation = WorkspaceInvitation(
            workspace_id=workspace.id,
            user_id=invitee.id,
            invited_by=identity.user_id,
            status=InvitationStatus.PENDING.value,
        )
        db.add(invitation)
    else:
        invitation.status = InvitationStatus.PENDING.value
        invitation.invited_by = identity.user_id
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Invitation already sent") from None
    db.refresh(invitation)
    logger.info(
        "invitation_sent: invitation_id=%s workspace_id=%s user_id=%s",
        invitation.id,
        workspace.id,
        invitee.id,
    )
    return invitation


def list_pending_invitations(db: Session, identity: Identity) -> list[WorkspaceInvitation]:
    return (
        db.query(WorkspaceInvitation)
        .filter(
            WorkspaceInvitation.user_id == identity.user_id,
            WorkspaceInvitation.status == InvitationStatus.PENDING.value,
        )
        .order_by(WorkspaceInvitation.created_at.desc(), WorkspaceInvitation.id.desc())
        .all()
    )


def _get_own_invitation(db: Session, identity: Identity, invitation_id: int) -> WorkspaceInvitation:
    invitation = db.get(WorkspaceInvitation, invitation_id)
    if invitation is None or invitation.user_id != identity.user_id:
        raise NotFoundError("Invitation not found")
    return invitation


def accept_invitation(db: Session, identity: Identity, invitation_id: int) -> WorkspaceMember:
    """Accept a pending invitation and create the membership atomically.

    If the membership already exists only the invitation status changes.
    Raises NotFoundError for an unknown (or someone else's) invitation and
    ConflictError if it was already accepted or denied.
    """
    invitation = _get_own_invitation(db, identity, invitation_id)
    if invitation.status != InvitationStatus.PENDING.value:
        raise ConflictError("Invitation already processed")

    member = (
        db.query(WorkspaceMember)
        .filter(
            WorkspaceMember.workspace_id == invitation.workspace_id,
            WorkspaceMember.user_id == invitation.user_id,
        )
        .first()
    )
    try:
        invitation.status = InvitationStatus.ACCEPTED.value
        if member is None:
            member = WorkspaceMember(
                workspace_id=invitation.workspace_id,
                user_id=invitation.user_id,
                role=MemberRole.MEMBER.value,
                invited_by=invitation.invited_by,
            )
            db.add(member)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User is already a workspace member") from None
    except Exception:
        db.rollback()
        raise
    db.refresh(member)
    logger.info(
        "invitation_accepted: invitation_id=%s workspace_id=%s user_id=%s",
        invitation.id,
        invitation.workspace_id,
        invitation.user_id,
    )
    return member


def deny_invitation(db: Session, identity: Identity, invitation_id: int) -> WorkspaceInvitation:
    invitation = _get_own_invitation(db, identity, invitation_id)
    if invitation.status != InvitationStatus.PENDING.value:
        raise ConflictError("Invitation already processed")
    invitation.status = InvitationStatus.DENIED.value
    db.commit()
    db.refresh(invitation)
    logger.info("invitation_denied: invitation_id=%s", invitation.id)
    return invitation


def remove_member(db: Session, identity: Identity, member_id: int) -> None:
    """Remove a membership row. Only the workspace owner may do this."""
    member = db.get(WorkspaceMember, member_id)
    if member is None or not can_access_workspace(db, identity, member.workspace):
        raise NotFoundError("Member not found")
    require_workspace_owner(identity, member.workspace, "remove members")
    workspace_id = member.workspace_id
    db.delete(member)
    db.commit()
    logger.info("member_removed: member_id=%s workspace_id=%s", member_id, workspace_id)


def workspace_participants(db: Session, workspace: Workspace) -> list[User]:
    """The workspace owner followed by every member."""
    users: list[User] = []
    if workspace.user_id is not None:
        owner = db.get(User, workspace.user_id)
        if owner is not None:
            users.append(owner)
    members = (
        db.query(User)
        .join(WorkspaceMember, WorkspaceMember.user_id == User.id)
        .filter(WorkspaceMember.workspace_id == workspace.id)
        .order_by(WorkspaceMember.created_at.asc())
        .all()
    )
    users.extend(u for u in members if u.id != workspace.user_id)
    return users


def backfill_owned_workspaces(db: Session) -> int:
    """Give every user without an owned workspace one of their own.

    Users that already own a workspace but lost the ``workspace_id`` link are
    relinked instead. Returns the number of users changed.
    """
    changed = 0
    for user in db.query(User).filter(User.workspace_id.is_(None)).order_by(User.id).all():
        owned = (
            db.query(Workspace)
            .filter(Workspace.user_id == user.id)
            .order_by(Workspace.id.asc())
            .first()
        )
        if owned is None:
            owned = Workspace(name=f"{user.name}'s Workspace", user_id=user.id)
            db.add(owned)
            db.flush()
            logger.info("workspace_backfilled: user_id=%s workspace_id=%s", user.id, owned.id)
        else:
            logger.info("workspace_relinked: user_id=%s workspace_id=%s", user.id, owned.id)
        user.workspace_id = owned.id
        changed += 1
    db.commit()
    return changed
