"""Workspace access control.

Every read goes through one three-tier rule, shared by workspaces, projects
and tasks. A caller may see a resource when they own its workspace, own the
resource itself, or are a member of its workspace. Writes are narrower and
have their own ``require_*`` checks below.

Lookups never distinguish "does not exist" from "exists but not visible":
both raise NotFoundError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

from sqlalchemy import select
from sqlalchemy.orm import Session

from tasklane.models.project import Project, ProjectMember
from tasklane.models.task import Task
from tasklane.models.user import User, UserRole
from tasklane.models.workspace import Workspace
from tasklane.models.workspace_member import WorkspaceMember
from tasklane.services.errors import AccessDeniedError, NotFoundError, UnauthenticatedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Verified caller identity, resolved once per request."""

    user_id: int
    role: str = UserRole.USER.value
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @classmethod
    def from_user(cls, user: User) -> Identity:
        return cls(user_id=user.id, role=user.role, name=user.name or "")


class AccessLevel(IntEnum):
    """Effective relation of a caller to a resource, weakest first."""

    NONE = 0
    MEMBER = 1
    RESOURCE_OWNER = 2
    WORKSPACE_OWNER = 3


def resolve_access_level(
    user_id: int,
    workspace_owner_id: int | None,
    resource_owner_id: int | None = None,
    is_member: bool = False,
) -> AccessLevel:
    """Return the strongest relation that holds; pure, no database access."""
    if workspace_owner_id is not None and workspace_owner_id == user_id:
        return AccessLevel.WORKSPACE_OWNER
    if resource_owner_id is not None and resource_owner_id == user_id:
        return AccessLevel.RESOURCE_OWNER
    if is_member:
        return AccessLevel.MEMBER
    return AccessLevel.NONE


def require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise UnauthenticatedError()
    return identity


# ── Membership queries ───────────────────────────────────────────────


def is_workspace_member(db: Session, workspace_id: int, user_id: int) -> bool:
    """Return True if a WorkspaceMember row exists for (workspace_id, user_id)."""
    return (
        db.query(WorkspaceMember.id)
        .filter(
            WorkspaceMember.workspace_id == workspace_id,
            WorkspaceMember.user_id == user_id,
        )
        .first()
        is not None
    )


def accessible_workspace_ids(db: Session, identity: Identity) -> list[int]:
    """Ids of workspaces the caller owns or is a member of.

    Listing queries filter by this set; callers must treat an empty list as
    "no results" and never fall back to an unfiltered query.
    """
    owned = select(Workspace.id).where(Workspace.user_id == identity.user_id)
    joined = select(WorkspaceMember.workspace_id).where(
        WorkspaceMember.user_id == identity.user_id
    )
    ids = db.execute(owned.union(joined)).scalars().all()
    return sorted(set(ids))


def has_project_grant(db: Session, project_id: int, user_id: int) -> bool:
    return (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
        .first()
        is not None
    )


# ── Access levels per resource ───────────────────────────────────────


def workspace_access(db: Session, identity: Identity, workspace: Workspace) -> AccessLevel:
    return resolve_access_level(
        identity.user_id,
        workspace.user_id,
        is_member=is_workspace_member(db, workspace.id, identity.user_id),
    )


def project_access(db: Session, identity: Identity, project: Project) -> AccessLevel:
    """Three-tier rule plus explicit ProjectMember grants (read only)."""
    level = resolve_access_level(
        identity.user_id,
        project.workspace.user_id,
        resource_owner_id=project.user_id,
        is_member=is_workspace_member(db, project.workspace_id, identity.user_id),
    )
    if level == AccessLevel.NONE and has_project_grant(db, project.id, identity.user_id):
        return AccessLevel.MEMBER
    return level


def task_access(db: Session, identity: Identity, task: Task) -> AccessLevel:
    return resolve_access_level(
        identity.user_id,
        task.workspace.user_id,
        resource_owner_id=task.user_id,
        is_member=is_workspace_member(db, task.workspace_id, identity.user_id),
    )


def can_access_workspace(db: Session, identity: Identity, workspace: Workspace) -> bool:
    return workspace_access(db, identity, workspace) > AccessLevel.NONE


def can_access_project(db: Session, identity: Identity, project: Project) -> bool:
    return project_access(db, identity, project) > AccessLevel.NONE


def can_access_task(db: Session, identity: Identity, task: Task) -> bool:
    return task_access(db, identity, task) > AccessLevel.NONE


# ── Visible lookups (404 for absent or hidden) ──────────────────────


def get_visible_workspace(db: Session, identity: Identity, workspace_id: int) -> Workspace:
    workspace = db.get(Workspace, workspace_id)
    if workspace is None or not can_access_workspace(db, identity, workspace):
        raise NotFoundError("Workspace not found")
    return workspace


def get_visible_project(db: Session, identity: Identity, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if project is None or not can_access_project(db, identity, project):
        raise NotFoundError("Project not found")
    return project


def get_visible_task(db: Session, identity: Identity, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None or not can_access_task(db, identity, task):
        raise NotFoundError("Task not found")
    return task


# ── Write narrowing ──────────────────────────────────────────────────


def is_workspace_owner(identity: Identity, workspace: Workspace) -> bool:
    return workspace.user_id is not None and workspace.user_id == identity.user_id


def require_workspace_owner(identity: Identity, workspace: Workspace, action: str) -> None:
    if not is_workspace_owner(identity, workspace):
        logger.warning(
            "access_denied: user_id=%s workspace_id=%s action=%s",
            identity.user_id,
            workspace.id,
            action,
        )
        raise AccessDeniedError(f"Only the workspace owner can {action}")


def require_project_owner(identity: Identity, project: Project, action: str) -> None:
    """Project edit, delete and grant management belong to the project owner alone."""
    if project.user_id != identity.user_id:
        logger.warning(
            "access_denied: user_id=%s project_id=%s action=%s",
            identity.user_id,
            project.id,
            action,
        )
        raise AccessDeniedError(f"Only the project owner can {action}")


def require_task_delete(identity: Identity, task: Task) -> None:
    """Task owner or workspace owner; membership alone is not enough."""
    if task.user_id == identity.user_id or is_workspace_owner(identity, task.workspace):
        return
    logger.warning(
        "access_denied: user_id=%s task_id=%s action=delete", identity.user_id, task.id
    )
    raise AccessDeniedError("Only the task owner or workspace owner can delete this task")


def can_assign_responsible(
    identity: Identity,
    workspace_owner_id: int | None,
    requested_name: str | None,
    current_responsible_id: int | None,
) -> bool:
    """Decide whether the caller may set ``responsible`` to ``requested_name``.

    The workspace owner may assign anyone. Everyone else may assign only
    themselves, or clear the field when they are the current responsible.
    """
    if workspace_owner_id is not None and workspace_owner_id == identity.user_id:
        return True
    if requested_name is None:
        return current_responsible_id is None or current_responsible_id == identity.user_id
    own_name = identity.name.strip()
    return bool(own_name) and requested_name.strip() == own_name


def require_responsible_assignment(
    identity: Identity,
    workspace: Workspace,
    requested_name: str | None,
    current_responsible_id: int | None = None,
) -> None:
    if not can_assign_responsible(
        identity, workspace.user_id, requested_name, current_responsible_id
    ):
        logger.warning(
            "access_denied: user_id=%s workspace_id=%s action=assign_responsible",
            identity.user_id,
            workspace.id,
        )
        raise AccessDeniedError(
            "Only the workspace owner can assign a responsible person, "
            "or you can assign yourself"
        )


def require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise AccessDeniedError("Admin access required")
