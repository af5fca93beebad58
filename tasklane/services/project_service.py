"""Project service: CRUD, Kanban board and explicit project grants."""

from __future__ import annotations

import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from tasklane.models.activity import Activity
from tasklane.models.project import Project, ProjectMember
from tasklane.models.task import Task
from tasklane.models.team_member import TeamMember
from tasklane.models.user import User
from tasklane.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from tasklane.schemas.workspace import WorkspaceSummary
from tasklane.services.access import (
    Identity,
    accessible_workspace_ids,
    can_access_task,
    get_visible_project,
    require_project_owner,
)
from tasklane.services.errors import (
    AccessDeniedError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from tasklane.services.task_lifecycle import group_by_lane, present_status
from tasklane.services.workspace_service import get_owned_workspace

logger = logging.getLogger(__name__)


def task_counts(db: Session, project_ids: list[int]) -> dict[int, int]:
    if not project_ids:
        return {}
    rows = (
        db.query(Task.project_id, func.count(Task.id))
        .filter(Task.project_id.in_(project_ids))
        .group_by(Task.project_id)
        .all()
    )
    return {project_id: count for project_id, count in rows}


def project_to_read(project: Project, task_count: int = 0) -> ProjectRead:
    return ProjectRead(
        id=project.id,
        user_id=project.user_id,
        workspace_id=project.workspace_id,
        name=project.name,
        color=project.color,
        created_at=project.created_at,
        updated_at=project.updated_at,
        task_count=task_count,
        workspace=WorkspaceSummary.model_validate(project.workspace),
    )


def list_projects(db: Session, identity: Identity) -> list[Project]:
    """Projects in accessible workspaces plus projects shared by explicit grant."""
    workspace_ids = accessible_workspace_ids(db, identity)
    granted = db.query(ProjectMember.project_id).filter(ProjectMember.user_id == identity.user_id)
    conditions = [Project.id.in_(granted)]
    if workspace_ids:
        conditions.append(Project.workspace_id.in_(workspace_ids))
    return (
        db.query(Project)
        .options(joinedload(Project.workspace))
        .filter(or_(*conditions))
        .order_by(Project.created_at.asc(), Project.id.asc())
        .all()
    )


def create_project(db: Session, identity: Identity, data: ProjectCreate) -> Project:
    """Create a project in the workspace the caller owns."""
    workspace = get_owned_workspace(db, identity)
    if workspace is None:
        raise NotFoundError("User workspace not found")
    name = data.name.strip()
    if not name:
        raise ValidationFailedError("Project name must not be blank")
    project = Project(
        workspace_id=workspace.id,
        user_id=identity.user_id,
        name=name,
        color=data.color,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info("project_created: project_id=%s workspace_id=%s", project.id, workspace.id)
    return project


def get_project(db: Session, identity: Identity, project_id: int) -> Project:
    return get_visible_project(db, identity, project_id)


def update_project(
    db: Session, identity: Identity, project_id: int, data: ProjectUpdate
) -> Project:
    project = get_visible_project(db, identity, project_id)
    require_project_owner(identity, project, "edit this project")
    fields = data.model_fields_set
    if "name" in fields:
        name = (data.name or "").strip()
        if not name:
            raise ValidationFailedError("Project name must not be blank")
        project.name = name
    if "color" in fields:
        project.color = data.color
    db.commit()
    db.refresh(project)
    logger.info("project_updated: project_id=%s fields=%s", project.id, ",".join(sorted(fields)))
    return project


def delete_project(db: Session, identity: Identity, project_id: int) -> None:
    """Delete a project and its tasks. Activity rows keep their history."""
    project = get_visible_project(db, identity, project_id)
    require_project_owner(identity, project, "delete this project")
    task_ids = [task_id for (task_id,) in db.query(Task.id).filter(Task.project_id == project.id)]
    try:
        db.query(Activity).filter(Activity.project_id == project.id).update(
            {Activity.project_id: None}, synchronize_session=False
        )
        if task_ids:
            db.query(Activity).filter(Activity.task_id.in_(task_ids)).update(
                {Activity.task_id: None}, synchronize_session=False
            )
        db.delete(project)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("project_deleted: project_id=%s tasks=%s", project_id, len(task_ids))


def project_board(db: Session, identity: Identity, project_id: int) -> dict[str, list[Task]]:
    """Project tasks grouped into the NOT_STARTED / IN_PROGRESS / FINISHED lanes.

    Only tasks the caller could open individually are shown, so a read-only
    project grant yields the caller's own tasks and nothing else.
    """
    project = get_visible_project(db, identity, project_id)
    tasks = (
        db.query(Task)
        .options(joinedload(Task.project), joinedload(Task.responsible_user))
        .filter(Task.project_id == project.id)
        .order_by(Task.priority.desc(), Task.created_at.desc(), Task.id.desc())
        .all()
    )
    visible = [t for t in tasks if can_access_task(db, identity, t)]
    return group_by_lane(
        visible, lambda t: present_status(t.status, t.completed_at, t.project_id)
    )


# ── Project grants ───────────────────────────────────────────────────


def list_project_members(db: Session, identity: Identity, project_id: int) -> list[ProjectMember]:
    project = get_visible_project(db, identity, project_id)
    return (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project.id)
        .order_by(ProjectMember.created_at.asc(), ProjectMember.id.asc())
        .all()
    )


def add_project_member(
    db: Session, identity: Identity, project_id: int, user_id: int
) -> ProjectMember:
    """Grant read access on a project. Admin owners may only add their team."""
    project = get_visible_project(db, identity, project_id)
    require_project_owner(identity, project, "manage project members")

    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    if identity.is_admin:
        on_team = (
            db.query(TeamMember.id)
            .filter(TeamMember.admin_id == identity.user_id, TeamMember.user_id == user_id)
            .first()
        )
        if on_team is None:
            raise AccessDeniedError("User is not in your team")

    existing = (
        db.query(ProjectMember.id)
        .filter(ProjectMember.project_id == project.id, ProjectMember.user_id == user_id)
        .first()
    )
    if existing is not None:
        raise ConflictError("User is already a member")

    member = ProjectMember(project_id=project.id, user_id=user_id)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User is already a member") from None
    db.refresh(member)
    logger.info("project_member_added: project_id=%s user_id=%s", project.id, user_id)
    return member


def remove_project_member(
    db: Session, identity: Identity, project_id: int, member_id: int
) -> None:
    project = get_visible_project(db, identity, project_id)
    require_project_owner(identity, project, "manage project members")
    member = db.get(ProjectMember, member_id)
    if member is None or member.project_id != project.id:
        raise NotFoundError("Member not found")
    db.delete(member)
    db.commit()
    logger.info("project_member_removed: project_id=%s member_id=%s", project.id, member_id)
