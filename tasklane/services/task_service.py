"""Task service: listing, creation, partial updates and deletion.

Every mutation authorizes through ``tasklane.services.access`` and computes
status changes through ``tasklane.services.task_lifecycle`` before touching
the row, then commits once together with its activity record.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, time, timedelta
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from tasklane.models.activity import Activity, ActivityType
from tasklane.models.project import Project
from tasklane.models.task import Task, TaskStatus
from tasklane.models.user import User
from tasklane.models.workspace import Workspace
from tasklane.schemas.task import TaskCreate, TaskFilters, TaskRead, TaskUpdate, TaskView
from tasklane.services.access import (
    AccessLevel,
    Identity,
    accessible_workspace_ids,
    can_access_project,
    get_visible_project,
    get_visible_task,
    get_visible_workspace,
    require_responsible_assignment,
    require_task_delete,
    workspace_access,
)
from tasklane.services.errors import AccessDeniedError, ConflictError, ValidationFailedError
from tasklane.services.task_lifecycle import (
    LifecycleState,
    apply_status,
    initial_state,
    present_status,
    to_persisted,
)
from tasklane.services.workspace_service import get_primary_workspace, workspace_participants

logger = logging.getLogger(__name__)


def task_to_read(task: Task) -> TaskRead:
    """Format a task for API output with the presented status."""
    project = None
    if task.project is not None:
        project = {
            "id": task.project.id,
            "user_id": task.project.user_id,
            "name": task.project.name,
            "color": task.project.color,
        }
    return TaskRead(
        id=task.id,
        user_id=task.user_id,
        workspace_id=task.workspace_id,
        project_id=task.project_id,
        title=task.title,
        notes=task.notes,
        due_at=task.due_at,
        priority=task.priority,
        status=present_status(task.status, task.completed_at, task.project_id),
        persisted_status=task.status,
        completed_at=task.completed_at,
        responsible=task.responsible_user.name if task.responsible_user else None,
        responsible_id=task.responsible_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
        project=project,
    )


def record_activity(
    db: Session,
    identity: Identity,
    workspace_id: int,
    activity_type: ActivityType,
    description: str,
    task_id: int | None = None,
    project_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> Activity:
    """Stage an activity row in the current transaction; the caller commits."""
    activity = Activity(
        workspace_id=workspace_id,
        task_id=task_id,
        project_id=project_id,
        user_id=identity.user_id,
        type=activity_type.value,
        description=description,
        details=details,
    )
    db.add(activity)
    return activity


# ── Listing ──────────────────────────────────────────────────────────


def _start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.min, tzinfo=UTC)


def list_tasks(
    db: Session,
    identity: Identity,
    filters: TaskFilters,
    now: datetime | None = None,
) -> list[Task]:
    """Tasks in the caller's accessible workspaces matching ``filters``.

    Ordered by priority desc, due date asc, newest first. A caller with no
    accessible workspace gets an empty list. Filtering on a project the caller
    cannot see raises NotFoundError.
    """
    workspace_ids = accessible_workspace_ids(db, identity)
    if not workspace_ids:
        return []

    query = (
        db.query(Task)
        .options(joinedload(Task.project), joinedload(Task.responsible_user))
        .filter(Task.workspace_id.in_(workspace_ids))
    )

    if filters.status is not None:
        query = query.filter(Task.status == to_persisted(filters.status).value)

    if filters.project_id is not None:
        get_visible_project(db, identity, filters.project_id)
        query = query.filter(Task.project_id == filters.project_id)

    if filters.view is not None:
        today = _start_of_day(now or datetime.now(UTC))
        if filters.view == TaskView.TODAY:
            query = query.filter(
                Task.due_at >= today,
                Task.due_at < today + timedelta(days=1),
                Task.status == TaskStatus.ACTIVE.value,
            )
        elif filters.view == TaskView.UPCOMING:
            query = query.filter(Task.due_at > today, Task.status == TaskStatus.ACTIVE.value)
        elif filters.view == TaskView.COMPLETED:
            query = query.filter(Task.status == TaskStatus.COMPLETED.value)

    if filters.search:
        pattern = f"%{filters.search.strip()}%"
        query = query.filter(or_(Task.title.ilike(pattern), Task.notes.ilike(pattern)))

    if filters.priority is not None:
        query = query.filter(Task.priority == filters.priority)

    if filters.responsible:
        query = query.join(User, User.id == Task.responsible_id).filter(
            User.name.ilike(f"%{filters.responsible.strip()}%")
        )

    if filters.date_from is not None:
        query = query.filter(
            Task.due_at >= datetime.combine(filters.date_from, time.min, tzinfo=UTC)
        )
    if filters.date_to is not None:
        query = query.filter(
            Task.due_at <= datetime.combine(filters.date_to, time.max, tzinfo=UTC)
        )

    return query.order_by(
        Task.priority.desc(),
        Task.due_at.asc().nulls_last(),
        Task.created_at.desc(),
        Task.id.desc(),
    ).all()


# ── Responsible resolution ───────────────────────────────────────────


def resolve_responsible(
    db: Session,
    identity: Identity,
    workspace: Workspace,
    name: str | None,
) -> int | None:
    """Turn a responsible name into a participant's user id.

    Authorization has already run. Raises ValidationFailedError if the name
    does not identify exactly one participant of ``workspace``.
    """
    if name is None:
        return None
    name = name.strip()
    if not name:
        return None
    participants = workspace_participants(db, workspace)
    if name == identity.name.strip() and any(u.id == identity.user_id for u in participants):
        return identity.user_id
    matches = [u for u in participants if (u.name or "").strip() == name]
    if len(matches) != 1:
        raise ValidationFailedError(
            f"Responsible person must be exactly one member of the workspace: {name!r}"
        )
    return matches[0].id


# ── Mutations ────────────────────────────────────────────────────────


def _resolve_target_workspace(
    db: Session, identity: Identity, data: TaskCreate
) -> tuple[Workspace, Project | None]:
    if data.project_id is not None:
        project = get_visible_project(db, identity, data.project_id)
        # A project grant is read only; adding tasks needs a workspace relation.
        if (
            project.user_id != identity.user_id
            and workspace_access(db, identity, project.workspace) == AccessLevel.NONE
        ):
            logger.warning(
                "access_denied: user_id=%s project_id=%s action=create_task",
                identity.user_id,
                project.id,
            )
            raise AccessDeniedError("Only workspace participants can add tasks to this project")
        return project.workspace, project
    if data.workspace_id is not None:
        return get_visible_workspace(db, identity, data.workspace_id), None
    return get_primary_workspace(db, identity), None


def create_task(db: Session, identity: Identity, data: TaskCreate) -> Task:
    """Create a task in the project's workspace, the given one, or the primary one.

    New tasks always start ACTIVE with no completion stamp.
    """
    workspace, project = _resolve_target_workspace(db, identity, data)

    responsible_id = None
    if data.responsible is not None:
        require_responsible_assignment(identity, workspace, data.responsible)
        responsible_id = resolve_responsible(db, identity, workspace, data.responsible)

    state = initial_state()
    task = Task(
        workspace_id=workspace.id,
        project_id=project.id if project else None,
        user_id=identity.user_id,
        title=data.title,
        notes=data.notes,
        due_at=data.due_at,
        priority=data.priority,
        status=state.status.value,
        completed_at=state.completed_at,
        responsible_id=responsible_id,
    )
    db.add(task)
    try:
        db.flush()
        record_activity(
            db,
            identity,
            workspace.id,
            ActivityType.TASK_CREATED,
            f'created task "{task.title}"',
            task_id=task.id,
            project_id=task.project_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(task)
    logger.info(
        "task_created: task_id=%s workspace_id=%s project_id=%s",
        task.id,
        task.workspace_id,
        task.project_id,
    )
    return task


def get_task(db: Session, identity: Identity, task_id: int) -> Task:
    return get_visible_task(db, identity, task_id)


def _validate_project_reassignment(
    db: Session, identity: Identity, task: Task, project_id: int | None
) -> None:
    if project_id is None:
        return
    project = db.get(Project, project_id)
    if (
        project is None
        or project.workspace_id != task.workspace_id
        or not can_access_project(db, identity, project)
    ):
        logger.warning(
            "task_reassign_rejected: user_id=%s task_id=%s project_id=%s",
            identity.user_id,
            task.id,
            project_id,
        )
        raise ConflictError("Target project is not available in this workspace")


def update_task(db: Session, identity: Identity, task_id: int, data: TaskUpdate) -> Task:
    """Apply a partial update.

    Only fields present in the request are considered; explicit null clears a
    nullable field. Every check (project reassignment, responsible, status)
    runs before any attribute is written, so a rejected request leaves the
    task untouched.
    """
    task = get_visible_task(db, identity, task_id)
    fields = data.model_fields_set
    changes: dict[str, Any] = {}

    if "title" in fields:
        if data.title is None:
            raise ValidationFailedError("title cannot be null")
        changes["title"] = data.title
    if "notes" in fields:
        changes["notes"] = data.notes
    if "due_at" in fields:
        changes["due_at"] = data.due_at
    if "priority" in fields:
        if data.priority is None:
            raise ValidationFailedError("priority cannot be null")
        changes["priority"] = data.priority

    if "project_id" in fields and data.project_id != task.project_id:
        _validate_project_reassignment(db, identity, task, data.project_id)
        changes["project_id"] = data.project_id

    if "responsible" in fields:
        requested = data.responsible.strip() if data.responsible else None
        require_responsible_assignment(
            identity, task.workspace, requested or None, task.responsible_id
        )
        changes["responsible_id"] = resolve_responsible(db, identity, task.workspace, requested)

    completed_now = False
    if "status" in fields:
        if data.status is None:
            raise ValidationFailedError("status cannot be null")
        current = LifecycleState(status=TaskStatus(task.status), completed_at=task.completed_at)
        nxt = apply_status(current, data.status)
        changes["status"] = nxt.status.value
        changes["completed_at"] = nxt.completed_at
        completed_now = (
            nxt.status == TaskStatus.COMPLETED and current.status != TaskStatus.COMPLETED
        )

    if not changes:
        return task

    try:
        for attr, value in changes.items():
            setattr(task, attr, value)
        activity_type = ActivityType.TASK_COMPLETED if completed_now else ActivityType.TASK_UPDATED
        verb = "completed" if completed_now else "updated"
        record_activity(
            db,
            identity,
            task.workspace_id,
            activity_type,
            f'{verb} task "{task.title}"',
            task_id=task.id,
            project_id=task.project_id,
            details={"fields": sorted(changes)},
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(task)
    logger.info("task_updated: task_id=%s fields=%s", task.id, ",".join(sorted(changes)))
    return task


def delete_task(db: Session, identity: Identity, task_id: int) -> None:
    """Delete a task. Allowed for the task owner or the workspace owner.

    Activity rows keep their history with ``task_id`` cleared.
    """
    task = get_visible_task(db, identity, task_id)
    require_task_delete(identity, task)
    workspace_id = task.workspace_id
    title = task.title
    project_id = task.project_id
    try:
        db.query(Activity).filter(Activity.task_id == task.id).update(
            {Activity.task_id: None}, synchronize_session=False
        )
        record_activity(
            db,
            identity,
            workspace_id,
            ActivityType.TASK_DELETED,
            f'deleted task "{title}"',
            project_id=project_id,
            details={"task_id": task_id},
        )
        db.delete(task)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("task_deleted: task_id=%s workspace_id=%s", task_id, workspace_id)
