"""Full-text-ish search over task titles/notes and project names."""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from tasklane.config import get_settings
from tasklane.models.project import Project
from tasklane.models.task import Task
from tasklane.schemas.search import SearchType
from tasklane.services.access import Identity, accessible_workspace_ids


def search(
    db: Session,
    identity: Identity,
    q: str,
    search_type: SearchType = SearchType.ALL,
) -> tuple[list[Task], list[Project]]:
    """Case-insensitive substring match, scoped to accessible workspaces.

    A blank query or a caller without workspaces yields empty results.
    """
    q = (q or "").strip()
    if not q:
        return [], []
    workspace_ids = accessible_workspace_ids(db, identity)
    if not workspace_ids:
        return [], []

    settings = get_settings()
    pattern = f"%{q}%"
    tasks: list[Task] = []
    projects: list[Project] = []

    if search_type in (SearchType.ALL, SearchType.TASKS):
        tasks = (
            db.query(Task)
            .options(joinedload(Task.project), joinedload(Task.responsible_user))
            .filter(
                Task.workspace_id.in_(workspace_ids),
                or_(Task.title.ilike(pattern), Task.notes.ilike(pattern)),
            )
            .order_by(Task.priority.desc(), Task.due_at.asc().nulls_last(), Task.id.desc())
            .limit(settings.search_task_limit)
            .all()
        )

    if search_type in (SearchType.ALL, SearchType.PROJECTS):
        projects = (
            db.query(Project)
            .options(joinedload(Project.workspace))
            .filter(Project.workspace_id.in_(workspace_ids), Project.name.ilike(pattern))
            .order_by(Project.name.asc(), Project.id.asc())
            .limit(settings.search_project_limit)
            .all()
        )

    return tasks, projects
