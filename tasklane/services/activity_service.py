"""Activity feed across the caller's accessible workspaces."""

from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from tasklane.config import get_settings
from tasklane.models.activity import Activity
from tasklane.services.access import Identity, accessible_workspace_ids
from tasklane.services.errors import NotFoundError


def list_activities(
    db: Session,
    identity: Identity,
    workspace_id: int | None = None,
    task_id: int | None = None,
    project_id: int | None = None,
    limit: int | None = None,
) -> list[Activity]:
    """Newest first. An explicit ``workspace_id`` must be one the caller can see."""
    workspace_ids = accessible_workspace_ids(db, identity)
    if not workspace_ids:
        return []
    if workspace_id is not None:
        if workspace_id not in workspace_ids:
            raise NotFoundError("Workspace not found")
        workspace_ids = [workspace_id]

    query = (
        db.query(Activity)
        .options(joinedload(Activity.user), joinedload(Activity.task))
        .filter(Activity.workspace_id.in_(workspace_ids))
    )
    if task_id is not None:
        query = query.filter(Activity.task_id == task_id)
    if project_id is not None:
        query = query.filter(Activity.project_id == project_id)
    return (
        query.order_by(Activity.created_at.desc(), Activity.id.desc())
        .limit(limit or get_settings().activity_list_limit)
        .all()
    )
