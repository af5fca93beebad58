"""Task and task-comment API routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.models.task import MAX_PRIORITY, MIN_PRIORITY
from tasklane.schemas.comment import CommentCreate, CommentListResponse, CommentRead
from tasklane.schemas.task import (
    TaskCreate,
    TaskFilters,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    TaskView,
)
from tasklane.services import comment_service, task_service
from tasklane.services.access import Identity
from tasklane.services.task_lifecycle import PresentedStatus

router = APIRouter()


@router.get("", response_model=TaskListResponse)
def api_list_tasks(
    status_filter: PresentedStatus | None = Query(None, alias="status"),
    project_id: int | None = Query(None, gt=0),
    view: TaskView | None = Query(None),
    search: str | None = Query(None, max_length=200),
    priority: int | None = Query(None, ge=MIN_PRIORITY, le=MAX_PRIORITY),
    responsible: str | None = Query(None, max_length=100),
    date_from: date | None = Query(None),
    date_to: date | None = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> TaskListResponse:
    """List tasks in accessible workspaces.

    Ordered by priority (high first), due date (soonest first), then newest.
    ``status`` accepts the Kanban names as well; NOT_STARTED and ACTIVE match
    the same stored tasks.
    """
    filters = TaskFilters(
        status=status_filter,
        project_id=project_id,
        view=view,
        search=search,
        priority=priority,
        responsible=responsible,
        date_from=date_from,
        date_to=date_to,
    )
    tasks = task_service.list_tasks(db, identity, filters)
    return TaskListResponse(tasks=[task_service.task_to_read(t) for t in tasks])


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def api_create_task(
    body: TaskCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> TaskResponse:
    task = task_service.create_task(db, identity, body)
    return TaskResponse(task=task_service.task_to_read(task))


@router.get("/{task_id}", response_model=TaskResponse)
def api_get_task(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> TaskResponse:
    task = task_service.get_task(db, identity, task_id)
    return TaskResponse(task=task_service.task_to_read(task))


@router.patch("/{task_id}", response_model=TaskResponse)
def api_update_task(
    task_id: int,
    body: TaskUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> TaskResponse:
    """Partial update; omitted fields are untouched and null clears a field."""
    task = task_service.update_task(db, identity, task_id, body)
    return TaskResponse(task=task_service.task_to_read(task))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> None:
    task_service.delete_task(db, identity, task_id)


@router.get("/{task_id}/comments", response_model=CommentListResponse)
def api_list_comments(
    task_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> CommentListResponse:
    comments = comment_service.list_comments(db, identity, task_id)
    return CommentListResponse(comments=[CommentRead.model_validate(c) for c in comments])


@router.post(
    "/{task_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def api_create_comment(
    task_id: int,
    body: CommentCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> CommentRead:
    """Add a comment; ``@name`` mentions notify the matching workspace participants."""
    comment = comment_service.create_comment(db, identity, task_id, body.content)
    return CommentRead.model_validate(comment)
