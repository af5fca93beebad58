"""Activity feed API route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.notification import ActivityListResponse, ActivityRead
from tasklane.services import activity_service
from tasklane.services.access import Identity

router = APIRouter()


@router.get("", response_model=ActivityListResponse)
def api_list_activity(
    workspace_id: int | None = Query(None, gt=0),
    task_id: int | None = Query(None, gt=0),
    project_id: int | None = Query(None, gt=0),
    limit: int | None = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ActivityListResponse:
    activities = activity_service.list_activities(
        db,
        identity,
        workspace_id=workspace_id,
        task_id=task_id,
        project_id=project_id,
        limit=limit,
    )
    return ActivityListResponse(activities=[ActivityRead.model_validate(a) for a in activities])
