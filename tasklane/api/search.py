"""Search API route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.search import SearchResponse, SearchType
from tasklane.services import project_service, search_service
from tasklane.services.access import Identity
from tasklane.services.task_service import task_to_read

router = APIRouter()


@router.get("", response_model=SearchResponse)
def api_search(
    q: str = Query("", max_length=200),
    search_type: SearchType = Query(SearchType.ALL, alias="type"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> SearchResponse:
    """Search task titles/notes and project names in accessible workspaces."""
    tasks, projects = search_service.search(db, identity, q, search_type)
    counts = project_service.task_counts(db, [p.id for p in projects])
    return SearchResponse(
        tasks=[task_to_read(t) for t in tasks],
        projects=[project_service.project_to_read(p, counts.get(p.id, 0)) for p in projects],
    )
