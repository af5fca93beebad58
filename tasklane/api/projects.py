"""Project API routes, including the Kanban board and project grants."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.project import (
    ProjectCreate,
    ProjectListResponse,
    ProjectMemberAdd,
    ProjectMemberListResponse,
    ProjectMemberRead,
    ProjectRead,
    ProjectUpdate,
)
from tasklane.schemas.task import BoardResponse
from tasklane.services import project_service
from tasklane.services.access import Identity
from tasklane.services.task_service import task_to_read

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
def api_list_projects(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectListResponse:
    projects = project_service.list_projects(db, identity)
    counts = project_service.task_counts(db, [p.id for p in projects])
    return ProjectListResponse(
        projects=[project_service.project_to_read(p, counts.get(p.id, 0)) for p in projects]
    )


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def api_create_project(
    body: ProjectCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectRead:
    project = project_service.create_project(db, identity, body)
    return project_service.project_to_read(project)


@router.get("/{project_id}", response_model=ProjectRead)
def api_get_project(
    project_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectRead:
    project = project_service.get_project(db, identity, project_id)
    counts = project_service.task_counts(db, [project.id])
    return project_service.project_to_read(project, counts.get(project.id, 0))


@router.patch("/{project_id}", response_model=ProjectRead)
def api_update_project(
    project_id: int,
    body: ProjectUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectRead:
    project = project_service.update_project(db, identity, project_id, body)
    counts = project_service.task_counts(db, [project.id])
    return project_service.project_to_read(project, counts.get(project.id, 0))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> None:
    project_service.delete_project(db, identity, project_id)


@router.get("/{project_id}/board", response_model=BoardResponse)
def api_project_board(
    project_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> BoardResponse:
    """Project tasks grouped into NOT_STARTED, IN_PROGRESS and FINISHED lanes."""
    lanes = project_service.project_board(db, identity, project_id)
    return BoardResponse(
        project_id=project_id,
        lanes={lane: [task_to_read(t) for t in tasks] for lane, tasks in lanes.items()},
    )


@router.get("/{project_id}/members", response_model=ProjectMemberListResponse)
def api_list_project_members(
    project_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectMemberListResponse:
    members = project_service.list_project_members(db, identity, project_id)
    return ProjectMemberListResponse(
        members=[ProjectMemberRead.model_validate(m) for m in members]
    )


@router.post(
    "/{project_id}/members",
    response_model=ProjectMemberRead,
    status_code=status.HTTP_201_CREATED,
)
def api_add_project_member(
    project_id: int,
    body: ProjectMemberAdd,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> ProjectMemberRead:
    member = project_service.add_project_member(db, identity, project_id, body.user_id)
    return ProjectMemberRead.model_validate(member)


@router.delete("/{project_id}/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_remove_project_member(
    project_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> None:
    project_service.remove_project_member(db, identity, project_id, member_id)
