"""Admin team roster API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_admin_identity
from tasklane.schemas.admin import TeamMemberAdd, TeamMemberListResponse, TeamMemberRead
from tasklane.services import admin_service
from tasklane.services.access import Identity

router = APIRouter()


@router.get("", response_model=TeamMemberListResponse)
def api_list_team(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> TeamMemberListResponse:
    members = admin_service.list_team(db, identity)
    return TeamMemberListResponse(
        team_members=[TeamMemberRead.model_validate(m) for m in members]
    )


@router.post("", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
def api_add_team_member(
    body: TeamMemberAdd,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> TeamMemberRead:
    member = admin_service.add_team_member(db, identity, str(body.email))
    return TeamMemberRead.model_validate(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_remove_team_member(
    member_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> None:
    admin_service.remove_team_member(db, identity, member_id)
