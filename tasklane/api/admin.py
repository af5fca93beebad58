"""Admin user-management API routes (role ADMIN only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_admin_identity
from tasklane.schemas.admin import (
    AdminUserCreate,
    AdminUserCreateResponse,
    AdminUserListResponse,
    AdminUserRead,
    AdminUserUpdate,
)
from tasklane.services import admin_service
from tasklane.services.access import Identity

router = APIRouter()


@router.get("/users", response_model=AdminUserListResponse)
def api_list_users(
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> AdminUserListResponse:
    return AdminUserListResponse(users=admin_service.list_users(db, identity))


@router.post(
    "/users",
    response_model=AdminUserCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def api_create_user(
    body: AdminUserCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> AdminUserCreateResponse:
    """Create a user with its own workspace.

    When no password is supplied, or ``send_invitation`` is set, a temporary
    password is generated and returned once in the response.
    """
    user, temporary_password = admin_service.create_user(db, identity, body)
    message = "User created successfully"
    if temporary_password is not None:
        message = "User created successfully. Temporary password generated."
    return AdminUserCreateResponse(
        user=admin_service.user_to_admin_read(user),
        message=message,
        temporary_password=temporary_password,
    )


@router.patch("/users/{user_id}", response_model=AdminUserRead)
def api_update_user(
    user_id: int,
    body: AdminUserUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> AdminUserRead:
    user = admin_service.update_user(db, identity, user_id, body)
    return admin_service.user_to_admin_read(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def api_delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin_identity),
) -> None:
    admin_service.delete_user(db, identity, user_id)
