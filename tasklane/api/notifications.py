"""Notification inbox API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tasklane.api.deps import get_db, require_auth
from tasklane.schemas.notification import (
    NotificationListResponse,
    NotificationMarkRequest,
    NotificationMarkResponse,
    NotificationRead,
)
from tasklane.services import notification_service
from tasklane.services.access import Identity

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def api_list_notifications(
    unread_only: bool = Query(False),
    limit: int | None = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> NotificationListResponse:
    notifications = notification_service.list_notifications(
        db, identity, unread_only=unread_only, limit=limit
    )
    return NotificationListResponse(
        notifications=[NotificationRead.model_validate(n) for n in notifications]
    )


@router.patch("", response_model=NotificationMarkResponse)
def api_mark_notifications(
    body: NotificationMarkRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
) -> NotificationMarkResponse:
    """Mark the caller's notifications read or unread."""
    updated = notification_service.mark_notifications(
        db, identity, body.notification_ids, body.read
    )
    return NotificationMarkResponse(updated=updated)
