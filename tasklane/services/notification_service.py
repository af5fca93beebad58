"""Notification inbox for the calling user."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from tasklane.config import get_settings
from tasklane.models.notification import Notification
from tasklane.services.access import Identity

logger = logging.getLogger(__name__)


def list_notifications(
    db: Session,
    identity: Identity,
    unread_only: bool = False,
    limit: int | None = None,
) -> list[Notification]:
    query = db.query(Notification).filter(Notification.user_id == identity.user_id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    return (
        query.order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit or get_settings().notification_list_limit)
        .all()
    )


def mark_notifications(
    db: Session, identity: Identity, notification_ids: list[int], read: bool
) -> int:
    """Set ``read`` on the caller's own notifications; other ids are ignored.

    Returns the number of rows updated.
    """
    if not notification_ids:
        return 0
    updated = (
        db.query(Notification)
        .filter(
            Notification.id.in_(notification_ids),
            Notification.user_id == identity.user_id,
        )
        .update({Notification.read: read}, synchronize_session=False)
    )
    db.commit()
    logger.info(
        "notifications_marked: user_id=%s read=%s updated=%s", identity.user_id, read, updated
    )
    return updated
