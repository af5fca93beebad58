"""Comment service: task comments with @mention notifications."""

from __future__ import annotations

import logging
import re

from sqlalchemy.orm import Session, joinedload

from tasklane.models.activity import ActivityType
from tasklane.models.comment import Comment
from tasklane.models.notification import Notification, NotificationType
from tasklane.models.task import Task
from tasklane.models.user import User
from tasklane.services.access import Identity, get_visible_task
from tasklane.services.task_service import record_activity
from tasklane.services.workspace_service import workspace_participants

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")


def parse_mentions(content: str) -> list[str]:
    """Return the distinct ``@token`` names in order of first appearance."""
    seen: dict[str, None] = {}
    for token in MENTION_PATTERN.findall(content):
        seen.setdefault(token.lower(), None)
    return list(seen)


def resolve_mentions(db: Session, task: Task, tokens: list[str]) -> list[User]:
    """Match tokens against workspace participants by name or email local part."""
    if not tokens:
        return []
    wanted = set(tokens)
    matched = []
    for user in workspace_participants(db, task.workspace):
        local_part = user.email.split("@", 1)[0].lower()
        if (user.name or "").lower() in wanted or local_part in wanted:
            matched.append(user)
    return matched


def list_comments(db: Session, identity: Identity, task_id: int) -> list[Comment]:
    task = get_visible_task(db, identity, task_id)
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.task_id == task.id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def create_comment(db: Session, identity: Identity, task_id: int, content: str) -> Comment:
    """Add a comment, its activity row and one MENTION notification per mentioned user.

    All rows commit together. The author is never notified about their own mention.
    """
    task = get_visible_task(db, identity, task_id)
    mentioned = resolve_mentions(db, task, parse_mentions(content))
    author = db.get(User, identity.user_id)
    author_label = (author.name or author.email) if author else identity.name

    comment = Comment(
        task_id=task.id,
        user_id=identity.user_id,
        content=content.strip(),
        mentions=[u.id for u in mentioned],
    )
    try:
        db.add(comment)
        db.flush()
        record_activity(
            db,
            identity,
            task.workspace_id,
            ActivityType.COMMENT_ADDED,
            f"{author_label} added a comment",
            task_id=task.id,
            project_id=task.project_id,
            details={"comment_id": comment.id},
        )
        for user in mentioned:
            if user.id == identity.user_id:
                continue
            db.add(
                Notification(
                    user_id=user.id,
                    type=NotificationType.MENTION.value,
                    title="You were mentioned in a comment",
                    message=f'{author_label} mentioned you in a comment on task "{task.title}"',
                    link=f"/app/project/{task.project_id or 'inbox'}?task={task.id}",
                )
            )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(comment)
    logger.info(
        "comment_added: comment_id=%s task_id=%s mentions=%s",
        comment.id,
        task.id,
        len(comment.mentions),
    )
    return comment
