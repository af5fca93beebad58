"""Admin service: user management and the admin's team roster.

Every function expects the caller to be an ADMIN; routers enforce that with
the ``require_admin_identity`` dependency and the functions re-check it.
"""

from __future__ import annotations

import logging
import secrets
import string

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from tasklane.models.project import Project
from tasklane.models.task import Task
from tasklane.models.team_member import TeamMember
from tasklane.models.user import User, UserRole
from tasklane.schemas.admin import AdminUserCreate, AdminUserRead, AdminUserUpdate
from tasklane.services.access import Identity, require_admin
from tasklane.services.auth import create_user_with_workspace, normalize_email, validate_password
from tasklane.services.errors import ConflictError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"
GENERATED_PASSWORD_LENGTH = 12


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def _counts(db: Session, column, user_ids: list[int]) -> dict[int, int]:
    if not user_ids:
        return {}
    rows = db.query(column, func.count()).filter(column.in_(user_ids)).group_by(column).all()
    return {user_id: count for user_id, count in rows}


def user_to_admin_read(
    user: User, task_count: int = 0, project_count: int = 0
) -> AdminUserRead:
    return AdminUserRead(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=user.created_at,
        updated_at=user.updated_at,
        task_count=task_count,
        project_count=project_count,
    )


def list_users(db: Session, identity: Identity) -> list[AdminUserRead]:
    """All users, newest first, with the number of tasks and projects they own."""
    require_admin(identity)
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    ids = [u.id for u in users]
    tasks = _counts(db, Task.user_id, ids)
    projects = _counts(db, Project.user_id, ids)
    return [user_to_admin_read(u, tasks.get(u.id, 0), projects.get(u.id, 0)) for u in users]


def create_user(
    db: Session, identity: Identity, data: AdminUserCreate
) -> tuple[User, str | None]:
    """Create a USER with its own workspace.

    A random password is generated when none is given or when an invitation
    is requested; it is returned so the admin can pass it on. Returns
    ``(user, temporary_password)``.
    """
    require_admin(identity)
    password = data.password
    generated = None
    if not password or data.send_invitation:
        password = generated = generate_password()
    email = normalize_email(str(data.email))
    name = email.split("@", 1)[0]
    user = create_user_with_workspace(db, email, name, password, role=UserRole.USER)
    logger.info("admin_user_created: admin_id=%s user_id=%s", identity.user_id, user.id)
    return user, generated


def update_user(db: Session, identity: Identity, user_id: int, data: AdminUserUpdate) -> User:
    require_admin(identity)
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    fields = data.model_fields_set

    if "email" in fields and data.email is not None:
        email = normalize_email(str(data.email))
        taken = db.query(User.id).filter(User.email == email, User.id != user.id).first()
        if taken is not None:
            raise ConflictError("Email already in use")
        user.email = email
    if "password" in fields and data.password is not None:
        validate_password(data.password)
        user.set_password(data.password)
    if "role" in fields and data.role is not None:
        user.role = data.role.value

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already in use") from None
    db.refresh(user)
    logger.info(
        "admin_user_updated: admin_id=%s user_id=%s fields=%s",
        identity.user_id,
        user.id,
        ",".join(sorted(fields)),
    )
    return user


def delete_user(db: Session, identity: Identity, user_id: int) -> None:
    """Delete a user; the database cascades their workspace and content."""
    require_admin(identity)
    if user_id == identity.user_id:
        raise ValidationFailedError("Cannot delete your own account")
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    db.delete(user)
    db.commit()
    logger.info("admin_user_deleted: admin_id=%s user_id=%s", identity.user_id, user_id)


# ── Team roster ──────────────────────────────────────────────────────


def list_team(db: Session, identity: Identity) -> list[TeamMember]:
    require_admin(identity)
    return (
        db.query(TeamMember)
        .options(joinedload(TeamMember.user))
        .filter(TeamMember.admin_id == identity.user_id)
        .order_by(TeamMember.created_at.desc(), TeamMember.id.desc())
        .all()
    )


def add_team_member(db: Session, identity: Identity, email: str) -> TeamMember:
    require_admin(identity)
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise NotFoundError("User with this email does not exist")
    if user.id == identity.user_id:
        raise ValidationFailedError("Cannot add yourself as a team member")
    existing = (
        db.query(TeamMember.id)
        .filter(TeamMember.admin_id == identity.user_id, TeamMember.user_id == user.id)
        .first()
    )
    if existing is not None:
        raise ConflictError("User is already a team member")

    member = TeamMember(admin_id=identity.user_id, user_id=user.id)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User is already a team member") from None
    db.refresh(member)
    logger.info("team_member_added: admin_id=%s user_id=%s", identity.user_id, user.id)
    return member


def remove_team_member(db: Session, identity: Identity, member_id: int) -> None:
    require_admin(identity)
    member = db.get(TeamMember, member_id)
    if member is None or member.admin_id != identity.user_id:
        raise NotFoundError("Team member not found")
    db.delete(member)
    db.commit()
    logger.info("team_member_removed: admin_id=%s member_id=%s", identity.user_id, member_id)


def ensure_admin(db: Session, email: str, name: str, password: str) -> tuple[User, bool]:
    """Create an ADMIN (with workspace) or promote and re-password an existing user.

    Returns ``(user, created)``.
    """
    validate_password(password)
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        user = create_user_with_workspace(
            db, email, name, password, role=UserRole.ADMIN, workspace_name="Admin Workspace"
        )
        return user, True
    user.role = UserRole.ADMIN.value
    user.set_password(password)
    db.commit()
    db.refresh(user)
    logger.info("admin_promoted: user_id=%s", user.id)
    return user, False
