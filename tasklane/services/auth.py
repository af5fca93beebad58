"""Authentication service: registration, credentials and JWT tokens."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from tasklane.config import get_settings
from tasklane.models.user import User, UserRole
from tasklane.models.workspace import Workspace
from tasklane.services.errors import ConflictError, ValidationFailedError

logger = logging.getLogger(__name__)

# JWT configuration
ALGORITHM = "HS256"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_password(password: str) -> None:
    """Raise ValidationFailedError when the password is shorter than the configured minimum."""
    minimum = get_settings().min_password_length
    if len(password) < minimum:
        raise ValidationFailedError(f"Password must be at least {minimum} characters")


def create_user_with_workspace(
    db: Session,
    email: str,
    name: str,
    password: str,
    role: UserRole = UserRole.USER,
    workspace_name: str | None = None,
) -> User:
    """Create a user together with the workspace it owns, in one transaction.

    The workspace is inserted first, then the user referencing it, then the
    workspace owner is backfilled. Either all three writes commit or none do.
    Raises ConflictError if the email is taken.
    """
    email = normalize_email(email)
    name = name.strip()
    validate_password(password)
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise ConflictError("User already exists")

    try:
        workspace = Workspace(name=workspace_name or f"{name}'s Workspace")
        db.add(workspace)
        db.flush()

        user = User(email=email, name=name, role=role.value, workspace_id=workspace.id)
        user.set_password(password)
        db.add(user)
        db.flush()

        workspace.user_id = user.id
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info(
        "user_registered: user_id=%s workspace_id=%s role=%s", user.id, workspace.id, user.role
    )
    return user


def register_user(db: Session, email: str, name: str, password: str) -> User:
    """Self-registration. Always creates a USER; roles are changed by admins only."""
    return create_user_with_workspace(db, email, name, password, role=UserRole.USER)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Validate credentials and return user, or None if invalid."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        return None
    if not user.verify_password(password):
        return None
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and validate a JWT token. Returns payload or None."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_from_token(db: Session, token: str) -> Optional[User]:
    """Extract user from a JWT token. Returns None if token invalid or user not found."""
    payload = decode_access_token(token)
    if payload is None:
        return None
    email: Optional[str] = payload.get("sub")
    if email is None:
        return None
    return db.query(User).filter(User.email == email).first()
