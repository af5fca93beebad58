"""
Pytest configuration and fixtures.

Every test gets its own in-memory SQLite database with the schema created
from the models. API clients share that session through a ``get_db``
override, and ``require_auth`` is overridden with the Identity of whichever
user the test acts as.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_DATABASE_URL, TEST_PASSWORD, TEST_SECRET_KEY

# Force the test DB; don't inherit from .env
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)


@pytest.fixture
def db() -> Iterator[Session]:
    """Fresh database session per test; the in-memory DB is dropped with its engine."""
    from tasklane import models  # noqa: F401
    from tasklane.db.session import Base, build_engine

    engine = build_engine(TEST_DATABASE_URL)
    Base.metadata.create_all(engine)
    session = Session(bind=engine)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from tasklane.main import app

    return TestClient(app)


@pytest.fixture
def api_client(db: Session) -> Iterator[TestClient]:
    """TestClient with get_db overridden to use the test db session."""
    from tasklane.db.session import get_db
    from tasklane.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(api_client: TestClient) -> Callable:
    """Make subsequent api_client requests run as ``user``."""
    from tasklane.api.deps import require_auth
    from tasklane.main import app
    from tasklane.services.access import Identity

    def _login(user) -> Identity:
        identity = Identity.from_user(user)
        app.dependency_overrides[require_auth] = lambda: identity
        return identity

    return _login


@pytest.fixture
def make_user(db: Session) -> Callable:
    """Create a user together with its owned workspace."""
    from tasklane.models.user import UserRole
    from tasklane.services.auth import create_user_with_workspace

    def _make(name: str, role: UserRole = UserRole.USER, email: str | None = None):
        return create_user_with_workspace(
            db,
            email or f"{name.lower()}@example.com",
            name,
            TEST_PASSWORD,
            role=role,
        )

    return _make


@pytest.fixture
def add_member(db: Session) -> Callable:
    """Invite ``user`` into ``owner``'s workspace and accept, the way the API does."""
    from tasklane.services.access import Identity
    from tasklane.services.workspace_service import accept_invitation, invite_member

    def _add(owner, user):
        invitation = invite_member(db, Identity.from_user(owner), user.email)
        return accept_invitation(db, Identity.from_user(user), invitation.id)

    return _add


@pytest.fixture
def owner(make_user):
    return make_user("Olivia")


@pytest.fixture
def member(make_user, add_member, owner):
    user = make_user("Marcus")
    add_member(owner, user)
    return user


@pytest.fixture
def outsider(make_user):
    return make_user("Xavier")
