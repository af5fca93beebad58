"""
Configuration tests.
"""

import pytest

from tasklane.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_get_settings_returns_cached_settings() -> None:
    settings = get_settings()
    assert isinstance(settings, Settings)
    assert get_settings() is settings


def test_defaults() -> None:
    settings = get_settings()
    assert settings.app_name == "Tasklane"
    assert settings.access_token_expire_hours == 24
    assert settings.min_password_length == 8
    assert settings.notification_list_limit == 50
    assert settings.search_project_limit == 20


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_HOURS", "2")
    monkeypatch.setenv("MIN_PASSWORD_LENGTH", "12")
    monkeypatch.setenv("SEARCH_TASK_LIMIT", "5")
    monkeypatch.setenv("DEBUG", "TRUE")
    settings = Settings()
    assert settings.access_token_expire_hours == 2
    assert settings.min_password_length == 12
    assert settings.search_task_limit == 5
    assert settings.debug is True


def test_generic_postgres_url_uses_psycopg3(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/tasks")
    settings = Settings()
    assert settings.database_url == "postgresql+psycopg://u:p@db:5432/tasks"
    assert settings.is_sqlite is False


def test_sqlite_url_kept(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite:///local.db")
    settings = Settings()
    assert settings.database_url == "sqlite:///local.db"
    assert settings.is_sqlite is True
