"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Tasklane"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite:// accepted for local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/tasklane_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    access_token_expire_hours: int = 24
    min_password_length: int = 8

    # Listing caps
    notification_list_limit: int = 50
    activity_list_limit: int = 50
    search_task_limit: int = 50
    search_project_limit: int = 20

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'tasklane_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")
        self.access_token_expire_hours = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", str(self.access_token_expire_hours))
        )
        self.min_password_length = int(
            os.getenv("MIN_PASSWORD_LENGTH", str(self.min_password_length))
        )

        self.notification_list_limit = int(
            os.getenv("NOTIFICATION_LIST_LIMIT", str(self.notification_list_limit))
        )
        self.activity_list_limit = int(
            os.getenv("ACTIVITY_LIST_LIMIT", str(self.activity_list_limit))
        )
        self.search_task_limit = int(os.getenv("SEARCH_TASK_LIMIT", str(self.search_task_limit)))
        self.search_project_limit = int(
            os.getenv("SEARCH_PROJECT_LIMIT", str(self.search_project_limit))
        )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
