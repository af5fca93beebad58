"""
Tasklane FastAPI application entry point.

Request cycle: validate → authorize (access resolver) → query → format.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tasklane import __version__
from tasklane.config import get_settings
from tasklane.db.session import check_db_connection, engine
from tasklane.services.errors import TasklaneError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Tasklane starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
            settings = get_settings()
            if settings.is_sqlite:
                logger.warning("Running on SQLite; use PostgreSQL outside local development.")
            if not settings.secret_key:
                logger.warning("SECRET_KEY is empty; issued tokens are not secure.")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        yield
    finally:
        logger.info("Tasklane shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


async def tasklane_error_handler(request: Request, exc: TasklaneError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed: path=%s detail=%s", request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.add_exception_handler(TasklaneError, tasklane_error_handler)

    # Mount API routes
    from tasklane.api.activity import router as activity_router
    from tasklane.api.admin import router as admin_router
    from tasklane.api.auth import router as auth_router
    from tasklane.api.filter_presets import router as filter_presets_router
    from tasklane.api.notifications import router as notifications_router
    from tasklane.api.projects import router as projects_router
    from tasklane.api.search import router as search_router
    from tasklane.api.tasks import router as tasks_router
    from tasklane.api.team import router as team_router
    from tasklane.api.workspace import router as workspace_router

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(workspace_router, prefix="/api/workspace", tags=["workspace"])
    app.include_router(projects_router, prefix="/api/projects", tags=["projects"])
    app.include_router(tasks_router, prefix="/api/tasks", tags=["tasks"])
    app.include_router(notifications_router, prefix="/api/notifications", tags=["inbox"])
    app.include_router(activity_router, prefix="/api/activity", tags=["inbox"])
    app.include_router(search_router, prefix="/api/search", tags=["search"])
    app.include_router(
        filter_presets_router, prefix="/api/filter-presets", tags=["filter-presets"]
    )
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
    app.include_router(team_router, prefix="/api/team", tags=["admin"])

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
