"""Main FastAPI application."""

import structlog
from fastapi import FastAPI

from runplan.config import settings
from runplan.executions.routes import router as executions_router
from runplan.logs import setup_logging

logger = structlog.get_logger()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    setup_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Run planning for the workflow editor",
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.include_router(executions_router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": settings.app_version}

    logger.info("Application created", app_name=settings.app_name)
    return app


app = create_app()
