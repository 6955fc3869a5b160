from contextlib import asynccontextmanager
from fastapi import FastAPI

from app.core import settings, setup_logging, get_logger
from app.exceptions import AppException, app_exception_handler, general_exception_handler
from app.api.v1 import api_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting up Interview Scorecard Blocks")

    if not settings.google_configured:
        logger.warning("Google Calendar credentials are not configured; job runs will fail")
    if not settings.scheduler_jwt_secret:
        if settings.environment == "development":
            logger.warning("SCHEDULER_JWT_SECRET not set; job endpoints are open in development")
        else:
            logger.warning("SCHEDULER_JWT_SECRET not set; job endpoints will reject every request")

    yield

    # Shutdown
    logger.info("Shutting down Interview Scorecard Blocks")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        lifespan=lifespan
    )

    # Exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routes
    app.include_router(api_router)

    # Health check endpoints
    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {"status": "ok", "message": "Interview Scorecard Blocks is running"}

    @app.get("/healthz")
    async def healthz():
        """Production health check endpoint."""
        return {"status": "ok"}

    return app


# Create the app instance
app = create_app()
