"""
FastAPI application setup.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager
from typing import Optional

from globetrotter.config.settings import get_settings
from globetrotter.core.db import SessionLocal, dispose_engine
from globetrotter.core.error_handlers import error_handler, setup_error_handlers
from globetrotter.core.logging import configure_logging
from globetrotter.core.session_store import SessionStore, create_session_store
from globetrotter.middleware import RequestContextMiddleware, SessionAuthMiddleware

settings = get_settings()

configure_logging(settings.log_level.value, settings.log_format)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: release the session store and the connection pool
    on shutdown.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    try:
        yield
    finally:
        logger.info("Shutting down application")
        await app.state.session_store.close()
        await dispose_engine()
        logger.info("Application shutdown complete")


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        session_store: Store to use instead of the one selected by settings

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.state.session_store = session_store or create_session_store()

    # Last added runs first: CORS, then request id, then session lookup
    app.add_middleware(SessionAuthMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )

    setup_error_handlers(app)

    from globetrotter.api import (
        auth_router,
        blocks_router,
        days_router,
        photo_router,
        ping_router,
        trips_router,
    )
    app.include_router(auth_router)
    app.include_router(ping_router)
    app.include_router(trips_router)
    app.include_router(days_router)
    app.include_router(blocks_router)
    app.include_router(photo_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Liveness plus a database round trip."""
        database = {"status": "unknown"}
        try:
            async with SessionLocal() as db:
                await db.execute(text("SELECT 1"))
            database = {"status": "healthy", "connection": "ok"}
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            database = {"status": "unhealthy"}

        return {
            "status": "healthy" if database["status"] == "healthy" else "unhealthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {"database": database},
            "error_statistics": error_handler.get_error_statistics(),
        }

    return app


# Create application instance
app = create_app()
