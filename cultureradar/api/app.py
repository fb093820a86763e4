"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Internal imports
from ..config.environment import IS_PRODUCTION_ENVIRONMENT  # Environment must be imported first
from ..config.cors import CORS_CONFIG
from ..config.security import get_auth_config
from ..utils.logging_config import setup_logging
from ..db import db
from ..services.auth_provider import ensure_bootstrap_admin
from ..services.scheduler import init_scheduler, shutdown_scheduler
from .errors import register_exception_handlers
from .routes import (
    auth,
    events,
    event_fetch_trigger,
    health,
    locations,
    users,
)

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    try:
        get_auth_config()
        db.ensure_tables_exist()
        logger.info("Database initialized successfully")
        ensure_bootstrap_admin()
        init_scheduler()
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    yield
    # Shutdown
    shutdown_scheduler()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="CultureRadar API",
        description="API for discovering, submitting and curating cultural events",
        version="1.0.0",
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    register_exception_handlers(app)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(event_fetch_trigger.router, prefix="/api")
    app.include_router(events.router, prefix="/api")
    app.include_router(locations.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")

    return app


# Create the application instance
app = create_application()
