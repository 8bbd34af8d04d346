"""
Main FastAPI application.

WHY: This is the entry point for the application. It configures logging,
the database lifecycle, middleware, routes and exception handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from subs_aggregator.api import subscriptions
from subs_aggregator.core.config import Settings, get_settings
from subs_aggregator.core.exception_handlers import (
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from subs_aggregator.core.exceptions import AppException
from subs_aggregator.core.logging import configure_logging, resolve_log_level
from subs_aggregator.db.session import create_engine, create_session_factory, create_tables
from subs_aggregator.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the database engine on startup and dispose of it on shutdown.

    The engine and session factory live on ``app.state`` so ``get_db`` can
    reach them through the request.
    """
    settings: Settings = app.state.settings
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    if settings.DB_CREATE_TABLES:
        logger.info("Creating database tables")
        await create_tables(engine)

    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    WHY: Factory pattern allows testing with different settings and without
    a real database (tests override ``get_db``).

    Args:
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Stores user subscriptions and totals billed amounts over a period",
        version=settings.VERSION,
        docs_url="/docs",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        """Liveness check; does not touch the database."""
        return {"status": "healthy", "version": settings.VERSION}

    @app.get("/", tags=["root"])
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
        }

    app.include_router(subscriptions.router)

    return app


# Create app instance for `uvicorn subs_aggregator.main:app`
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "subs_aggregator.main:app",
        host=_settings.SERVER_HOST,
        port=_settings.SERVER_PORT,
        reload=_settings.DEBUG,
        log_level=logging.getLevelName(resolve_log_level(_settings.LOG_LEVEL)).lower(),
    )
