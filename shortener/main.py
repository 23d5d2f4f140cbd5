"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Exception handlers mapping service errors to HTTP responses
- Database setup and teardown

Design Decisions:
- create_app() takes the Settings object explicitly, so tests build apps
  against their own database and token
- Settings, database and access control live on app.state, not in globals
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from shortener.api import endpoints
from shortener.core.exceptions import PersistenceError, ShortenerException
from shortener.core.security import AccessControl
from shortener.core.setting import Settings, settings
from shortener.db.session import Database
from shortener.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


async def shortener_exception_handler(request: Request, exc: ShortenerException) -> PlainTextResponse:
    """Answer service errors with their message and status code."""
    if isinstance(exc, PersistenceError):
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=getattr(exc, "original_error", None) or exc,
        )
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return PlainTextResponse("Internal Server Error", status_code=500)


def create_app(config: Settings = settings) -> FastAPI:
    """
    Build the application for one configuration.

    Args:
        config: Frozen settings shared by every request of this app

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title="URL Shortener Service",
        description="URL shortener with redirect moderation and domain/word blacklists",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = config
    app.state.database = Database.from_url(config.DATABASE_URL)
    app.state.access_control = AccessControl(config)

    app.add_exception_handler(ShortenerException, shortener_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["OPTIONS", "GET", "POST", "DELETE"],
        allow_headers=["Authorization"],
    )

    # Health endpoint defined before router to match before the ID route
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy"}

    app.include_router(endpoints.router, tags=["URL Shortener"])

    @app.on_event("startup")
    async def startup_event():
        """Create missing tables on startup."""
        await app.state.database.create_tables()
        logger.info(f"Short URLs will be served under {config.BASE_URL}")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release database connections on shutdown."""
        await app.state.database.dispose()

    return app


app = create_app()
