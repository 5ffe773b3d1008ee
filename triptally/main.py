import logging

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core import errors
from .core.config import Settings, get_settings
from .core.logging import init_logging, request_context_middleware
from .db.migrate import apply_migrations
from .routers import expenses, health, trips


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    init_logging(debug=settings.debug, service="triptally")

    # Ensure database schema (idempotent) so test-injected fresh DBs have tables
    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logging.getLogger("triptally").exception("failed to apply migrations on startup")
        raise

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(errors.TripTallyError, errors.domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(trips.router)
    app.include_router(expenses.router)

    return app


def run() -> None:
    """Serve the API with uvicorn using host/port from settings."""
    settings = get_settings()
    uvicorn.run(
        "triptally.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
