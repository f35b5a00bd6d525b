"""
FastAPI application entry point.

This module creates and configures the FastAPI application through an
application factory (create_app), so tests can build fresh instances.

For local development:
    uvicorn clipvault.main:app --reload
    python -m clipvault.main

In production (APP_ENV=production) the hosting platform imports `app`
and invokes it per request; no local listener is started.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.dependencies import ACCESS_PASSWORD_HEADER
from .api.routes import health, uploads, videos
from .config.settings import get_settings
from .core.errors import ClipVaultError

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the effective mode on startup and warns about missing
    configuration. We still boot with missing fields so /api/health
    keeps answering; /api/health/ready reports what is wrong.
    """
    settings = get_settings()

    logger.info(
        "ClipVault API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": {
                "storage": settings.storage_mock_mode,
                "database": settings.database_mock_mode,
            }
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("ClipVault API shutting down")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure onto {"error": message} with the right status.

    Routes and services raise typed ClipVaultErrors; this is the only
    place they become HTTP responses.
    """

    @app.exception_handler(ClipVaultError)
    async def clipvault_error_handler(request: Request, exc: ClipVaultError):
        # Backend failures are already logged, with their cause, where they happen
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "Rejected malformed request",
            extra={"path": request.url.path, "errors": exc.errors()},
        )
        return _error_response(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return _error_response(500, "Internal server error")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Password-gated upload broker for club videos.

        ## Authentication

        Upload, metadata and download routes require the shared password in
        the `x-access-password` header (or a `password` query parameter).
        Listing videos and health checks are public.

        ## Workflow

        1. `POST /api/upload-url` with `{filename, contentType}`
        2. `PUT` the file bytes to the returned `uploadUrl`
        3. `POST /api/videos` with the returned `filename` and display metadata
        4. `GET /api/download-url/{filename}` for a temporary download link
        """,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=CORS_METHODS,
        allow_headers=["Content-Type", ACCESS_PASSWORD_HEADER],
    )

    # Gating is declared per route inside each router
    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(uploads.router, prefix="/api", tags=["Uploads"])
    app.include_router(videos.router, prefix="/api", tags=["Videos"])

    register_exception_handlers(app)

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# This is what uvicorn or the hosting platform imports
app = create_app()


def run() -> None:
    """Start a local uvicorn listener unless APP_ENV=production."""
    settings = get_settings()

    if not settings.serves_locally:
        logger.info("APP_ENV is production; not starting a local listener")
        return

    import uvicorn

    logger.info(f"Server running on http://localhost:{settings.port}")

    uvicorn.run(
        "clipvault.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
