"""PaperBank Backend - Main FastAPI Application

Shared exam-paper repository: students upload PDFs, admins moderate them and
approved papers are listed, searched and downloaded by everyone.

This module creates and configures the FastAPI application, including:
- API routers (papers, uploads, admin, users, home)
- Middleware (request ID correlation, CORS)
- Exception handlers mapping domain failures to HTTP responses
- Lifespan that creates tables and builds the blob store once
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import get_settings
from .database import init_db
from .domain.documents.errors import DocumentError, StorageError
from .infrastructure.storage.s3_storage_adapter import S3StorageAdapter
from .infrastructure.storage.storage_config import load_storage_config, validate_storage_config

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# Domain Routers
from .documents.router import router as papers_router, home_router
from .uploads.router import router as uploads_router
from .moderation.router import router as admin_router
from .users.router import router as users_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

# Failure kind -> HTTP status
ERROR_STATUS_CODES = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "authorization": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "storage_failure": status.HTTP_502_BAD_GATEWAY,
}

HTTP_ERROR_KINDS = {
    status.HTTP_401_UNAUTHORIZED: "authentication",
    status.HTTP_403_FORBIDDEN: "authorization",
    status.HTTP_404_NOT_FOUND: "not_found",
}


def build_blob_store() -> S3StorageAdapter:
    """Create the object storage adapter from settings.

    Raises:
        ValueError: If storage configuration is invalid
        StorageError: If the S3 client cannot be created
    """
    config = load_storage_config(settings)
    validate_storage_config(config)
    return S3StorageAdapter.from_config(config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Startup: create missing tables, build the blob store, check the bucket
    - Shutdown: log only
    """
    logger.info("PaperBank API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    init_db()

    if getattr(app.state, "blob_store", None) is None:
        try:
            app.state.blob_store = build_blob_store()
        except (ValueError, StorageError) as e:
            logger.error(f"Object storage not configured: {e}")
            app.state.blob_store = None

    if isinstance(app.state.blob_store, S3StorageAdapter):
        try:
            await app.state.blob_store.verify_bucket_exists()
        except StorageError as e:
            # Keep serving reads; uploads will fail with storage_failure
            logger.error(f"Bucket check failed: {e}")

    yield

    logger.info("PaperBank API shutting down...")


app = FastAPI(
    title="PaperBank API",
    description="Shared exam-paper repository with moderated uploads",
    version=__version__,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(DocumentError)
async def document_exception_handler(
    request: Request,
    exc: DocumentError
) -> JSONResponse:
    """Map paper lifecycle failures to their HTTP status.

    Body: {"success": false, "error": <kind>, "message": <message>}
    """
    status_code = ERROR_STATUS_CODES.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log = logger.error if status_code >= 500 else logger.info
    log(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": exc.kind,
            "message": exc.message,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap HTTPException (auth failures, unknown routes) in the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": HTTP_ERROR_KINDS.get(exc.status_code, "http_error"),
            "message": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors (malformed ids, bad query values)."""
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions without exposing details to the client."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics)
app.include_router(observability_router)

app.include_router(uploads_router, prefix="/api")
app.include_router(papers_router, prefix="/api")
app.include_router(home_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(users_router, prefix="/api")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "PaperBank API",
        "version": __version__,
        "status": "running",
    }


def create_app() -> FastAPI:
    """Return the configured application (used by tests and ASGI servers)."""
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "paperbank.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
