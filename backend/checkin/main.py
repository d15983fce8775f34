"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkin.api.v1.api import api_router
from checkin.core.baseline_quizzes import ensure_baseline_quizzes
from checkin.core.config import settings
from checkin.core.exceptions import CheckInError
from checkin.core.logging_config import setup_logging
from checkin.core.observability import capture_error, init_sentry, shutdown_sentry
from checkin.middleware import RequestLoggingMiddleware
from checkin.models import SessionLocal

# Initialize logging configuration at startup
setup_logging()

logger = logging.getLogger(__name__)


def _seed_baseline_quizzes() -> None:
    db = SessionLocal()
    try:
        created = ensure_baseline_quizzes(db)
        logger.info(f"Baseline quiz seeding created {len(created)} quiz(zes)")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    - On startup: initializes Sentry and, when SEED_BASELINE_QUIZZES is set,
      creates the baseline quizzes
    - On shutdown: flushes pending Sentry events
    """
    init_sentry()

    if settings.SEED_BASELINE_QUIZZES:
        _seed_baseline_quizzes()

    yield

    shutdown_sentry()
    logger.info("Application shutting down")


# OpenAPI tags metadata
tags_metadata = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring application status",
    },
    {
        "name": "quizzes",
        "description": "Active quiz retrieval for the patient app",
    },
    {
        "name": "checkins",
        "description": "Daily check-in submission, today's result, history and streaks",
    },
]


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "**Check-in API** - Daily exercise-safety check-ins for patients "
            "in cancer treatment.\n\n"
            "This API provides:\n"
            "* The active daily check-in and initial assessment quizzes\n"
            "* One check-in per day, classified as recover, adapt or train\n"
            "* Check-in history and streaks\n"
            "* Catalog authoring for administrators\n\n"
            "## Authentication\n\n"
            "Patient endpoints require a JWT Bearer token issued by the account "
            "service. Admin endpoints require the `X-Admin-Token` header."
        ),
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    # Configure CORS
    # Security: Explicitly list allowed methods and headers instead of wildcards
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Admin-Token", "X-Request-ID"],
    )

    # Configure Request Logging
    app.add_middleware(RequestLoggingMiddleware)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(CheckInError)
    async def checkin_error_handler(request: Request, exc: CheckInError):
        """
        Handle expected domain failures (not found, conflict, validation).

        These are per-request outcomes, not system failures, so they are
        logged at INFO and never sent to Sentry.
        """
        logger.info(
            f"{exc.code}: {exc.message}",
            extra={
                "method": request.method,
                "path": str(request.url.path),
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handle HTTP exceptions; server-side ones are captured to Sentry.
        """
        if exc.status_code >= 500:
            capture_error(
                exc,
                context={
                    "path": str(request.url.path),
                    "method": request.method,
                    "status_code": exc.status_code,
                },
                tags={"error_type": "HTTPException"},
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle request validation errors.
        """
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors, "code": "VALIDATION_ERROR"},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id (UUID) for each exception so support can
        find the full traceback in the logs and in Sentry.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={"error_id": error_id},
        )

        capture_error(
            exc,
            context={
                "path": str(request.url.path),
                "method": request.method,
                "error_id": error_id,
            },
            tags={"error_type": exc.__class__.__name__},
        )

        # Don't leak internal details
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )

    return app


app = create_application()


@app.get("/")
async def root():
    """
    Root endpoint.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }
