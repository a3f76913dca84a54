"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
exception handlers and lifecycle handlers.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tollgate.core.config import Settings, get_settings
from tollgate.core.logging import bind_correlation_id, clear_context, configure_logging, get_logger
from tollgate.domain.exceptions import (
    AccountNotFoundError,
    ConflictError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidTokenError,
    SessionExpiredError,
    TokenExpiredError,
    TollgateError,
)
from tollgate.domain.services import AuthConfig, FieldValidator, TokenCleanupService
from tollgate.infrastructure.auth import Argon2PasswordHasher, SessionTokenCodec
from tollgate.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from tollgate.infrastructure.persistence.repositories import TokenRepository
from tollgate.infrastructure.services import EmailNotificationDispatcher

logger = get_logger(__name__)

# Domain error -> (status code, error label). Looked up along the exception's MRO.
ERROR_STATUS: dict[type[TollgateError], tuple[int, str]] = {
    ConflictError: (status.HTTP_409_CONFLICT, "Conflict"),
    InvalidCredentialsError: (status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    InvalidTokenError: (status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    SessionExpiredError: (status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    EmailNotVerifiedError: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    InvalidOrExpiredTokenError: (status.HTTP_400_BAD_REQUEST, "Bad request"),
    TokenExpiredError: (status.HTTP_400_BAD_REQUEST, "Bad request"),
    AccountNotFoundError: (status.HTTP_404_NOT_FOUND, "Not found"),
}

# Unknown and expired single-use tokens get the same reply.
SINGLE_USE_TOKEN_ERRORS = (InvalidOrExpiredTokenError, TokenExpiredError)
SINGLE_USE_TOKEN_MESSAGE = "Invalid or expired token"


async def run_token_cleanup(interval: timedelta) -> None:
    """Sweep expired token rows every ``interval`` until cancelled.

    A failed sweep is logged and the loop waits for the next interval.
    """
    while True:
        await asyncio.sleep(interval.total_seconds())
        try:
            async with get_db_manager().session() as session:
                await TokenCleanupService(TokenRepository(session)).run_once()
        except Exception as e:
            logger.error("Token cleanup failed", error=str(e), exc_type=type(e).__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the database, starts the periodic token sweep and tears
    both down on shutdown.
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    logger.info(
        "Starting Tollgate",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    cleanup_task: asyncio.Task | None = None
    if settings.token_cleanup_interval_hours > 0:
        cleanup_task = asyncio.create_task(
            run_token_cleanup(timedelta(hours=settings.token_cleanup_interval_hours))
        )
        logger.info(
            "Token cleanup scheduled", interval_hours=settings.token_cleanup_interval_hours
        )

    yield

    logger.info("Shutting down Tollgate")
    if cleanup_task is not None:
        cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cleanup_task

    await close_database()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the app from; defaults to get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="User account registration, login and session management",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    register_services(app, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app, settings)
    register_routes(app, settings)
    register_exception_handlers(app, settings)
    register_middleware(app)

    return app


def register_services(app: FastAPI, settings: Settings) -> None:
    """Build the long-lived collaborators and store them on app state."""
    app.state.settings = settings
    app.state.password_hasher = Argon2PasswordHasher()
    app.state.token_codec = SessionTokenCodec(settings.secret_key)
    app.state.notifier = EmailNotificationDispatcher.from_settings(settings)
    app.state.field_validator = FieldValidator()
    app.state.auth_config = AuthConfig(
        session_ttl=timedelta(hours=settings.session_token_expire_hours),
        email_verification_required=settings.email_verification_required,
        verification_token_ttl=timedelta(hours=settings.verification_token_expire_hours),
        reset_token_ttl=timedelta(hours=settings.password_reset_token_expire_hours),
        app_url=settings.app_url,
    )


def register_health_check(app: FastAPI, settings: Settings) -> None:
    """Register health check endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Returns 200 while the process is serving requests."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Returns 200 once the database is reachable, 503 otherwise."""
        db_healthy = await get_db_manager().check_connection()
        if db_healthy:
            return {
                "status": "ready",
                "service": settings.app_name,
                "version": settings.app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "service": settings.app_name,
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register API routes."""
    from tollgate.infrastructure.api.routes import auth_router, users_router

    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
    app.include_router(users_router, prefix=f"{settings.api_prefix}/users", tags=["users"])


def _status_for(exc: TollgateError) -> tuple[int, str]:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Register exception handlers translating errors into JSON responses."""

    @app.exception_handler(TollgateError)
    async def domain_exception_handler(request: Request, exc: TollgateError):
        status_code, label = _status_for(exc)
        if status_code >= 500:
            logger.error(
                "Request failed",
                path=str(request.url.path),
                method=request.method,
                error=exc.message,
                exc_type=type(exc).__name__,
            )
            return JSONResponse(
                status_code=status_code,
                content={"error": label, "message": "An unexpected error occurred"},
            )

        message = SINGLE_USE_TOKEN_MESSAGE if isinstance(exc, SINGLE_USE_TOKEN_ERRORS) else exc.message
        content = {"error": label, "message": message}
        if isinstance(exc, ConflictError):
            content["field"] = exc.field
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
            details.append(
                {
                    "field": ".".join(location) or "request",
                    "message": error.get("msg", "Invalid value"),
                    "code": error.get("type"),
                }
            )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "details": details},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log each request and tag it with a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=str(request.url.path))
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
