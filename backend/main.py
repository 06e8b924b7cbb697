# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    resolve_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from helpers.dependencies import build_services
from helpers.rate_limiter import limiter
from helpers.security_headers import SecurityHeadersMiddleware
from models.config import settings
from models.exceptions import (
    DomainException,
    EmailDeliveryException,
    MethodNotAllowedException,
    PermissionDeniedException,
    RateLimitExceededException,
    ValidationException,
)
from models.schemas import HealthResponse
from routers import config_router, contact_router, messages_router

# Initialize Sentry BEFORE creating FastAPI app
init_sentry()

configure_logging(settings.ENVIRONMENT, settings.LOG_DIR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Builds the services routes depend on (rate limiter, Turnstile verifier,
    mail provider, message catalog) so their state lives exactly as long
    as the app.
    """
    app.state.services = build_services(settings)
    logger.info(
        f"Contact pipeline ready (bot verification "
        f"{'on' if settings.turnstile_enabled else 'off'}, "
        f"{settings.RATE_LIMIT_MAX} per {settings.RATE_LIMIT_WINDOW_SECONDS}s, "
        f"email provider {settings.EMAIL_PROVIDER})"
    )
    try:
        yield
    finally:
        logger.info("Contact pipeline stopped")


app = FastAPI(title="Portfolio Site API", lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request with correlation ID tracking."""
        correlation_id = resolve_correlation_id(request.headers.get(CORRELATION_HEADER))
        set_correlation_id(correlation_id)

        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log timing information."""
        start_time = time.perf_counter()

        logger.info(f"Request: {request.method} {request.url.path}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response


# Middleware runs in reverse order - security headers should wrap everything
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# In development, allow all origins for local network testing
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", CORRELATION_HEADER],
)


def _error_response(
    status_code: int,
    exc: DomainException,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "correlation_id": exc.correlation_id},
        headers=headers,
    )


def _tag_exception(exc: DomainException) -> None:
    sentry_sdk.set_tag("correlation_id", exc.correlation_id)
    sentry_sdk.set_tag("exception_type", exc.__class__.__name__)


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # bind() instead of kwargs: kwargs would run str.format over the repr
    logger.bind(path=str(request.url.path), method=request.method).exception(
        f"Unhandled exception: {exc!r}"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "correlation_id": correlation_id},
    )


@app.exception_handler(MethodNotAllowedException)
async def method_not_allowed_exception_handler(
    request: Request, exc: MethodNotAllowedException
) -> JSONResponse:
    """Handle wrong-verb calls to POST-only endpoints."""
    logger.info(f"Method not allowed: {exc.method} {request.url.path}")

    return _error_response(
        status.HTTP_405_METHOD_NOT_ALLOWED,
        exc,
        headers={"Allow": ", ".join(exc.allowed)},
    )


@app.exception_handler(ValidationException)
async def validation_exception_handler(
    request: Request, exc: ValidationException
) -> JSONResponse:
    """Handle unusable request bodies."""
    _tag_exception(exc)

    logger.warning(
        f"Validation error: {exc.message}",
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(PermissionDeniedException)
async def permission_denied_exception_handler(
    request: Request, exc: PermissionDeniedException
) -> JSONResponse:
    """Handle failed bot verification."""
    _tag_exception(exc)

    logger.warning(
        f"Permission denied: {exc.message}",
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(status.HTTP_403_FORBIDDEN, exc)


@app.exception_handler(RateLimitExceededException)
async def rate_limit_exception_handler(
    request: Request, exc: RateLimitExceededException
) -> JSONResponse:
    """Handle callers over their submission window."""
    _tag_exception(exc)

    logger.warning(
        f"Rate limit exceeded on {request.url.path}, retry after {exc.retry_after}s",
        exception_type=exc.__class__.__name__,
    )

    headers = {"Retry-After": str(exc.retry_after)} if exc.retry_after else None
    return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, exc, headers=headers)


@app.exception_handler(EmailDeliveryException)
async def email_delivery_exception_handler(
    request: Request, exc: EmailDeliveryException
) -> JSONResponse:
    """Handle mail relay failures; these page someone, so capture in Sentry."""
    _tag_exception(exc)
    sentry_sdk.capture_exception(exc)

    logger.error(
        f"Email delivery failed: {exc.message}",
        exception_type=exc.__class__.__name__,
        path=str(request.url.path),
    )

    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


app.include_router(contact_router.router, prefix="/api")
app.include_router(messages_router.router, prefix="/api")
app.include_router(config_router.router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")
