"""
Blog API - FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       lifespan() runs the startup checks and disposes the engines on shutdown.
Who:   uvicorn (`uvicorn blogapi.main:app`) and the test suite.

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                        FastAPI App                        │
    │                                                           │
    │  Middleware:   Request ID → Logging → GZip → CORS         │
    │                                                           │
    │  Routes (/api):  auth · users · posts · comments          │
    │  Routes (/):     health                                   │
    │                                                           │
    │  Exception handlers → {timestamp, status, error,          │
    │                        message, path, errors?}            │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Report insecure configuration (JWT secret)
    3. Wait for both stores (tenacity retry with backoff)
    4. Create missing tables when CREATE_SCHEMA_ON_STARTUP is set
    5. Ensure the bootstrap admin account when ADMIN_* is set

    Shutdown:
    1. Dispose both engines
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from blogapi import __version__
from blogapi.config import settings
from blogapi.database import (
    async_session_factory,
    content_engine,
    create_schema,
    dispose_engine,
    engine,
    ping,
)
from blogapi.exceptions import AlreadyExistsError, AuthenticationError, BlogError
from blogapi.middleware.logging import RequestLoggingMiddleware
from blogapi.middleware.request_id import RequestIDMiddleware, request_id_var
from blogapi.repositories.user_repository import UserRepository
from blogapi.routes import auth, comments, health, posts, users
from blogapi.schemas.common import ErrorResponse
from blogapi.services.user_service import UserService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] blogapi.services.post_service: Post ... created
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@retry(
    retry=retry_if_exception_type((OSError, TimeoutError, DBAPIError)),
    stop=stop_after_attempt(settings.retry_max_attempts),
    wait=wait_exponential_jitter(
        initial=settings.retry_min_wait,
        max=settings.retry_max_wait,
        jitter=1,
    ),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def wait_for_stores() -> None:
    """Pings both stores; retried while a store is still coming up."""
    await ping(engine)
    await ping(content_engine)


async def bootstrap_admin() -> None:
    """
    Create or promote the configured ADMIN account in its own transaction.

    A conflicting ADMIN_EMAIL is reported as a configuration error and the
    app starts without the admin account.
    """
    async with async_session_factory() as session:
        service = UserService(UserRepository(session))
        try:
            await service.ensure_admin(
                settings.admin_username,
                settings.admin_email,
                settings.admin_password,
            )
            await session.commit()
        except AlreadyExistsError as e:
            await session.rollback()
            logger.error(
                "Admin bootstrap skipped, check ADMIN_USERNAME/ADMIN_EMAIL: %s", e.message
            )
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Blog API %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: local development runs with the default secret
        logger.warning("%s", str(e))

    try:
        await wait_for_stores()
    except (OSError, TimeoutError, DBAPIError) as e:
        # Keep serving so /health can report the outage
        logger.error("Stores unreachable after %d attempts: %s", settings.retry_max_attempts, e)
    else:
        if settings.create_schema_on_startup:
            await create_schema()
        if settings.admin_bootstrap_enabled:
            await bootstrap_admin()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Builds the uniform error envelope; `errors` is omitted when empty."""
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status_code,
        error=_reason(status_code),
        message=message,
        path=request.url.path,
        errors=errors or None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """
    Flattens pydantic errors into {field: message}, first message per field.

    loc ("body", "authorId") → "authorId"; ("query", "size") → "size".
    """
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[-1]) if loc else "request"
        message = str(err.get("msg", "Invalid value"))
        # Messages raised from field validators arrive prefixed
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to the error envelope.

    Handler hierarchy:
        BlogError subclasses     → their status_code (400/401/403/404/409/500)
        RequestValidationError   → 400 "Validation failed" + errors map
        Starlette HTTPException  → its own status (unknown route, bad method)
        SQLAlchemyError          → 500, generic message
        Exception (fallback)     → 500 "An unexpected error occurred"

    5xx details are logged with the request id and never returned.
    """

    @app.exception_handler(BlogError)
    async def handle_blog_error(request: Request, exc: BlogError):
        rid = request_id_var.get("")
        headers = None
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return error_response(request, exc.status_code, "An internal error occurred. Please try again later.")
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        errors = None
        field = getattr(exc, "field", None)
        if field:
            errors = {field: exc.message}
        return error_response(request, exc.status_code, exc.message, errors=errors, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        logger.info("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return error_response(request, 400, "Validation failed", errors=errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else _reason(exc.status_code)
        return error_response(request, exc.status_code, message, headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s", rid, str(exc), exc_info=True)
        return error_response(request, 500, "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response(request, 500, "An unexpected error occurred")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Blog API",
        description=(
            "Multi-user blogging backend: accounts with roles, posts, comments, "
            "search and pagination. Authenticate with POST /api/auth/login and "
            "send the token as `Authorization: Bearer <token>`."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(posts.router)
    app.include_router(comments.router)
    app.include_router(health.router)

    return app


app = create_app()
