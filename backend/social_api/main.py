"""
Social API Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Who:   uvicorn (uvicorn social_api.main:app) and the test suite (create_app()).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Req ID      │→│ RateLimit│→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes (/api):                                     │
    │  register/login/logout · profiles · posts ·         │
    │  comments · likes · followers · files   + /health   │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Unauth→401 │ Forbidden→403 │      │
    │  NotFound→404 │ FileStorage→500 │ other→500         │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, storage directory
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from social_api import __version__
from social_api.config import settings
from social_api.database import dispose_engine
from social_api.exceptions import (
    AuthenticationRequiredError,
    FileStorageError,
    ForbiddenError,
    NotFoundError,
    RelationNotFoundError,
    SocialAPIError,
    ValidationError,
)
from social_api.middleware.logging import RequestLoggingMiddleware
from social_api.middleware.rate_limit import RateLimitMiddleware
from social_api.middleware.request_id import RequestIDMiddleware, request_id_var
from social_api.routes import auth, comments, files, followers, health, likes, posts, profiles
from social_api.schemas.common import errors_to_fields

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging once for the whole application.

    Format: 2024-01-15T12:00:00 [INFO] social_api.services.post_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Social API %s starting up...", __version__)

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Storage directory: %s", storage.resolve())
    if settings.enforce_ownership:
        logger.info("Ownership checks: enforced")
    else:
        logger.info("Ownership checks: off (any authenticated user may mutate)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Social API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError / AuthError        → 400
        RequestValidationError (FastAPI)   → 400
        AuthenticationRequiredError        → 401 + WWW-Authenticate
        ForbiddenError                     → 403
        RelationNotFoundError              → 403
        NotFoundError                      → 404
        FileStorageError                   → 500
        SocialAPIError (base)              → 500 (opaque)
        Exception (fallback)               → 500 (opaque)

    Responses never carry stack traces, SQL or paths; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON body, query or path parameters."""
        fields = errors_to_fields(exc.errors())
        first = next(iter(fields.values()))[0] if fields else "Invalid request."
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", first, {"fields": fields}),
        )

    @app.exception_handler(AuthenticationRequiredError)
    async def handle_unauthenticated(request: Request, exc: AuthenticationRequiredError):
        return JSONResponse(
            status_code=401,
            content=_error_body("unauthenticated", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return JSONResponse(
            status_code=403,
            content=_error_body("forbidden", exc.message, exc.context),
        )

    @app.exception_handler(RelationNotFoundError)
    async def handle_relation_not_found(request: Request, exc: RelationNotFoundError):
        return JSONResponse(
            status_code=403,
            content=_error_body("relation_not_found", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(SocialAPIError)
    async def handle_unmapped_error(request: Request, exc: SocialAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Unmapped %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", INTERNAL_ERROR_MESSAGE),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", INTERNAL_ERROR_MESSAGE),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a new app."""
    app = FastAPI(
        title="Social API",
        description=(
            "Social-network backend: profiles, posts, comments, likes and follower "
            "relationships, with bearer-token authentication."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition:
    # RequestID → RateLimit → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(profiles.router)
    app.include_router(posts.router)
    app.include_router(comments.router)
    app.include_router(likes.router)
    app.include_router(followers.router)
    app.include_router(files.router)
    app.include_router(health.router)

    return app


# uvicorn social_api.main:app
app = create_app()
