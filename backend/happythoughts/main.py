"""
Happy Thoughts API: FastAPI Application Factory
===============================================

What:  Builds and configures the FastAPI application.
How:   `create_app()` wires middleware, exception handlers and routers;
       the module-level `app` is what uvicorn serves
       (`uvicorn happythoughts.main:app`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │   GET /              GET/POST /thoughts             │
    │   GET /health        GET/PATCH/PUT/DELETE           │
    │   POST /register         /thoughts/{id}             │
    │   POST /login        POST /thoughts/{id}/like       │
    │                                                     │
    │  Exception Handlers:                                │
    │   HappyThoughtsError → its own status (400..500)    │
    │   RequestValidationError → 400                      │
    │   Exception → 500                                   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from happythoughts import __version__
from happythoughts.config import settings
from happythoughts.database import create_tables, dispose_engine
from happythoughts.exceptions import HappyThoughtsError
from happythoughts.middleware.logging import RequestLoggingMiddleware
from happythoughts.middleware.request_id import RequestIDMiddleware, request_id_var
from happythoughts.routes import auth, health, index, thoughts

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once at startup.

    Format: 2026-01-15T12:00:00 [INFO] happythoughts.access: GET /thoughts 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Happy Thoughts API %s starting up...", __version__)

    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables ensured (AUTO_CREATE_TABLES=true)")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Happy Thoughts API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def error_body(error: str, message: str, request: Request, details: dict | None = None) -> dict:
    """The stable error shape: {error, message, details, requestId}."""
    body = {"error": error, "message": message, "requestId": _request_id(request)}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

    Handler hierarchy:
        HappyThoughtsError (and subclasses) → exc.status_code / exc.error_code
        RequestValidationError              → 400 validation_error
        Exception (fallback)                → 500 internal_server_error

    Server-side failures (5xx) return a generic message; the context is
    only logged.
    """

    @app.exception_handler(HappyThoughtsError)
    async def handle_app_error(request: Request, exc: HappyThoughtsError):
        rid = _request_id(request)
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return JSONResponse(
                status_code=exc.status_code,
                content=error_body(
                    exc.error_code,
                    "An internal error occurred. Please try again later.",
                    request,
                ),
            )

        logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error_code, exc.message, request, exc.context),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed bodies (not JSON, wrong types) get the same 400 as business-rule failures."""
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body(
                "validation_error",
                "Request body or parameters are malformed",
                request,
                {"errors": errors},
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
                request,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Happy Thoughts API",
        description=(
            "Post short happy thoughts, browse them with filters, sorting and "
            "pagination, and like your favourites. Register to edit and delete "
            "your own thoughts."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Added innermost first: the last middleware added runs first.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(index.router)
    app.include_router(thoughts.router)
    app.include_router(auth.router)
    app.include_router(health.router)

    return app


app = create_app()
