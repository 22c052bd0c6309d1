"""
BizTime Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers;
       uvicorn serves the module-level `app` (uvicorn biztime.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │    Req ID    │→│Access Log│→│   Rate Limit    │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /companies   │ │ /invoices    │ │ /health     │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ BadRequest→400 │ NotFound→404 │ Conflict→409 │   │
    │  │ Database→500   │ anything else→500           │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from biztime import __version__
from biztime.config import settings
from biztime.database import dispose_engine
from biztime.exceptions import (
    BadRequestError,
    BizTimeError,
    ConflictError,
    DatabaseError,
    NotFoundError,
)
from biztime.middleware.logging import RequestLoggingMiddleware
from biztime.middleware.rate_limit import RateLimitMiddleware
from biztime.middleware.request_id import RequestIDMiddleware, request_id_var
from biztime.routes import companies, health, invoices

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once at startup.

    Format: 2024-01-15T12:00:00 [INFO] biztime.services.invoice_service: ...
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


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: configure logging. Shutdown: dispose the engine's pool."""
    setup_logging()
    logger.info("BizTime API %s starting up", __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("BizTime API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None) -> dict:
    body = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get("") or None,
    }
    if details:
        body["details"] = details
    return body


_VALIDATION_MESSAGES = {
    "body": "Request body is missing or invalid",
    "path": "Invalid path parameter",
    "query": "Invalid query parameter",
}


def _validation_message(errors: List[dict]) -> str:
    """Message for the first failing location, e.g. ("path", "invoice_id") → path."""
    for err in errors:
        if err["loc"] and err["loc"][0] in _VALIDATION_MESSAGES:
            return _VALIDATION_MESSAGES[err["loc"][0]]
    return "Request is invalid"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

        BadRequestError / RequestValidationError → 400
        NotFoundError                            → 404
        ConflictError                            → 409
        DatabaseError                            → 500 (generic message)
        BizTimeError (other)                     → 500
        Exception                                → 500 (stack trace logged)
    """

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        logger.warning("Bad request: %s", exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("bad_request", exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Missing or malformed body, path or query values."""
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        logger.warning("Request validation failed: %s", errors)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "bad_request",
                _validation_message(errors),
                {"errors": errors},
            ),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=409,
            content=_error_body("conflict", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error",
                "An internal error occurred. Please try again later.",
            ),
        )

    @app.exception_handler(BizTimeError)
    async def handle_app_error(request: Request, exc: BizTimeError):
        logger.error("Unhandled application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Build a fully configured FastAPI instance."""
    app = FastAPI(
        title="BizTime API",
        description="Companies and the invoices billed to them.",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → RateLimit → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(companies.router)
    app.include_router(invoices.router)
    app.include_router(health.router)

    return app


app = create_app()
