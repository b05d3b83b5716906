"""
Tiendas Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, error handling
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn tiendasapp.main:app) or `python -m tiendasapp`.

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware Chain:                                          │
    │  ┌─────────┐ ┌──────────┐ ┌───────────┐ ┌──────┐ ┌──────┐   │
    │  │ Logging │→│ Security │→│ Body size │→│ GZip │→│ CORS │   │
    │  └─────────┘ └──────────┘ └───────────┘ └──────┘ └──────┘   │
    │                                                             │
    │  Routes:                                                    │
    │  /api/categorias   /api/tiendas[...]   /health              │
    │                                                             │
    │  Exception Handlers (body is always {"error": message}):    │
    │  Validation→400 │ InvalidId→400 │ NotFound→404 │ DB→500     │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → settings check → MongoDB ping → Cloudinary config
    Shutdown: close the MongoDB client
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
from starlette.exceptions import HTTPException as StarletteHTTPException

from tiendasapp import __version__
from tiendasapp.config import settings
from tiendasapp.database import close_client, connect
from tiendasapp.exceptions import (
    DatabaseError,
    InvalidIdentifierError,
    NotFoundError,
    TiendasAppError,
    ValidationError,
)
from tiendasapp.middleware.body_limit import BodySizeLimitMiddleware
from tiendasapp.middleware.logging import RequestLoggingMiddleware
from tiendasapp.middleware.security_headers import SecurityHeadersMiddleware
from tiendasapp.routes import categories, health, reviews, stores
from tiendasapp.services.upload_service import upload_service

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"
ROUTE_NOT_FOUND_MESSAGE = "Ruta no encontrada"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before any other initialization.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Validate critical configuration (logged, not fatal)
        3. Connect to MongoDB and ping it
        4. Configure the Cloudinary SDK
    Shutdown:
        1. Close the MongoDB client (all pooled connections)
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Tiendas backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health and /api/categorias work without either backend
        logger.error("Configuration error: %s", str(e))

    await connect()

    if settings.cloudinary_configured:
        upload_service.configure()

    base_url = f"http://localhost:{settings.port}"
    logger.info("Server running on port %d", settings.port)
    logger.info("Health check: %s/health", base_url)
    logger.info("Categories API: %s/api/categorias", base_url)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Tiendas backend shutting down...")
    await close_client()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to status codes. Every error body is {"error": message}.

    Handler hierarchy:
        ValidationError          → 400
        InvalidIdentifierError   → 400
        RequestValidationError   → 400 (malformed JSON / wrong types)
        NotFoundError            → 404
        HTTPException 404/405    → 404 "Ruta no encontrada"
        DatabaseError            → 500
        TiendasAppError (base)   → 500
        Exception (fallback)     → 500

    Server-side failures never expose driver details; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error on %s: %s | %s", request.url.path, exc.message, exc.context)
        return _error(400, exc.message)

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request on %s: %s", request.url.path, exc.errors())
        return _error(400, "Datos de entrada inválidos")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods both read as "no such route"
        if exc.status_code in (404, 405):
            return _error(404, ROUTE_NOT_FOUND_MESSAGE)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error on %s: %s | Context: %s", request.url.path, exc.message, exc.context)
        return _error(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(TiendasAppError)
    async def handle_app_error(request: Request, exc: TiendasAppError):
        logger.error("Application error on %s: %s | Context: %s", request.url.path, exc.message, exc.context)
        return _error(500, INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "Unexpected error on %s: %s",
            request.url.path,
            str(exc),
            exc_info=True,
        )
        return _error(500, INTERNAL_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Tiendas API",
        description=(
            "Directory of local stores: registration with photos, a fixed category "
            "list, and user reviews."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = first to run)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    # Outermost, so responses produced by the middleware above get CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # categoria/{category} must be matched before {store_id}/reviews
    app.include_router(categories.router)
    app.include_router(stores.router)
    app.include_router(reviews.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
