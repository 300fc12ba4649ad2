"""
DualStore API - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds both store adapters (or takes them as arguments),
       mounts one route group per backend with its adapter passed in,
       registers middleware and exception handlers, and attaches a lifespan
       that owns the backend connections.
Who:   uvicorn (`uvicorn dualstore.main:app`, or the `dualstore` console
       script via run()).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                        FastAPI App                       │
    │                                                          │
    │  Middleware:   Request ID → Logging                      │
    │                                                          │
    │  Routes:                                                 │
    │  ┌────────────────────┐ ┌──────────────────────┐ ┌─────┐ │
    │  │ /api/pg/resources  │ │ /api/mongo/resources │ │/hlth│ │
    │  │ PostgresResource-  │ │ MongoResourceStore   │ │both │ │
    │  │ Store              │ │                      │ │     │ │
    │  └────────────────────┘ └──────────────────────┘ └─────┘ │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ InvalidId→400 │ NotFound→404 │ DB→500  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. PostgreSQL: ensure the `resources` table exists (idempotent)
    3. MongoDB: ping
    Any failure aborts startup; uvicorn exits non-zero.

    Shutdown:
    1. Dispose the SQLAlchemy engine
    2. Close the Mongo client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo import AsyncMongoClient
from sqlalchemy.ext.asyncio import AsyncEngine

from dualstore import __version__, mongo
from dualstore.config import Settings, settings
from dualstore.database import (
    create_engine,
    create_session_factory,
    dispose_engine,
    ensure_schema,
)
from dualstore.exceptions import (
    BackendError,
    DualStoreError,
    InvalidIdentifierError,
    NotFoundError,
    ValidationError,
)
from dualstore.middleware.logging import RequestLoggingMiddleware
from dualstore.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from dualstore.routes import health, mongo_resources, pg_resources
from dualstore.stores.base import ResourceStore
from dualstore.stores.mongo import MongoResourceStore
from dualstore.stores.postgres import PostgresResourceStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (collected by the container runtime)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(
    app_settings: Settings,
    engine: Optional[AsyncEngine] = None,
    client: Optional[AsyncMongoClient] = None,
):
    """
    Return the lifespan context manager for the connections this app owns.

    `engine` / `client` are None when the caller injected its own store for
    that backend; the app then neither connects nor closes it.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── Startup ───────────────────────────────────────────────────────
        setup_logging(app_settings.log_level)
        logger.info("DualStore API %s starting up...", __version__)

        try:
            if engine is not None:
                await ensure_schema(engine)
            if client is not None:
                await mongo.ping(client)
        except Exception as e:
            logger.critical("Startup failed, backend unavailable: %s", str(e), exc_info=True)
            raise

        logger.info(
            "Server ready at http://%s:%d",
            app_settings.backend_host,
            app_settings.backend_port,
        )

        yield

        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("DualStore API shutting down...")
        try:
            if engine is not None:
                await dispose_engine(engine)
        finally:
            if client is not None:
                await mongo.close_client(client)
        logger.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _validation_response(message: str, details: list) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": message,
            "details": jsonable_encoder(details),
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        RequestValidationError  → 400 structured validation error
        InvalidIdentifierError  → 400 {"error": "Invalid ID format"}
        ValidationError         → 400 structured validation error
        NotFoundError           → 404 {"error": "Resource not found"}
        BackendError            → 500 generic message
        DualStoreError (base)   → 500 generic message
        Exception (fallback)    → 500 generic message

    Internal details (driver errors, SQL, stack traces) are logged, never
    returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body or path parameter did not match the declared shape."""
        logger.warning(
            "[%s] Request validation failed: %s %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
        )
        return _validation_response("Request validation failed", list(exc.errors()))

    @app.exception_handler(InvalidIdentifierError)
    async def handle_invalid_identifier(request: Request, exc: InvalidIdentifierError):
        logger.warning("[%s] Invalid ID format: %r", request_id_var.get(""), exc.raw_id)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _validation_response(exc.message, exc.errors or [exc.context])

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(BackendError)
    async def handle_backend_error(request: Request, exc: BackendError):
        """Database failure: generic message to the client, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Backend error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(DualStoreError)
    async def handle_app_error(request: Request, exc: DualStoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for unexpected errors. Stack trace is logged server-side only.

        Starlette runs this handler outside the user middleware stack, so the
        request ID header is set here rather than by RequestIDMiddleware.
        """
        rid = request_id_var.get("") or getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    *,
    pg_store: Optional[ResourceStore] = None,
    mongo_store: Optional[MongoResourceStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build from (defaults to the module singleton).
        pg_store:     Relational adapter to mount under /api/pg. Built from
                      settings when omitted.
        mongo_store:  Document adapter to mount under /api/mongo. Built from
                      settings when omitted.

    Returns: Fully configured FastAPI instance. No connection is opened
    until the lifespan starts.
    """
    cfg = app_settings or settings

    engine: Optional[AsyncEngine] = None
    client: Optional[AsyncMongoClient] = None
    if pg_store is None:
        engine = create_engine(cfg)
        pg_store = PostgresResourceStore(create_session_factory(engine))
    if mongo_store is None:
        client = mongo.create_client(cfg)
        mongo_store = MongoResourceStore(mongo.get_collection(client, cfg))

    app = FastAPI(
        title="DualStore API",
        description=(
            "CRUD API for resources stored in PostgreSQL (/api/pg) "
            "and MongoDB (/api/mongo)."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=build_lifespan(cfg, engine, client),
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(pg_resources.create_router(pg_store))
    app.include_router(mongo_resources.create_router(mongo_store))
    app.include_router(health.create_router(pg_store, mongo_store))

    return app


def run() -> None:
    """Console entry point: serve the app on BACKEND_HOST:BACKEND_PORT."""
    uvicorn.run(
        "dualstore.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `dualstore.main:app` to be importable
app = create_app()
