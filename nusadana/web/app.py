"""FastAPI application for the NusaDana village project API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from nusadana.config import AppConfig, get_config
from nusadana.core.logging import configure_logging
from nusadana.db.connection import Database
from nusadana.storage import StorageBackend, StorageError, build_storage
from nusadana.web.routes import (
    auth,
    documents,
    funds,
    health,
    metrics,
    progress,
    projects,
    reports,
    schedule,
)

logger = structlog.get_logger()


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            logger.info(
                "request_completed",
                status_code=response.status_code,
            )
            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as exc:
            logger.error("request_failed", error=str(exc))
            raise


# Exception Handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed bodies and parameters as 400 with the first message."""
    details = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", "").removeprefix("Value error, "),
        }
        for err in exc.errors()
    ]
    message = details[0]["msg"] if details else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message, "details": details})


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("database_error", error=str(exc), exc_info=exc)
    # DBAPIError wraps the driver exception; its message is the useful part
    message = str(getattr(exc, "orig", None) or exc)
    return JSONResponse(status_code=500, content={"error": message})


async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error("storage_error", error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", error=str(exc), exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal Server Error"})


def create_app(
    config: AppConfig | None = None,
    storage: StorageBackend | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        config: Settings to use; read from the environment when omitted
        storage: Document store override; built from ``config.storage`` when omitted
    """
    config = config or get_config()
    configure_logging(
        level=config.log_level,
        json_logs=config.json_logs or None,
        environment=config.environment,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(config.db)
        if config.db.create_tables:
            await db.create_all()
        app.state.db = db
        app.state.storage = storage or build_storage(config.storage)
        logger.info("app_started", environment=config.environment)
        try:
            yield
        finally:
            await app.state.storage.aclose()
            await db.dispose()
            logger.info("app_stopped")

    app = FastAPI(
        title="NusaDana API",
        description="Village infrastructure projects, funds and accountability reports",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus Metrics (own registry so several apps can live in one process)
    Instrumentator(registry=CollectorRegistry()).instrument(app).expose(app)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include Routers
    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(schedule.router)
    app.include_router(funds.router)
    app.include_router(progress.router)
    app.include_router(documents.router)
    app.include_router(reports.router)
    app.include_router(metrics.router)
    app.include_router(health.router)

    return app
