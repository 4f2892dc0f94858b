"""FastAPI application for the Nexus Flow REST API."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nexus_flow import __version__
from nexus_flow.core.config import Config, get_config
from nexus_flow.core.errors import AppError
from nexus_flow.schemas import utcnow
from nexus_flow.storage.database import Database

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, code: str, details=None) -> JSONResponse:
    body = {"message": message, "code": code}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content={"error": body})


def _field_name(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    config: Config = app.state.config
    logger.info(f"Starting Nexus Flow API ({config.environment})...")

    db = Database(config.db_url)
    await db.connect()
    app.state.db = db

    yield

    await db.close()
    logger.info("API shutdown complete")


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": {"message", "code", "details"?}}``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} [{exc.code}]")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
            for err in exc.errors()
        ]
        return _error_response(400, "Validation error", "VALIDATION_ERROR", details)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return _error_response(exc.status_code, str(exc.detail), code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error_response(500, "Internal server error", "INTERNAL_ERROR")


def create_app(config: Config | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or get_config()

    docs = config.docs_enabled
    app = FastAPI(
        title="Nexus Flow",
        description="Tasks, inventory, finance and focus sessions",
        version=__version__,
        lifespan=lifespan,
        docs_url="/documentation" if docs else None,
        redoc_url=None,
        openapi_url="/documentation/openapi.json" if docs else None,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "timestamp": utcnow().isoformat() + "Z"}

    from nexus_flow.web.routes import finance, focus, inventory, tasks

    app.include_router(tasks.router, prefix="/api")
    app.include_router(inventory.router, prefix="/api")
    app.include_router(finance.router, prefix="/api")
    app.include_router(focus.router, prefix="/api")

    return app


def run_server(host: str | None = None, port: int | None = None, log_level: str = "info") -> None:
    """Run the API server."""
    import uvicorn

    config = get_config()
    host = host or config.web.host
    port = port or config.web.port

    logger.info(f"Starting API at http://{host}:{port}")

    uvicorn.run(
        "nexus_flow.web.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level=log_level,
    )
