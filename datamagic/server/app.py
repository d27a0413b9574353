"""
Main FastAPI application for DataMagic.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional

from .. import __version__
from ..config import load_config
from ..core.datamagic import DataMagic
from ..core.exceptions import (
    DataMagicError,
    QueryError,
    ValidationError,
    ConfigurationError,
)
from ..utils.logging import get_logger, setup_logger
from .config import ServerConfig
from .models import ErrorResponse
from .routes import create_api_router
from .middleware import RequestLoggingMiddleware

logger = get_logger("datamagic.server")


def error_status(exc: DataMagicError) -> int:
    """HTTP status for a DataMagic error."""
    if isinstance(exc, (QueryError, ValidationError)):
        return 400
    if isinstance(exc, ConfigurationError):
        return 404
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    config: ServerConfig = app.state.config
    dm: DataMagic = app.state.datamagic

    logger.info("Starting DataMagic server...")
    logger.info(f"Search engine: {dm.settings.es_url} (env '{dm.settings.env}')")

    if config.import_on_start:
        summary = dm.import_all()
        logger.info(
            f"Imported {summary.total_rows} rows from {len(summary.succeeded)} files "
            f"({len(summary.failed)} failed)"
        )

    yield

    logger.info("Server shutdown complete")


def create_app(
    config: Optional[ServerConfig] = None,
    datamagic: Optional[DataMagic] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Server configuration; read from the environment when None
        datamagic: DataMagic instance; built from the settings file when None

    Returns:
        FastAPI application instance
    """
    config = config or ServerConfig.from_env()
    setup_logger("datamagic", level=config.log_level)

    if datamagic is None:
        datamagic = DataMagic(load_config(config.settings_path))

    app = FastAPI(
        title="DataMagic API",
        description="""
# DataMagic - search imported data sets

Each api endpoint configured in a data directory's `data.yaml` is
searchable with flat query-string filters.

## Filters

- `field=value`: match a field
- `field__ne=value`, `field__not=value`: exclude a value
- `field__range=10..20,30..`: numeric ranges

## Options

`page`, `per_page` (max 100), `fields`, `sort` (`field:desc,other`),
`zip` with `distance` (e.g. `30mi`).
        """,
        version=__version__,
        docs_url="/docs" if config.docs_enabled else None,
        redoc_url="/redoc" if config.docs_enabled else None,
        openapi_url="/openapi.json" if config.docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.datamagic = datamagic

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(DataMagicError)
    async def datamagic_exception_handler(request: Request, exc: DataMagicError):
        status_code = error_status(exc)
        if status_code == 500:
            logger.error(f"Unhandled DataMagic error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc) if config.log_level == "DEBUG" else None,
            ).model_dump(),
        )

    api_router = create_api_router()
    app.include_router(api_router, prefix=config.api_prefix)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "name": "DataMagic",
            "version": __version__,
            "docs": "/docs",
            "api": config.api_prefix,
        }

    return app
