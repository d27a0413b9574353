"""
DataMagic REST API Server.

A FastAPI-based HTTP surface for searching imported data sets.

Quick Start:
    >>> from datamagic.server import create_app, run_server
    >>>
    >>> app = create_app()
    >>> run_server(app, host="0.0.0.0", port=8000)

Or using command line:
    $ python -m datamagic.server --host 0.0.0.0 --port 8000 --import

Or with uvicorn:
    $ uvicorn datamagic.server.app:create_app --factory --reload
"""

from .app import create_app
from .config import ServerConfig
from .models import (
    SearchResponse,
    CompiledQueryResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # App
    "create_app",
    "run_server",
    # Config
    "ServerConfig",
    # Models
    "SearchResponse",
    "CompiledQueryResponse",
    "HealthResponse",
    "ErrorResponse",
]


def run_server(
    app=None,
    host: str = "0.0.0.0",
    port: int = 8000,
    log_level: str = "info",
):
    """
    Run the DataMagic server.

    Args:
        app: FastAPI application (creates default if None)
        host: Host to bind to
        port: Port to bind to
        log_level: Logging level
    """
    import uvicorn

    if app is None:
        app = create_app()

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
    )
