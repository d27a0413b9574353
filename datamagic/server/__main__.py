"""
Command-line entry point for DataMagic server.

Usage:
    python -m datamagic.server [OPTIONS]

Options:
    --host TEXT         Host to bind to (default: 0.0.0.0)
    --port INTEGER      Port to bind to (default: 8000)
    --config TEXT       DataMagic settings file (YAML)
    --import            Import the configured data directory on startup
    --reload            Enable auto-reload
    --workers INTEGER   Number of workers
    --log-level TEXT    Log level (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import os
import uvicorn


def main():
    parser = argparse.ArgumentParser(
        description="DataMagic Server - search imported data over HTTP"
    )

    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="DataMagic settings file (YAML)"
    )
    parser.add_argument(
        "--import",
        dest="import_on_start",
        action="store_true",
        help="Import the configured data directory on startup"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level"
    )

    args = parser.parse_args()

    # Worker processes build their app from the environment
    os.environ["DATAMAGIC_HOST"] = args.host
    os.environ["DATAMAGIC_PORT"] = str(args.port)
    os.environ["DATAMAGIC_WORKERS"] = str(args.workers)
    os.environ["DATAMAGIC_LOG_LEVEL"] = args.log_level
    if args.config:
        os.environ["DATAMAGIC_CONFIG"] = args.config
    if args.import_on_start:
        os.environ["DATAMAGIC_IMPORT_ON_START"] = "true"

    uvicorn.run(
        "datamagic.server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
