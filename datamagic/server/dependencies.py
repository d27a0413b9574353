"""
FastAPI dependencies for the DataMagic server.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import Request

from ..core.datamagic import DataMagic
from ..query import OPTION_KEYS


# Query-string keys that never become field filters
RESERVED_KEYS = set(OPTION_KEYS) | {"api", "index"}


def get_datamagic(request: Request) -> DataMagic:
    """Dependency to get the application's DataMagic instance."""
    return request.app.state.datamagic


def split_query_params(request: Request) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split the query string into field filters and request options.

    Option keys (page, per_page, fields, sort, zip, distance) become
    options; every other key is a field filter.
    """
    params: Dict[str, Any] = {}
    options: Dict[str, Any] = {}

    for key, value in request.query_params.items():
        if key in OPTION_KEYS:
            options[key] = value
        elif key not in RESERVED_KEYS:
            params[key] = value

    return params, options
