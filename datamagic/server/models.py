"""
Pydantic models for API responses.
"""

from __future__ import annotations

from pydantic import BaseModel
from typing import List, Dict, Any, Optional


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    search_engine: str


class SearchResponse(BaseModel):
    """Documents matching a search."""
    results: List[Dict[str, Any]]
    page: int
    per_page: int

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "results": [
                        {"name": "San Francisco", "state": "CA", "population": 805235}
                    ],
                    "page": 0,
                    "per_page": 20,
                }
            ]
        }
    }


class CompiledQueryResponse(BaseModel):
    """A compiled search request and the index it targets."""
    index: str
    body: Dict[str, Any]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "index": "development-city-data",
                    "body": {
                        "query": {"match": {"state": {"query": "CA"}}},
                        "from": 0,
                        "size": 20,
                        "_source": {"exclude": ["_*"]},
                    },
                }
            ]
        }
    }
