"""
Administrative endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..models import HealthResponse
from ..dependencies import get_datamagic
from ... import __version__
from ...core.datamagic import DataMagic

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
def health(dm: DataMagic = Depends(get_datamagic)):
    """Report server and search engine status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        search_engine="up" if dm.client.ping() else "down",
    )
