"""
API routes for DataMagic server.
"""

from fastapi import APIRouter
from .admin import router as admin_router
from .search import router as search_router


def create_api_router() -> APIRouter:
    """Create the main API router with all sub-routers."""
    api_router = APIRouter()

    # Admin paths first: /{api} would otherwise capture /health
    api_router.include_router(
        admin_router,
        tags=["Admin"],
    )
    api_router.include_router(
        search_router,
        tags=["Search"],
    )

    return api_router
