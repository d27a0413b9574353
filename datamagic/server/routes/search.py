"""
Search endpoints.

Every query-string key other than the request options is a field filter::

    GET /v1/cities?state=CA&population__range=100000..&sort=population:desc
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ..models import SearchResponse, CompiledQueryResponse, ErrorResponse
from ..dependencies import get_datamagic, split_query_params
from ...core.datamagic import DataMagic

router = APIRouter()


@router.get(
    "/{api}",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Search an api endpoint",
    description="Filter documents by field; use __ne, __not and __range suffixes for operators.",
)
def search(
    api: str,
    request: Request,
    dm: DataMagic = Depends(get_datamagic),
):
    """Search the index configured for an api endpoint."""
    params, options = split_query_params(request)
    index_name = dm.index_name_from_options({"api": api})
    compiled = dm.compile(params, options)

    results = dm.execute(compiled, index_name)

    return SearchResponse(
        results=results,
        page=compiled.from_ // compiled.size,
        per_page=compiled.size,
    )


@router.get(
    "/{api}/query",
    response_model=CompiledQueryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Explain a search",
    description="Return the search request a query string compiles to, without running it.",
)
def explain(
    api: str,
    request: Request,
    dm: DataMagic = Depends(get_datamagic),
):
    """Compile a search without executing it."""
    params, options = split_query_params(request)

    return CompiledQueryResponse(
        index=dm.index_name_from_options({"api": api}),
        body=dm.compile(params, options).to_dict(),
    )
