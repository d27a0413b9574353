"""
Query compilation for DataMagic.

Turns flat request parameters and request options into a complete search
request: the query document plus pagination, projection and sort
metadata. Compilation is a pure transformation; nothing here talks to the
search engine.

Example:
    >>> compiler = QueryCompiler(data_config, ZipcodeGeocoder())
    >>> compiled = compiler.compile(
    ...     {"name": "San Francisco", "state__ne": "CA"},
    ...     {"page": 1, "per_page": 10, "sort": "population:desc"},
    ... )
    >>> compiled.to_dict()
    {'query': {'bool': {...}}, 'from': 10, 'size': 10,
     '_source': {'exclude': ['_*']}, 'sort': [{'population': {'order': 'desc'}}]}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.exceptions import GeocodingError
from ..geo import Geocoder, default_geocoder
from ..utils.logging import get_logger
from .assembler import QueryAssembler
from .clauses import Clause, ClauseBuilder, geo_distance_clause
from .fields import parse_params
from .metadata import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    RequestOptions,
    build_metadata,
)
from .types import FieldTypeLookup, TypeResolver


logger = get_logger(__name__)


@dataclass
class CompiledQuery:
    """
    A compiled search request.

    ``source`` is either the default exclusion of internal fields or
    ``False``, in which case ``fields`` lists the fields to return.
    """
    query: Dict[str, Any]
    from_: int = 0
    size: int = DEFAULT_PER_PAGE
    source: Union[Dict[str, Any], bool] = field(
        default_factory=lambda: {"exclude": ["_*"]}
    )
    fields: Optional[List[str]] = None
    sort: Optional[List[Dict[str, Any]]] = None

    @property
    def metadata(self) -> Dict[str, Any]:
        """Request-level parameters sent alongside the query."""
        metadata: Dict[str, Any] = {
            "from": self.from_,
            "size": self.size,
            "_source": self.source,
        }
        if self.fields is not None:
            metadata["fields"] = self.fields
        if self.sort is not None:
            metadata["sort"] = self.sort
        return metadata

    def to_dict(self) -> Dict[str, Any]:
        """The single mapping submitted to the search engine."""
        return {"query": self.query, **self.metadata}


class QueryCompiler:
    """
    Compiles request parameters into search requests.

    The compiler keeps no per-call state, so one instance can serve any
    number of concurrent requests.

    Args:
        type_lookup: Source of declared field types, usually a DataConfig
        geocoder: Zip code lookup for location searches
        default_per_page: Page size when a request gives none
        max_per_page: Upper bound on the page size
    """

    def __init__(
        self,
        type_lookup: Optional[FieldTypeLookup] = None,
        geocoder: Optional[Geocoder] = None,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ):
        self.clause_builder = ClauseBuilder(TypeResolver(type_lookup))
        self.assembler = QueryAssembler()
        self.geocoder = geocoder
        self.default_per_page = default_per_page
        self.max_per_page = max_per_page

    def compile(
        self,
        params: Optional[Mapping[Any, Any]] = None,
        options: Optional[Mapping[Any, Any]] = None,
    ) -> CompiledQuery:
        """
        Compile a search request.

        Args:
            params: Field filters, keyed ``field`` or ``field__operator``
            options: page, per_page, fields, sort, zip and distance

        Returns:
            CompiledQuery

        Raises:
            QueryError: If any parameter or option cannot be compiled
        """
        request_options = RequestOptions.from_mapping(
            options,
            default_per_page=self.default_per_page,
            max_per_page=self.max_per_page,
        )

        clauses = self.clause_builder.build_all(parse_params(params or {}))
        query = self.assembler.assemble(clauses, self._location(request_options))
        metadata = build_metadata(request_options)

        compiled = CompiledQuery(
            query=query,
            from_=metadata["from"],
            size=metadata["size"],
            source=metadata["_source"],
            fields=metadata.get("fields"),
            sort=metadata.get("sort"),
        )
        logger.debug(f"Compiled query: {compiled.to_dict()}")

        return compiled

    def _location(self, options: RequestOptions) -> Optional[Clause]:
        """Geo-distance clause, when both zip and distance were given."""
        if not options.wants_location:
            return None

        if self.geocoder is None:
            raise GeocodingError("Location search requested but no geocoder is configured")

        coordinates = self.geocoder.coordinates_for_zip(options.zip)
        if coordinates is None:
            raise GeocodingError(f"Unknown zip code '{options.zip}'")

        return geo_distance_clause(coordinates, options.distance)


def from_params(
    params: Optional[Mapping[Any, Any]],
    options: Optional[Mapping[Any, Any]] = None,
    config: Optional[FieldTypeLookup] = None,
    geocoder: Optional[Geocoder] = None,
) -> Dict[str, Any]:
    """
    Compile parameters and options into a search request mapping.

    Args:
        params: Field filters
        options: Request options
        config: Source of declared field types
        geocoder: Zip code lookup; the bundled table when None

    Returns:
        ``{"query": ..., "from": ..., "size": ..., ...}``
    """
    return QueryCompiler(config, geocoder or default_geocoder()).compile(params, options).to_dict()
