"""
Query compilation module for DataMagic.

This module provides:
- Field expression parsing (``field__operator`` keys)
- Range and sort expression parsing
- Type-dependent clause building
- Query assembly and request metadata

Example:
    >>> from datamagic.query import QueryCompiler
    >>>
    >>> compiler = QueryCompiler(data_config, geocoder)
    >>> compiled = compiler.compile(
    ...     {"city": "new york", "population__range": "100000.."},
    ...     {"per_page": 50, "sort": "population:desc"},
    ... )
    >>> body = compiled.to_dict()
"""

from .fields import (
    FieldOperator,
    FilterParam,
    normalize_key,
    normalize_keys,
    parse_field_expression,
    parse_params,
)

from .ranges import (
    RangeBound,
    parse_range,
)

from .sort import (
    SortDirection,
    SortSpec,
    parse_sort,
)

from .types import (
    FieldType,
    FieldTypeLookup,
    TypeResolver,
)

from .clauses import (
    Clause,
    ClauseKind,
    ClauseBuilder,
    name_field,
)

from .assembler import QueryAssembler

from .metadata import (
    OPTION_KEYS,
    RequestOptions,
    build_metadata,
)

from .compiler import (
    CompiledQuery,
    QueryCompiler,
    from_params,
)

__all__ = [
    # Fields
    "FieldOperator",
    "FilterParam",
    "normalize_key",
    "normalize_keys",
    "parse_field_expression",
    "parse_params",
    # Ranges
    "RangeBound",
    "parse_range",
    # Sort
    "SortDirection",
    "SortSpec",
    "parse_sort",
    # Types
    "FieldType",
    "FieldTypeLookup",
    "TypeResolver",
    # Clauses
    "Clause",
    "ClauseKind",
    "ClauseBuilder",
    "name_field",
    # Assembly
    "QueryAssembler",
    "OPTION_KEYS",
    "RequestOptions",
    "build_metadata",
    # Compiler
    "CompiledQuery",
    "QueryCompiler",
    "from_params",
]
