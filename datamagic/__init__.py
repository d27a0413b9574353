"""
DataMagic - load delimited data into a search engine and query it with
flat request parameters.

Example:
    >>> from datamagic import DataMagic, load_config
    >>>
    >>> dm = DataMagic(load_config())
    >>> dm.import_all("./data/cities")
    >>>
    >>> dm.search(
    ...     {"city": "san", "population__range": "100000.."},
    ...     {"api": "cities", "per_page": 10},
    ... )
"""

from .core import (
    # Main class
    DataMagic,
    # Import results
    ImportResult,
    ImportSummary,
    # Exceptions
    DataMagicError,
    QueryError,
    RangeParseError,
    InvalidValueError,
    FieldTypeLookupError,
    GeocodingError,
    ConfigurationError,
    InvalidDataError,
    ValidationError,
)

from .config import (
    Settings,
    DataConfig,
    load_config,
)

from .query import (
    QueryCompiler,
    CompiledQuery,
    FieldType,
    from_params,
)

from .geo import ZipcodeGeocoder

__version__ = "0.1.0"
__author__ = "DataMagic Team"

__all__ = [
    # Main class
    "DataMagic",
    "ImportResult",
    "ImportSummary",
    # Config
    "Settings",
    "DataConfig",
    "load_config",
    # Query
    "QueryCompiler",
    "CompiledQuery",
    "FieldType",
    "from_params",
    "ZipcodeGeocoder",
    # Exceptions
    "DataMagicError",
    "QueryError",
    "RangeParseError",
    "InvalidValueError",
    "FieldTypeLookupError",
    "GeocodingError",
    "ConfigurationError",
    "InvalidDataError",
    "ValidationError",
]
