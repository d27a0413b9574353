"""
Core DataMagic components.
"""

from .exceptions import (
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

from .importer import (
    CsvImporter,
    RowResult,
    ImportResult,
    FileResult,
    ImportSummary,
)

from .datamagic import DataMagic

__all__ = [
    # Main class
    "DataMagic",
    # Import
    "CsvImporter",
    "RowResult",
    "ImportResult",
    "FileResult",
    "ImportSummary",
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
