"""
Custom exceptions for DataMagic.
"""


class DataMagicError(Exception):
    """Base exception for DataMagic."""
    pass


class QueryError(DataMagicError):
    """A search request could not be compiled into a query."""
    pass


class RangeParseError(QueryError):
    """Range expression has a malformed or non-numeric bound."""
    pass


class InvalidValueError(QueryError):
    """Parameter value cannot be coerced to the type its field requires."""
    pass


class FieldTypeLookupError(QueryError):
    """The field type collaborator failed while resolving a field."""
    pass


class GeocodingError(QueryError):
    """Zip code given for a location search is unknown."""
    pass


class ConfigurationError(DataMagicError):
    """Data configuration is missing, invalid, or has no matching endpoint."""
    pass


class InvalidDataError(DataMagicError):
    """Data file is in an invalid format or produced zero rows."""
    pass


class ValidationError(DataMagicError):
    """Input validation error."""
    pass
