"""
Field type resolution.

The compiler holds no schema knowledge of its own: the matching strategy
for each field comes from a type lookup, normally a DataConfig.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Protocol

from ..core.exceptions import FieldTypeLookupError


class FieldType(str, Enum):
    """Matching strategies selected by a field's declared type."""
    DEFAULT = "default"
    NAME = "name"
    INTEGER = "integer"


class FieldTypeLookup(Protocol):
    """Anything that can report the declared type of a field."""

    def field_type(self, name: str) -> Optional[str]:
        ...


class TypeResolver:
    """
    Resolves field names to FieldType through a lookup collaborator.

    Unknown fields, and declared types with no special matching, resolve
    to DEFAULT. Errors raised by the lookup are not replaced by a default.
    """

    def __init__(self, lookup: Optional[FieldTypeLookup] = None):
        self._lookup = lookup

    def resolve(self, field: str) -> FieldType:
        if self._lookup is None:
            return FieldType.DEFAULT

        try:
            declared: Any = self._lookup.field_type(field)
        except Exception as e:
            raise FieldTypeLookupError(
                f"Could not resolve type of field '{field}': {e}"
            ) from e

        if declared is None:
            return FieldType.DEFAULT
        if isinstance(declared, FieldType):
            return declared

        try:
            return FieldType(str(declared).lower())
        except ValueError:
            return FieldType.DEFAULT
