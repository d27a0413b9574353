"""
Field expression parsing.

Request parameters name a field and, optionally, an operator joined to it
by a double underscore::

    state=CA            -> (state, EQ)
    state__ne=CA        -> (state, NE)
    age__range=10..20   -> (age, RANGE)

Field names may be dotted paths (``school.zip``) and are passed through
unchanged. Suffixes other than ``range``, ``ne`` and ``not`` are not
operators and stay part of the field name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping


OPERATOR_DELIMITER = "__"


class FieldOperator(str, Enum):
    """Operators a parameter key can carry."""
    EQ = "eq"
    NE = "ne"
    NOT = "not"
    RANGE = "range"

    @property
    def negated(self) -> bool:
        return self in (FieldOperator.NE, FieldOperator.NOT)


# Recognized key suffixes
SUFFIXES = {
    "range": FieldOperator.RANGE,
    "ne": FieldOperator.NE,
    "not": FieldOperator.NOT,
}


@dataclass(frozen=True)
class FilterParam:
    """A single request parameter split into field, operator and value."""
    field: str
    operator: FieldOperator
    raw_value: Any


def normalize_key(key: Any) -> str:
    """Canonical string form of a parameter or option key."""
    if isinstance(key, Enum):
        return str(key.value)
    return str(key)


def normalize_keys(params: Mapping[Any, Any]) -> Dict[str, Any]:
    """Copy a mapping with every key in canonical string form."""
    return {normalize_key(key): value for key, value in params.items()}


def parse_field_expression(key: Any, value: Any) -> FilterParam:
    """
    Split a parameter key into its field name and operator.

    Args:
        key: Parameter key, e.g. ``"age__range"``
        value: Parameter value, carried through untouched

    Returns:
        FilterParam for the key
    """
    key = normalize_key(key)
    field, sep, suffix = key.rpartition(OPERATOR_DELIMITER)

    if sep and field and suffix in SUFFIXES:
        return FilterParam(field, SUFFIXES[suffix], value)

    return FilterParam(key, FieldOperator.EQ, value)


def parse_params(params: Mapping[Any, Any]) -> List[FilterParam]:
    """Parse every entry of a request parameter mapping, in order."""
    return [
        parse_field_expression(key, value)
        for key, value in normalize_keys(params).items()
    ]
