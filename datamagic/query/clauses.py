"""
Clause building.

Each parsed parameter becomes one or more query fragments. How a field
matches depends on its operator and on its resolved type:

    =================  ========  =========================================
    operator           type      clause
    =================  ========  =========================================
    EQ                 DEFAULT   match on the field
    EQ                 NAME      lower-cased wildcard on ``_<field>``
    EQ                 INTEGER   terms filter over the integer list
    NE / NOT           any       match on the field, negated
    RANGE              any       one range filter per bound, OR'd together
    =================  ========  =========================================

Negation bypasses the NAME and INTEGER strategies; range filters are
never negated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import InvalidValueError
from .fields import FieldOperator, FilterParam
from .ranges import parse_range
from .types import FieldType, TypeResolver


NAME_FIELD_PREFIX = "_"
WILDCARD = "*"
LOCATION_FIELD = "location"


class ClauseKind(str, Enum):
    """Where a clause sits in the assembled query."""
    MATCH = "match"     # query context: match, wildcard
    FILTER = "filter"   # filter context: range, terms, geo_distance


@dataclass(frozen=True)
class Clause:
    """
    One translated query fragment.

    Attributes:
        body: The engine query fragment
        kind: Query or filter context
        negated: Must-not-match instead of must-match
        disjunctive: Filter that is always rendered inside an ``or`` list
    """
    body: Dict[str, Any]
    kind: ClauseKind = ClauseKind.MATCH
    negated: bool = False
    disjunctive: bool = False

    @property
    def is_filter(self) -> bool:
        return self.kind == ClauseKind.FILTER


def name_field(field: str) -> str:
    """Key of the lower-cased copy a NAME field is indexed under."""
    return NAME_FIELD_PREFIX + field


def match_clause(field: str, value: Any, negated: bool = False) -> Clause:
    return Clause({"match": {field: {"query": value}}}, negated=negated)


def wildcard_clause(field: str, value: Any) -> Clause:
    tokens = str(value).lower().split()
    if not tokens:
        raise InvalidValueError(f"Empty name given for '{field}'")
    pattern = " ".join(token + WILDCARD for token in tokens)
    return Clause({"wildcard": {name_field(field): {"value": pattern}}})


def terms_clause(field: str, value: Any) -> Clause:
    return Clause({"terms": {field: parse_integer_list(field, value)}}, kind=ClauseKind.FILTER)


def range_clauses(field: str, value: Any) -> List[Clause]:
    return [
        Clause(
            {"range": {field: bound.to_dict()}},
            kind=ClauseKind.FILTER,
            disjunctive=True,
        )
        for bound in parse_range(value, field)
    ]


def geo_distance_clause(coordinates: Dict[str, float], distance: str) -> Clause:
    return Clause(
        {
            "geo_distance": {
                "distance": distance,
                LOCATION_FIELD: {"lat": coordinates["lat"], "lon": coordinates["lon"]},
            }
        },
        kind=ClauseKind.FILTER,
    )


def parse_integer_list(field: str, value: Any) -> List[int]:
    """
    Parse ``"10,20,40"`` (or a sequence of values) into integers.

    Raises:
        InvalidValueError: If an item is not an integer
    """
    if isinstance(value, (list, tuple)):
        items: Sequence[Any] = value
    else:
        items = str(value).split(",")

    integers = []
    for item in items:
        text = str(item).strip()
        if not text:
            continue
        try:
            integers.append(int(text))
        except ValueError:
            raise InvalidValueError(
                f"Field '{field}' expects integers, got {text!r}"
            ) from None

    if not integers:
        raise InvalidValueError(f"Field '{field}' expects a list of integers")

    return integers


class ClauseBuilder:
    """
    Builds the clauses for parsed parameters.

    Example:
        >>> builder = ClauseBuilder(TypeResolver(data_config))
        >>> builder.build(parse_field_expression("age__range", "10..20"))
        [Clause(body={'range': {'age': {'gte': 10, 'lte': 20}}}, ...)]
    """

    def __init__(self, resolver: Optional[TypeResolver] = None):
        self.resolver = resolver or TypeResolver()

    def build(self, param: FilterParam) -> List[Clause]:
        """Clauses for one parameter, in the order they are rendered."""
        field, value = param.field, param.raw_value

        if param.operator == FieldOperator.RANGE:
            return range_clauses(field, value)

        if param.operator.negated:
            return [match_clause(field, value, negated=True)]

        field_type = self.resolver.resolve(field)

        if field_type == FieldType.NAME:
            return [wildcard_clause(field, value)]

        if field_type == FieldType.INTEGER:
            return [terms_clause(field, value)]

        return [match_clause(field, value)]

    def build_all(self, params: Sequence[FilterParam]) -> List[Clause]:
        clauses = []
        for param in params:
            clauses.extend(self.build(param))
        return clauses
