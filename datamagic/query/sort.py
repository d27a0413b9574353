"""
Sort specification parsing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.exceptions import QueryError


class SortDirection(str, Enum):
    """Sort directions."""
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    """Sort on one field."""
    field: str
    direction: SortDirection = SortDirection.ASC

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {self.field: {"order": self.direction.value}}


def parse_sort(spec: Optional[Any]) -> List[SortSpec]:
    """
    Parse ``"state:desc, population:asc,name"`` into ordered sort specs.

    A bare field sorts ascending. Whitespace around tokens and around the
    colon is ignored, empty tokens are skipped, and duplicates are kept.

    Raises:
        QueryError: If a direction is neither asc nor desc
    """
    if not spec:
        return []

    specs = []
    for token in str(spec).split(","):
        name, _, direction = token.partition(":")
        name = name.strip()
        if not name:
            continue

        direction = direction.strip().lower() or SortDirection.ASC.value
        try:
            specs.append(SortSpec(name, SortDirection(direction)))
        except ValueError:
            raise QueryError(
                f"Invalid sort direction '{direction}' for '{name}': use asc or desc"
            ) from None

    return specs
