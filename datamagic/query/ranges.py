"""
Range expression parsing.

A range expression is one or more comma-separated segments of the form
``A..B``. Either bound may be left empty to leave that end open::

    "10.."          -> gte 10
    "..10"          -> lte 10
    "10..20"        -> gte 10, lte 20
    "10..20,30..40" -> two disjoint ranges, matched with OR
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import re

from ..core.exceptions import RangeParseError


RANGE_SEPARATOR = ".."
SEGMENT_SEPARATOR = ","

Number = Union[int, float]

_INTEGER = re.compile(r'^[+-]?\d+$')


@dataclass(frozen=True)
class RangeBound:
    """One segment of a range expression; None leaves that end open."""
    lower: Optional[Number] = None
    upper: Optional[Number] = None

    def to_dict(self) -> Dict[str, Number]:
        bounds: Dict[str, Number] = {}
        if self.lower is not None:
            bounds["gte"] = self.lower
        if self.upper is not None:
            bounds["lte"] = self.upper
        return bounds


def parse_number(text: str) -> Number:
    """
    Convert a bound to an int, or to a float if it is not integral.

    Raises:
        ValueError: If the text is not numeric
    """
    text = text.strip()
    if _INTEGER.match(text):
        return int(text)
    value = float(text)
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"not a finite number: {text!r}")
    return value


def parse_range(expression: Any, field: str = "") -> List[RangeBound]:
    """
    Parse a range expression into its bounds, in input order.

    Args:
        expression: The range text, e.g. ``"10..20,30.."``
        field: Field name, used in error messages

    Returns:
        List of RangeBound, one per segment

    Raises:
        RangeParseError: If a segment is malformed or a bound is not numeric
    """
    text = str(expression).strip()
    if not text:
        raise RangeParseError(f"Empty range expression for '{field}'")

    bounds = []
    for segment in text.split(SEGMENT_SEPARATOR):
        segment = segment.strip()
        if RANGE_SEPARATOR not in segment:
            raise RangeParseError(
                f"Invalid range '{segment}' for '{field}': expected 'min..max'"
            )

        low, high = segment.split(RANGE_SEPARATOR, 1)
        if not low.strip() and not high.strip():
            raise RangeParseError(
                f"Invalid range '{segment}' for '{field}': no bounds given"
            )

        try:
            lower = parse_number(low) if low.strip() else None
            upper = parse_number(high) if high.strip() else None
        except ValueError:
            raise RangeParseError(
                f"Invalid range '{segment}' for '{field}': bounds must be numeric"
            ) from None

        bounds.append(RangeBound(lower, upper))

    return bounds
