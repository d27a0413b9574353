"""
Request options and the metadata they compile to.

Metadata is everything in a search request besides the query itself:
pagination (``from``/``size``), projection (``_source``/``fields``) and
sort order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..utils.validation import coerce_int, coerce_list
from .fields import normalize_keys
from .sort import SortSpec, parse_sort


DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100

# Internal fields (underscore-prefixed) are hidden unless asked for
DEFAULT_SOURCE = {"exclude": ["_*"]}

OPTION_KEYS = ("page", "per_page", "fields", "sort", "zip", "distance")


@dataclass
class RequestOptions:
    """
    Pagination, projection, sort and location options of a search request.

    ``per_page`` is clamped to ``[1, max_per_page]`` and ``page`` to
    ``>= 0`` on construction through ``from_mapping``.
    """
    page: int = 0
    per_page: int = DEFAULT_PER_PAGE
    fields: Optional[List[str]] = None
    sort: Optional[str] = None
    zip: Optional[str] = None
    distance: Optional[str] = None

    @classmethod
    def from_mapping(
        cls,
        options: Optional[Mapping[Any, Any]] = None,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ) -> "RequestOptions":
        """
        Build options from a loosely-typed mapping, e.g. query-string values.

        Keys other than the known options are ignored.

        Raises:
            InvalidValueError: If page or per_page is not an integer
        """
        options = normalize_keys(options or {})

        page = coerce_int("page", options.get("page"), 0)
        per_page = coerce_int("per_page", options.get("per_page"), default_per_page)

        return cls(
            page=max(page, 0),
            per_page=min(max(per_page, 1), max_per_page),
            fields=coerce_list(options.get("fields")),
            sort=_text(options.get("sort")),
            zip=_text(options.get("zip")),
            distance=_text(options.get("distance")),
        )

    @property
    def offset(self) -> int:
        return self.page * self.per_page

    @property
    def sort_specs(self) -> List[SortSpec]:
        return parse_sort(self.sort)

    @property
    def wants_location(self) -> bool:
        return bool(self.zip and self.distance)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def build_metadata(options: RequestOptions) -> Dict[str, Any]:
    """
    Compute the request metadata for a set of options.

    Returns:
        ``from``, ``size`` and either ``_source`` exclusion or an explicit
        ``fields`` list, plus ``sort`` when one was requested
    """
    metadata: Dict[str, Any] = {
        "from": options.offset,
        "size": options.per_page,
    }

    if options.fields:
        metadata["_source"] = False
        metadata["fields"] = list(options.fields)
    else:
        metadata["_source"] = {"exclude": list(DEFAULT_SOURCE["exclude"])}

    sort_specs = options.sort_specs
    if sort_specs:
        metadata["sort"] = [spec.to_dict() for spec in sort_specs]

    return metadata
