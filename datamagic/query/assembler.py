"""
Query assembly.

Merges built clauses into a single query document, choosing the smallest
structure that expresses them:

1. nothing to match                  -> ``match_all``
2. a single positive query clause    -> that clause alone
3. several query clauses, or any
   negated clause                    -> ``bool`` with ``must``/``must_not``
4. any filter clause                 -> ``filtered`` whose ``query`` is the
                                        result of 1-3 and whose ``filter``
                                        is the lone filter, or an ``or``
                                        list of all of them

Filters on different fields are OR'd together, the same way the bounds
of a multi-range are. Callers relying on AND semantics across filtered
fields must issue separate queries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .clauses import Clause


def match_all() -> Dict[str, Any]:
    return {"match_all": {}}


class QueryAssembler:
    """Combines clauses into one query document."""

    def assemble(
        self,
        clauses: Sequence[Clause],
        geo: Optional[Clause] = None,
    ) -> Dict[str, Any]:
        """
        Assemble clauses, plus an optional geo-distance filter.

        Args:
            clauses: Clauses in parameter order
            geo: Geo-distance clause, rendered after every other filter

        Returns:
            The query document
        """
        clauses = list(clauses)
        if geo is not None:
            clauses.append(geo)

        positives = [c for c in clauses if not c.is_filter and not c.negated]
        negatives = [c for c in clauses if not c.is_filter and c.negated]
        filters = [c for c in clauses if c.is_filter]

        query = self._query(positives, negatives)

        if not filters:
            return query

        return {"filtered": {"query": query, "filter": self._filter(filters)}}

    def _query(
        self,
        positives: List[Clause],
        negatives: List[Clause],
    ) -> Dict[str, Any]:
        if negatives:
            bool_query: Dict[str, Any] = {}
            if positives:
                bool_query["must"] = [c.body for c in positives]
            bool_query["must_not"] = [c.body for c in negatives]
            return {"bool": bool_query}

        if not positives:
            return match_all()

        if len(positives) == 1:
            return positives[0].body

        return {"bool": {"must": [c.body for c in positives]}}

    def _filter(self, filters: List[Clause]) -> Dict[str, Any]:
        if len(filters) == 1 and not filters[0].disjunctive:
            return filters[0].body

        return {"or": [c.body for c in filters]}
