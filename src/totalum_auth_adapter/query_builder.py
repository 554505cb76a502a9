"""Totalum query builder from contract where-clauses."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .naming import remote_field_name, serialize_value
from .operators import compile_set, compile_standard, compile_string
from .where import SortBy, WhereClause, WhereInput, WhereOperator, coerce_where

_COMPILERS = [
    compile_standard,
    compile_set,
    compile_string,
]


def _normalise_operator(op: WhereOperator | str | None) -> WhereOperator | None:
    if op is None or isinstance(op, WhereOperator):
        return op
    try:
        return WhereOperator(op)
    except ValueError:
        return None


def compile_clause(clause: WhereClause) -> dict[str, Any] | list[dict[str, Any]]:
    """Compile one clause to a predicate, or to a list of top-level conjuncts."""
    field = remote_field_name(clause.field)
    val = serialize_value(clause.value)
    op = _normalise_operator(clause.operator)
    for compiler in _COMPILERS:
        result = compiler(field, op, val)
        if result is not None:
            return result
    # Fallback: treat as equality
    return {field: val}


class TotalumQueryBuilder:
    """Compiles contract where-clauses, sorting and paging to a Totalum query."""

    def build_filter(self, where: Iterable[WhereInput] | None) -> dict[str, Any]:
        """Build the ``filter`` part of a query.

        OR-connected clauses become a single ``{"or": [...]}`` term placed
        first; every other predicate (including the conjuncts a ``not_in``
        expands to, whatever its connector) is AND-ed after it. Returns
        ``{}`` when nothing constrains the query.
        """
        and_terms: list[dict[str, Any]] = []
        or_terms: list[dict[str, Any]] = []
        for clause in coerce_where(where):
            compiled = compile_clause(clause)
            if isinstance(compiled, list):
                and_terms.extend(compiled)
            elif clause.is_or:
                or_terms.append(compiled)
            else:
                and_terms.append(compiled)

        terms: list[dict[str, Any]] = []
        if or_terms:
            terms.append({"or": or_terms})
        terms.extend(and_terms)
        if not terms:
            return {}
        return {"filter": terms}

    def build_sort(
        self, sort_by: SortBy | Mapping[str, Any] | None
    ) -> dict[str, int] | None:
        """Build ``{remote_field: 1 | -1}``; None when unsorted."""
        sort = SortBy.coerce(sort_by)
        if sort is None or not sort.field:
            return None
        direction = 1 if sort.direction.lower() == "asc" else -1
        return {remote_field_name(sort.field): direction}

    def build_pagination(self, limit: int, offset: int | None = None) -> dict[str, int]:
        """Translate limit/offset to Totalum's limit/page.

        Totalum pages are ``limit`` records wide, so an offset that is not a
        multiple of ``limit`` is rounded down to the start of its page.
        """
        page = offset // limit if offset and limit > 0 else 0
        return {"limit": limit, "page": page}

    def build_query(
        self,
        where: Iterable[WhereInput] | None,
        *,
        limit: int,
        offset: int | None = None,
        sort_by: SortBy | Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        query: dict[str, Any] = dict(self.build_filter(where))
        query["pagination"] = self.build_pagination(limit, offset)
        sort = self.build_sort(sort_by)
        if sort:
            query["sort"] = sort
        return query
