"""Membership operators emulated with or / ne, since Totalum has no $in."""

from __future__ import annotations

from typing import Any

from ..where import WhereOperator


def compile_set(
    field: str, op: WhereOperator | None, val: Any
) -> dict[str, Any] | list[dict[str, Any]] | None:
    """Compile ``in`` / ``not_in``. Returns None if not a set op."""
    if op == WhereOperator.IN:
        if isinstance(val, list) and val:
            return {"or": [{field: v} for v in val]}
        # nothing can be a member of an empty set
        return {field: None}
    if op == WhereOperator.NOT_IN:
        if isinstance(val, list) and val:
            return [{field: {"ne": v}} for v in val]
        return []
    return None
