"""String operators -> case-insensitive ``regex`` predicates."""

from __future__ import annotations

from typing import Any

from ..where import WhereOperator


def compile_string(
    field: str, op: WhereOperator | None, val: Any
) -> dict[str, Any] | None:
    """Compile string operators. Returns None if not a string op.

    The value is used as a pattern verbatim, so regex metacharacters in it
    keep their meaning.
    """
    if op == WhereOperator.CONTAINS:
        pattern = str(val)
    elif op == WhereOperator.STARTS_WITH:
        pattern = f"^{val}"
    elif op == WhereOperator.ENDS_WITH:
        pattern = f"{val}$"
    else:
        return None
    return {field: {"regex": pattern, "options": "i"}}
