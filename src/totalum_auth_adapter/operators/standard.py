"""Comparison operators for Totalum filter compilation."""

from __future__ import annotations

from typing import Any

from ..where import WhereOperator

# Totalum has no strict comparisons; lt/gt are approximated by lte/gte and
# boundary values are therefore included.
_TOTALUM_OP_MAP: dict[WhereOperator, str] = {
    WhereOperator.NE: "ne",
    WhereOperator.LT: "lte",
    WhereOperator.LTE: "lte",
    WhereOperator.GT: "gte",
    WhereOperator.GTE: "gte",
}


def compile_standard(
    field: str, op: WhereOperator | None, val: Any
) -> dict[str, Any] | None:
    """Compile equality and comparison operators."""
    if op is None or op == WhereOperator.EQ:
        return {field: val}
    totalum_op = _TOTALUM_OP_MAP.get(op)
    if totalum_op:
        return {field: {totalum_op: val}}
    return None
