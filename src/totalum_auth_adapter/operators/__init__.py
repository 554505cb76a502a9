"""Totalum operator compilers for contract where-clauses.

Each compiler takes an already-translated remote field name, a
:class:`~totalum_auth_adapter.where.WhereOperator` and a serialised value
and returns:

- a single predicate dict,
- a list of predicates that must be AND-ed at the top level, or
- ``None`` when the operator belongs to another family.
"""

from __future__ import annotations

from .set import compile_set
from .standard import compile_standard
from .string import compile_string

__all__ = [
    "compile_standard",
    "compile_set",
    "compile_string",
]
