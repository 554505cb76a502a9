"""Where-clause and sort types of the auth storage contract."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class WhereOperator(str, Enum):
    """Operators a where-clause may carry."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    IN = "in"
    NOT_IN = "not_in"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"


class Connector(str, Enum):
    """How a clause joins the rest of the query."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class WhereClause:
    """
    One predicate of a contract query.

    Attributes:
        field: Field name in contract casing (``emailVerified``, ``id``).
        value: Scalar, list, datetime or ``None``.
        operator: A :class:`WhereOperator`; ``None`` means equality. Unknown
            strings are kept and compile to equality.
        connector: ``OR`` clauses are grouped into one disjunction, all
            others are AND-ed with it.
    """

    field: str
    value: Any = None
    operator: WhereOperator | str | None = None
    connector: Connector = Connector.AND

    @property
    def is_or(self) -> bool:
        return self.connector == Connector.OR

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WhereClause:
        """Build a clause from the auth library's plain-dict shape."""
        operator = data.get("operator")
        if isinstance(operator, str) and not isinstance(operator, WhereOperator):
            try:
                operator = WhereOperator(operator)
            except ValueError:
                pass
        connector = data.get("connector")
        if not isinstance(connector, Connector):
            is_or = str(connector or "").upper() == Connector.OR.value
            connector = Connector.OR if is_or else Connector.AND
        return cls(
            field=str(data.get("field", "")),
            value=data.get("value"),
            operator=operator,
            connector=connector,
        )


WhereInput = Union[WhereClause, Mapping[str, Any]]


def coerce_where(where: Iterable[WhereInput] | None) -> list[WhereClause]:
    """Normalise ``where`` into a list of :class:`WhereClause`."""
    if not where:
        return []
    return [
        clause if isinstance(clause, WhereClause) else WhereClause.from_dict(clause)
        for clause in where
    ]


@dataclass(frozen=True)
class SortBy:
    """Sort instruction: ``direction`` is ``"asc"`` or ``"desc"``."""

    field: str
    direction: str = "asc"

    @classmethod
    def coerce(cls, sort_by: SortBy | Mapping[str, Any] | None) -> SortBy | None:
        if sort_by is None or isinstance(sort_by, SortBy):
            return sort_by
        return cls(
            field=str(sort_by.get("field", "")),
            direction=str(sort_by.get("direction", "asc")),
        )
