"""InMemoryTotalumCrud: dict-backed fake of the Totalum record API for tests."""

from __future__ import annotations

import json
import re
import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .exceptions import TotalumApiError
from .naming import json_default
from .ports import ITotalumCrud

if TYPE_CHECKING:
    from collections.abc import Mapping

_OPERATOR_KEYS = frozenset({"ne", "lte", "gte", "regex", "options"})


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _over_the_wire(data: Mapping[str, Any]) -> dict[str, Any]:
    """Encode and decode a payload as JSON, as the HTTP client would."""
    decoded: dict[str, Any] = json.loads(json.dumps(dict(data), default=json_default))
    return decoded


def _compare(actual: Any, expected: Any, op: str) -> bool:
    if actual is None or expected is None:
        return False
    try:
        return actual <= expected if op == "lte" else actual >= expected
    except TypeError:
        return False


def _match_predicate(record: Mapping[str, Any], field: str, condition: Any) -> bool:
    actual = record.get(field)
    if not (isinstance(condition, dict) and condition.keys() <= _OPERATOR_KEYS):
        return actual == condition
    for op, expected in condition.items():
        if op == "ne" and actual == expected:
            return False
        if op in ("lte", "gte") and not _compare(actual, expected, op):
            return False
        if op == "regex":
            flags = re.IGNORECASE if "i" in condition.get("options", "") else 0
            if not isinstance(actual, str) or not re.search(expected, actual, flags):
                return False
    return True


def matches(record: Mapping[str, Any], term: Mapping[str, Any]) -> bool:
    """Evaluate one Totalum filter term against a stored record."""
    for key, condition in term.items():
        if key == "or":
            if not any(matches(record, sub) for sub in condition):
                return False
        elif not _match_predicate(record, key, condition):
            return False
    return True


class InMemoryTotalumCrud(ITotalumCrud):
    """In-memory implementation of :class:`ITotalumCrud`.

    Understands the filter grammar the query builder emits (equality,
    ``ne``, ``lte``, ``gte``, ``regex``/``options`` and ``or``), pagination
    and single-field sort. Records every call in ``calls`` and can be told
    to fail for given record ids via ``fail_on``.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.fail_on: set[str] = set()
        self.return_empty_create: bool = False

    def _table(self, table: str) -> dict[str, dict[str, Any]]:
        return self.tables.setdefault(table, {})

    def _check_failure(self, record_id: str) -> None:
        if record_id in self.fail_on:
            raise TotalumApiError(500, f"injected failure for {record_id}")

    async def create_record(self, table: str, data: Mapping[str, Any]) -> Any:
        self.calls.append(("create", table, dict(data)))
        if self.return_empty_create:
            return {"data": None}
        record = _over_the_wire(data)
        record_id = str(record.get("_id") or secrets.token_hex(12))
        now = _now_iso()
        record["_id"] = record_id
        record.setdefault("createdAt", now)
        record.setdefault("updatedAt", now)
        self._table(table)[record_id] = record
        return {"data": dict(record)}

    async def get_records(self, table: str, query: Mapping[str, Any]) -> Any:
        self.calls.append(("get", table, query))
        terms = query.get("filter") or []
        items = [
            dict(record)
            for record in self._table(table).values()
            if all(matches(record, term) for term in terms)
        ]
        for field, direction in (query.get("sort") or {}).items():
            items.sort(
                key=lambda r, f=field: (r.get(f) is None, r.get(f)),
                reverse=direction == -1,
            )
        pagination = query.get("pagination") or {}
        limit = int(pagination.get("limit") or len(items) or 1)
        start = int(pagination.get("page") or 0) * limit
        return {"data": items[start : start + limit]}

    async def edit_record_by_id(
        self, table: str, record_id: str, data: Mapping[str, Any]
    ) -> Any:
        self.calls.append(("edit", table, record_id))
        self._check_failure(record_id)
        record = self._table(table).get(record_id)
        if record is None:
            raise TotalumApiError(404, f"record {record_id} not found")
        record.update(_over_the_wire(data))
        record["updatedAt"] = _now_iso()
        return {"data": dict(record)}

    async def delete_record_by_id(self, table: str, record_id: str) -> Any:
        self.calls.append(("delete", table, record_id))
        self._check_failure(record_id)
        if self._table(table).pop(record_id, None) is None:
            raise TotalumApiError(404, f"record {record_id} not found")
        return {"data": {"deletedCount": 1}}

    # ── Test helpers ─────────────────────────────────────────────

    def seed(self, table: str, *records: dict[str, Any]) -> list[str]:
        """Insert raw Totalum records directly; returns their ids."""
        ids = []
        for data in records:
            record = dict(data)
            record_id = str(record.get("_id") or secrets.token_hex(12))
            record["_id"] = record_id
            self._table(table)[record_id] = record
            ids.append(record_id)
        return ids

    def count_calls(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    def clear(self) -> None:
        self.tables.clear()
        self.calls.clear()
        self.fail_on.clear()
