"""Field-name translation between contract casing and Totalum casing.

The auth contract names fields in camelCase (``emailVerified``); Totalum
tables use snake_case (``email_verified``). Totalum's own audit fields
(``_id``, ``createdAt``, ``updatedAt``, ``createdBy``) keep their names on
both sides, and the contract's ``id`` is Totalum's ``_id``.

Everything here is best-effort: malformed input passes through unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

CONTRACT_ID_FIELD = "id"
REMOTE_ID_FIELD = "_id"

RESERVED_FIELDS: frozenset[str] = frozenset(
    {"_id", "id", "createdAt", "updatedAt", "createdBy"}
)

_UPPER = re.compile(r"([A-Z])")
_SEPARATED_LOWER = re.compile(r"_([a-z])")
_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")
_FRACTION = re.compile(r"(?<=:\d{2})\.(\d+)")


def to_remote_case(name: str) -> str:
    """``emailVerified`` -> ``email_verified``."""
    snake = _UPPER.sub(r"_\1", name).lower()
    return snake[1:] if snake.startswith("_") else snake


def to_contract_case(name: str) -> str:
    """``email_verified`` -> ``emailVerified``."""
    return _SEPARATED_LOWER.sub(lambda m: m.group(1).upper(), name)


def is_reserved_field(name: str) -> bool:
    return name in RESERVED_FIELDS


def remote_field_name(name: str) -> str:
    """Translate a single contract field name (record key, filter or sort)."""
    if name == CONTRACT_ID_FIELD:
        return REMOTE_ID_FIELD
    if is_reserved_field(name):
        return name
    return to_remote_case(name)


def contract_field_name(name: str) -> str:
    if name == REMOTE_ID_FIELD:
        return CONTRACT_ID_FIELD
    if is_reserved_field(name):
        return name
    return to_contract_case(name)


def is_iso_datetime(value: str) -> bool:
    return bool(_ISO_DATETIME.match(value))


def serialize_value(value: Any) -> Any:
    """Convert Python values to what the Totalum API accepts.

    Dates become ISO-8601 text; containers are converted element-wise.
    """
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return record_to_remote(value)
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def _parse_datetime(value: str) -> Any:
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    # fromisoformat on 3.10 takes only 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return value


def json_default(value: Any) -> Any:
    """``default=`` hook for :func:`json.dumps` on outgoing Totalum payloads.

    Reserved fields keep their raw values in :func:`record_to_remote`, so
    dates can still be present when a payload is encoded.
    """
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def deserialize_value(value: Any) -> Any:
    """Inverse of :func:`serialize_value` for values read from Totalum."""
    if isinstance(value, str) and is_iso_datetime(value):
        return _parse_datetime(value)
    if isinstance(value, Mapping):
        return record_to_contract(value)
    if isinstance(value, list):
        # only mapping items are records; scalar lists are left as stored
        return [record_to_contract(v) for v in value]
    return value


def record_to_remote(record: Any) -> Any:
    """Convert a contract record to a Totalum record.

    Reserved fields keep both their key and their raw value; ``id`` is
    renamed to ``_id``.
    """
    if not isinstance(record, Mapping):
        return record
    result: dict[str, Any] = {}
    for key, value in record.items():
        if key == CONTRACT_ID_FIELD:
            result[REMOTE_ID_FIELD] = value
        elif not isinstance(key, str) or is_reserved_field(key):
            result[key] = value
        else:
            result[to_remote_case(key)] = serialize_value(value)
    return result


def record_to_contract(record: Any) -> Any:
    """Convert a Totalum record to a contract record."""
    if not isinstance(record, Mapping):
        return record
    result: dict[str, Any] = {}
    for key, value in record.items():
        if key == REMOTE_ID_FIELD:
            result[CONTRACT_ID_FIELD] = value
        elif not isinstance(key, str) or is_reserved_field(key):
            result[key] = value
        else:
            result[to_contract_case(key)] = deserialize_value(value)
    return result
