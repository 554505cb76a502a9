"""Contract record <-> pydantic model mapping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import TotalumPersistenceError

T_Model = TypeVar("T_Model", bound=BaseModel)


class AuthModelMapper(Generic[T_Model]):
    """
    Maps adapter records (contract casing) to pydantic models and back.

    Uses ``model_dump(mode="python", by_alias=True)`` so datetimes stay
    native; the adapter serialises them on the way to Totalum.
    """

    def __init__(
        self,
        model_cls: type[T_Model],
        *,
        exclude_fields: set[str] | None = None,
        exclude_none: bool = False,
    ) -> None:
        self.model_cls = model_cls
        self._exclude_fields = exclude_fields or set()
        self._exclude_none = exclude_none

    def to_record(self, model: T_Model) -> dict[str, Any]:
        data = model.model_dump(
            mode="python", by_alias=True, exclude_none=self._exclude_none
        )
        return {k: v for k, v in data.items() if k not in self._exclude_fields}

    def from_record(self, record: Mapping[str, Any]) -> T_Model:
        if not isinstance(record, Mapping):
            raise TotalumPersistenceError("Record must be a mapping")
        try:
            return self.model_cls.model_validate(dict(record))
        except ValidationError as e:
            raise TotalumPersistenceError(
                f"Invalid {self.model_cls.__name__} record: {e}"
            ) from e

    def to_records(self, models: list[T_Model]) -> list[dict[str, Any]]:
        return [self.to_record(m) for m in models]

    def from_records(self, records: list[Mapping[str, Any]]) -> list[T_Model]:
        return [self.from_record(r) for r in records]
