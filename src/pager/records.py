from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from src.core.dynamodb.attributes import (
    AttributeFormatError,
    KeyValueMap,
    TypedValue,
    key_map_from_python,
    key_map_from_wire,
)
from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import CursorEncodeError, RecordDecodeError


class Record(Mapping[str, TypedValue]):
    """One table row as a map of field name to typed value."""

    __slots__ = ("_values",)

    def __init__(self, values: KeyValueMap) -> None:
        self._values = values

    @classmethod
    def from_item(cls, item: Any) -> Record:
        """Build a record from a raw scan item in client wire form."""
        try:
            return cls(key_map_from_wire(item))
        except AttributeFormatError as exc:
            raise RecordDecodeError(
                f"unable to decode scanned item: {exc}",
            ) from exc

    @classmethod
    def from_python(cls, values: Mapping[str, Any]) -> Record:
        return cls(key_map_from_python(values))

    def project(self, schema: KeySchema) -> KeyValueMap:
        """Restrict the record to the key fields of ``schema``, in schema order."""
        missing = [name for name in schema.names if name not in self._values]
        if missing:
            raise CursorEncodeError(
                "record does not populate its key fields",
                additional_info={"missing": missing},
            )
        return {name: self._values[name] for name in schema.names}

    def to_node(self) -> dict[str, Any]:
        return {name: value.to_jsonable() for name, value in self._values.items()}

    def __getitem__(self, key: str) -> TypedValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Record({self._values!r})"
