from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from src.core.errors.exceptions import SchemaResolutionError


class KeyRole(StrEnum):
    PARTITION = "HASH"
    SORT = "RANGE"


@dataclass(frozen=True, slots=True)
class KeyField:
    name: str
    role: KeyRole


@dataclass(frozen=True, slots=True)
class KeySchema:
    """Ordered primary-key fields of a table: one partition key, optional sort key."""

    fields: tuple[KeyField, ...]

    def __post_init__(self) -> None:
        if not self.fields:
            raise SchemaResolutionError(
                "empty table key schema - unable to determine key fields"
            )
        roles = [f.role for f in self.fields]
        if roles.count(KeyRole.PARTITION) != 1 or roles.count(KeyRole.SORT) > 1:
            raise SchemaResolutionError(
                "key schema must have one partition key and at most one sort key",
                additional_info={"fields": [(f.name, f.role.value) for f in self.fields]},
            )
        if len({f.name for f in self.fields}) != len(self.fields):
            raise SchemaResolutionError("key schema repeats a field name")

    @classmethod
    def from_elements(cls, elements: Iterable[Mapping[str, Any]]) -> KeySchema:
        """Build from DynamoDB ``KeySchema`` elements (``AttributeName``/``KeyType``)."""
        fields = []
        for element in elements:
            try:
                fields.append(
                    KeyField(
                        name=str(element["AttributeName"]),
                        role=KeyRole(element["KeyType"]),
                    )
                )
            except (KeyError, ValueError) as exc:
                raise SchemaResolutionError(
                    f"malformed key schema element: {element!r}"
                ) from exc
        return cls(fields=tuple(fields))

    @classmethod
    def of(cls, partition: str, sort: str | None = None) -> KeySchema:
        fields = [KeyField(partition, KeyRole.PARTITION)]
        if sort is not None:
            fields.append(KeyField(sort, KeyRole.SORT))
        return cls(fields=tuple(fields))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def __iter__(self) -> Iterator[KeyField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)
