from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from src.core.dynamodb.attributes import KeyValueMap, TypedValue
from src.core.dynamodb.key_schema import KeySchema


@dataclass(frozen=True, slots=True)
class ScanFilter:
    expression: str
    names: Mapping[str, str] | None = None
    values: Mapping[str, TypedValue] | None = None


@dataclass(slots=True)
class ScanChunk:
    """One bounded batch of a scan. ``continuation_key`` is None once exhausted."""

    items: list[dict[str, Any]] = field(default_factory=list)
    continuation_key: KeyValueMap | None = None


class KeySchemaResolver(Protocol):
    async def resolve_key_schema(self, table_name: str) -> KeySchema: ...


class ChunkedScanner(Protocol):
    async def scan(
        self,
        *,
        table_name: str,
        scan_filter: ScanFilter,
        limit: int,
        start_key: KeyValueMap | None = None,
    ) -> ScanChunk: ...


class DynamoDBClientProtocol(KeySchemaResolver, ChunkedScanner, Protocol):
    async def ping(self) -> bool: ...
    async def close(self) -> None: ...
