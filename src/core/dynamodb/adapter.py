from __future__ import annotations

from types import TracebackType
from typing import Any, Self

import aioboto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from loggers import get_logger
from src.core.dynamodb.attributes import (
    AttributeFormatError,
    KeyValueMap,
    key_map_from_wire,
    key_map_to_wire,
)
from src.core.dynamodb.interface import DynamoDBClientProtocol, ScanChunk, ScanFilter
from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import ScanError, SchemaResolutionError

logger = get_logger(__name__)


class DynamoDBAdapter(DynamoDBClientProtocol):
    """
    Async DynamoDB adapter over aioboto3.

    Usage:
    async with DynamoDBAdapter(...) as dynamodb:
        schema = await dynamodb.resolve_key_schema("animals")
    """

    def __init__(
        self,
        *,
        region: str,
        access_key: str | None = None,
        secret_key: str | None = None,
        endpoint_url: str | None = None,
        max_attempts: int = 3,
    ) -> None:
        self._region = region
        self._access_key = access_key
        self._secret_key = secret_key
        self._endpoint_url = endpoint_url
        self._max_attempts = max_attempts
        self._session = aioboto3.Session()
        self._client_cm: Any = None
        self._client: Any = None

    async def __aenter__(self) -> Self:
        client_kwargs: dict[str, Any] = {
            "region_name": self._region,
            "config": BotoConfig(retries={"max_attempts": self._max_attempts}),
        }
        if self._access_key and self._secret_key:
            client_kwargs["aws_access_key_id"] = self._access_key
            client_kwargs["aws_secret_access_key"] = self._secret_key
        if self._endpoint_url:
            client_kwargs["endpoint_url"] = self._endpoint_url
        self._client_cm = self._session.client("dynamodb", **client_kwargs)
        self._client = await self._client_cm.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close(exc_type, exc, tb)

    def _ensure_client(self) -> Any:
        if self._client is None:
            raise RuntimeError(
                "DynamoDB client is not initialized. Use 'async with DynamoDBAdapter(...):'."
            )
        return self._client

    async def resolve_key_schema(self, table_name: str) -> KeySchema:
        client = self._ensure_client()
        try:
            response = await client.describe_table(TableName=table_name)
        except (ClientError, BotoCoreError) as exc:
            raise SchemaResolutionError(
                f"unable to describe table {table_name!r}",
                additional_info={"table": table_name, "error": _error_code(exc)},
            ) from exc

        elements = response.get("Table", {}).get("KeySchema") or []
        return KeySchema.from_elements(elements)

    async def scan(
        self,
        *,
        table_name: str,
        scan_filter: ScanFilter,
        limit: int,
        start_key: KeyValueMap | None = None,
    ) -> ScanChunk:
        client = self._ensure_client()
        scan_kwargs: dict[str, Any] = {
            "TableName": table_name,
            "FilterExpression": scan_filter.expression,
            "Limit": limit,
        }
        if scan_filter.names:
            scan_kwargs["ExpressionAttributeNames"] = dict(scan_filter.names)
        if scan_filter.values:
            scan_kwargs["ExpressionAttributeValues"] = key_map_to_wire(
                scan_filter.values
            )
        if start_key:
            scan_kwargs["ExclusiveStartKey"] = key_map_to_wire(start_key)

        try:
            response = await client.scan(**scan_kwargs)
        except (ClientError, BotoCoreError) as exc:
            raise ScanError(
                f"scan of table {table_name!r} failed",
                additional_info={"table": table_name, "error": _error_code(exc)},
            ) from exc

        last_key = response.get("LastEvaluatedKey")
        try:
            continuation_key = key_map_from_wire(last_key) if last_key else None
        except AttributeFormatError as exc:
            raise ScanError(
                f"scan of table {table_name!r} returned a malformed continuation key"
            ) from exc

        items = response.get("Items", []) or []
        logger.debug(
            "Scanned %s: %d items, scanned_count=%s, more=%s",
            table_name,
            len(items),
            response.get("ScannedCount"),
            continuation_key is not None,
        )
        return ScanChunk(items=list(items), continuation_key=continuation_key)

    async def ping(self) -> bool:
        client = self._ensure_client()
        try:
            await client.list_tables(Limit=1)
            return True
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB ping failed: %s", _error_code(exc))
            return False

    async def close(
        self,
        exc_type: type[BaseException] | None = None,
        exc: BaseException | None = None,
        tb: TracebackType | None = None,
    ) -> None:
        if self._client_cm:
            await self._client_cm.__aexit__(exc_type, exc, tb)
        self._client = None
        self._client_cm = None


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code", "ClientError"))
    return type(exc).__name__
