from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import (
    InvalidCursorError,
    InvalidRequestError,
    SchemaResolutionError,
)
from src.main.config import get_settings
from src.pager.engine import PaginationEngine
from src.pager.schemas import FilterExpression, PageRequest
from src.pager.usecases.paginate import PaginateTableUseCase, get_paginate_table_use_case
from src.pager.validators import RequestValidator
from tests.fakes.dynamodb import InMemoryDynamoDB

FILTER = FilterExpression(expression="attribute_exists(id)")


def _use_case(table: InMemoryDynamoDB) -> PaginateTableUseCase:
    return PaginateTableUseCase(
        validator=RequestValidator(default_page_size=100, max_page_size=1000),
        engine=PaginationEngine(max_scan_chunks=100),
        schema_resolver=table,
        scanner=table,
    )


@pytest.mark.asyncio
async def test_execute_defaults_first_and_returns_page(
    fake_dynamodb: InMemoryDynamoDB,
) -> None:
    result = await _use_case(fake_dynamodb).execute(
        PageRequest(table_name="animals", filter=FILTER)
    )

    assert len(result.edges) == 100
    assert result.page_info.has_next_page is True
    assert fake_dynamodb.describe_calls == ["animals"]


@pytest.mark.asyncio
async def test_invalid_request_makes_no_backend_calls(
    fake_dynamodb: InMemoryDynamoDB,
) -> None:
    with pytest.raises(InvalidRequestError):
        await _use_case(fake_dynamodb).execute(PageRequest(table_name="", filter=FILTER))

    assert fake_dynamodb.describe_calls == []
    assert fake_dynamodb.scan_calls == []


@pytest.mark.asyncio
async def test_invalid_cursor_is_reported_before_schema_lookup(
    fake_dynamodb: InMemoryDynamoDB,
) -> None:
    with pytest.raises(InvalidCursorError):
        await _use_case(fake_dynamodb).execute(
            PageRequest(table_name="animals", filter=FILTER, after="!!")
        )

    assert fake_dynamodb.describe_calls == []
    assert fake_dynamodb.scan_calls == []


@pytest.mark.asyncio
async def test_unknown_table_fails_schema_resolution(
    fake_dynamodb: InMemoryDynamoDB,
) -> None:
    with pytest.raises(SchemaResolutionError):
        await _use_case(fake_dynamodb).execute(
            PageRequest(table_name="missing", filter=FILTER)
        )

    assert fake_dynamodb.scan_calls == []


@pytest.mark.asyncio
async def test_unexpected_resolver_failure_is_wrapped() -> None:
    table = InMemoryDynamoDB(KeySchema.of("id"))
    table.resolve_key_schema = AsyncMock(side_effect=ConnectionError("down"))  # type: ignore[method-assign]

    with pytest.raises(SchemaResolutionError) as exc_info:
        await _use_case(table).execute(PageRequest(table_name="animals", filter=FILTER))

    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_factory_wires_pager_settings(fake_dynamodb: InMemoryDynamoDB) -> None:
    settings = get_settings()

    use_case = get_paginate_table_use_case(settings=settings, dynamodb=fake_dynamodb)  # type: ignore[arg-type]

    assert use_case.validator.default_page_size == settings.pager.PAGER_DEFAULT_PAGE_SIZE
    assert use_case.engine.max_scan_chunks == settings.pager.PAGER_MAX_SCAN_CHUNKS
    assert use_case.scanner is fake_dynamodb
