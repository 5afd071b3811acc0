from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import httpx
import pytest

from src.pager.cursor import CursorCodec
from tests.fakes.dynamodb import InMemoryDynamoDB

URL = "/v1/pages/"


def _body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "tableName": "animals",
        "filter": {
            "expression": "#s = :s",
            "expressionNames": {"#s": "species"},
            "expressionValues": {":s": {"S": "panda"}},
        },
    }
    body.update(overrides)
    return body


@pytest.fixture(autouse=True)
def _mute_sentry(monkeypatch: pytest.MonkeyPatch) -> Mock:
    capture = Mock()
    monkeypatch.setattr("src.core.errors.handlers.sentry_sdk.capture_exception", capture)
    return capture


@pytest.mark.asyncio
async def test_first_page_is_returned_as_connection(
    async_client_with_fakes: httpx.AsyncClient,
) -> None:
    response = await async_client_with_fakes.post(URL, json=_body(first=3))

    assert response.status_code == 200
    data = response.json()
    assert [edge["node"]["id"] for edge in data["edges"]] == ["0001", "0002", "0003"]
    assert data["edges"][0]["node"] == {"id": "0001", "species": "panda", "age": 1}
    assert data["pageInfo"] == {
        "hasNextPage": True,
        "hasPreviousPage": False,
        "startCursor": data["edges"][0]["cursor"],
        "endCursor": data["edges"][-1]["cursor"],
    }


@pytest.mark.asyncio
async def test_after_cursor_continues_previous_page(
    async_client_with_fakes: httpx.AsyncClient,
) -> None:
    first = (await async_client_with_fakes.post(URL, json=_body(first=100))).json()

    second = await async_client_with_fakes.post(
        URL, json=_body(first=100, after=first["pageInfo"]["endCursor"])
    )

    assert second.status_code == 200
    ids = [edge["node"]["id"] for edge in second.json()["edges"]]
    assert ids[0] == "0101"
    assert len(ids) == 100


@pytest.mark.asyncio
async def test_filter_reaches_scanner(
    async_client_with_fakes: httpx.AsyncClient, fake_dynamodb: InMemoryDynamoDB
) -> None:
    await async_client_with_fakes.post(URL, json=_body(first=1))

    scan_filter = fake_dynamodb.scan_calls[0]["scan_filter"]
    assert scan_filter.expression == "#s = :s"
    assert scan_filter.names == {"#s": "species"}
    assert scan_filter.values[":s"].value == "panda"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"tableName": ""}, "missing table name"),
        ({"filter": None}, "missing filter"),
        ({"last": 5}, "backward paging unsupported"),
        ({"before": "abc"}, "backward paging unsupported"),
    ],
)
async def test_invalid_requests_return_400_without_backend_calls(
    async_client_with_fakes: httpx.AsyncClient,
    fake_dynamodb: InMemoryDynamoDB,
    overrides: dict[str, Any],
    message: str,
) -> None:
    response = await async_client_with_fakes.post(URL, json=_body(**overrides))

    assert response.status_code == 400
    assert response.json() == {
        "error": "Invalid page request",
        "message": message,
        "kind": "invalid_request",
    }
    assert fake_dynamodb.describe_calls == []
    assert fake_dynamodb.scan_calls == []


@pytest.mark.asyncio
async def test_malformed_after_cursor_returns_400(
    async_client_with_fakes: httpx.AsyncClient, fake_dynamodb: InMemoryDynamoDB
) -> None:
    response = await async_client_with_fakes.post(URL, json=_body(after="@@not-base64@@"))

    assert response.status_code == 400
    assert response.json()["kind"] == "invalid_cursor"
    assert fake_dynamodb.scan_calls == []


@pytest.mark.asyncio
async def test_unknown_table_returns_502_and_reports(
    async_client_with_fakes: httpx.AsyncClient, _mute_sentry: Mock
) -> None:
    response = await async_client_with_fakes.post(URL, json=_body(tableName="missing"))

    assert response.status_code == 502
    assert response.json()["kind"] == "schema_resolution"
    _mute_sentry.assert_called_once()


@pytest.mark.asyncio
async def test_malformed_expression_values_return_422(
    async_client_with_fakes: httpx.AsyncClient,
) -> None:
    body = _body()
    body["filter"]["expressionValues"] = {":s": {"S": "a", "N": "1"}}

    response = await async_client_with_fakes.post(URL, json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_end_cursor_decodes_to_last_key(
    async_client_with_fakes: httpx.AsyncClient,
) -> None:
    data = (await async_client_with_fakes.post(URL, json=_body(first=100))).json()

    key = CursorCodec.decode(data["pageInfo"]["endCursor"])

    assert key["id"].value == "0100"
