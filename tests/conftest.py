from collections.abc import AsyncGenerator, Generator
import os

from fastapi import FastAPI
import httpx
import pytest
import pytest_asyncio

from src.core.dynamodb.dependencies import get_dynamodb_client
from src.core.dynamodb.key_schema import KeySchema
from src.main.config import Config, get_settings
from src.main.web import get_application
from tests.fakes.dynamodb import InMemoryDynamoDB
from tests.helpers.overrides import DependencyOverrides
from tests.helpers.providers import ProvideValue


@pytest.fixture(scope="session")
def settings() -> Config:
    os.environ.setdefault("TESTING", "true")
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def app() -> FastAPI:
    return get_application()


@pytest.fixture
def dependency_overrides(app: FastAPI) -> Generator[DependencyOverrides]:
    overrides = DependencyOverrides(app)
    yield overrides
    overrides.reset()


@pytest.fixture
def animal_rows() -> list[dict[str, object]]:
    return [
        {"id": f"{i:04d}", "species": "panda" if i % 2 else "koala", "age": i}
        for i in range(1, 251)
    ]


@pytest.fixture
def fake_dynamodb(animal_rows: list[dict[str, object]]) -> InMemoryDynamoDB:
    return InMemoryDynamoDB(KeySchema.of("id"), animal_rows, chunk_size=40)


@pytest.fixture
def app_with_fakes(
    app: FastAPI,
    dependency_overrides: DependencyOverrides,
    fake_dynamodb: InMemoryDynamoDB,
    settings: Config,
) -> FastAPI:
    dependency_overrides.set(get_dynamodb_client, ProvideValue(fake_dynamodb))
    dependency_overrides.set(get_settings, ProvideValue(settings))
    return app


@pytest_asyncio.fixture
async def async_client_with_fakes(
    app_with_fakes: FastAPI,
) -> AsyncGenerator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app_with_fakes)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
