from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from src.core.dynamodb.lifecycle import on_dynamodb_shutdown, on_dynamodb_startup
from src.main.config import config
from src.main.sentry import init_sentry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    init_sentry()
    await on_dynamodb_startup(app, config.aws)

    yield

    await on_dynamodb_shutdown(app)
