from fastapi import Depends

from loggers import get_logger
from src.core.dynamodb.dependencies import get_dynamodb_client
from src.core.dynamodb.interface import (
    ChunkedScanner,
    DynamoDBClientProtocol,
    KeySchemaResolver,
)
from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import PaginationError, SchemaResolutionError
from src.main.config import Config, get_settings
from src.pager.engine import PaginationEngine, decode_after_cursor
from src.pager.schemas import PageRequest, PageResult
from src.pager.validators import RequestValidator

logger = get_logger(__name__)


class PaginateTableUseCase:
    """Use case for reading one forward page of a table scan."""

    def __init__(
        self,
        *,
        validator: RequestValidator,
        engine: PaginationEngine,
        schema_resolver: KeySchemaResolver,
        scanner: ChunkedScanner,
    ) -> None:
        self.validator = validator
        self.engine = engine
        self.schema_resolver = schema_resolver
        self.scanner = scanner

    async def execute(self, request: PageRequest) -> PageResult:
        validated = self.validator.validate(request)
        start_key = decode_after_cursor(validated.after)
        schema = await self._resolve_schema(validated.table_name)

        result = await self.engine.run(
            validated, schema, self.scanner, start_key=start_key
        )
        logger.debug(
            "[PaginateTable] %s: %d edges, has_next_page=%s",
            validated.table_name,
            len(result.edges),
            result.page_info.has_next_page,
        )
        return result

    async def _resolve_schema(self, table_name: str) -> KeySchema:
        try:
            return await self.schema_resolver.resolve_key_schema(table_name)
        except PaginationError:
            raise
        except Exception as exc:
            raise SchemaResolutionError(
                f"unable to resolve key schema of table {table_name!r}",
                additional_info={"table": table_name},
            ) from exc


def get_paginate_table_use_case(
    settings: Config = Depends(get_settings),
    dynamodb: DynamoDBClientProtocol = Depends(get_dynamodb_client),
) -> PaginateTableUseCase:
    pager = settings.pager
    return PaginateTableUseCase(
        validator=RequestValidator(
            default_page_size=pager.PAGER_DEFAULT_PAGE_SIZE,
            max_page_size=pager.PAGER_MAX_PAGE_SIZE,
        ),
        engine=PaginationEngine(
            max_scan_chunks=pager.PAGER_MAX_SCAN_CHUNKS,
            scan_timeout=pager.PAGER_SCAN_TIMEOUT_SECONDS,
        ),
        schema_resolver=dynamodb,
        scanner=dynamodb,
    )
