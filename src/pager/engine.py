import asyncio

from loggers import get_logger
from src.core.dynamodb.attributes import KeyValueMap
from src.core.dynamodb.interface import ChunkedScanner, ScanChunk, ScanFilter
from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import (
    CursorDecodeError,
    InvalidCursorError,
    InvalidRequestError,
    PaginationError,
    ScanError,
)
from src.pager.cursor import CursorCodec
from src.pager.records import Record
from src.pager.schemas import Edge, PageInfo, PageRequest, PageResult

logger = get_logger(__name__)


def decode_after_cursor(after: str | None) -> KeyValueMap | None:
    """Decode the ``after`` cursor of a request into a scan start key."""
    if not after:
        return None
    try:
        return CursorCodec.decode(after)
    except CursorDecodeError as exc:
        raise InvalidCursorError(
            "unable to decode 'after' cursor", additional_info={"reason": exc.message}
        ) from exc


class PaginationEngine:
    """
    Stitch chunked scans into one forward page of exactly ``first`` edges.

    The backend may return fewer items per scan call than asked for even when
    more data exists, so the engine keeps scanning from the continuation key
    until the page is full or the backend reports no continuation key. Items of
    the last chunk beyond ``first`` are discarded; the end cursor always points
    at the last edge actually returned.

    ``max_scan_chunks`` bounds the scan calls per page. When it runs out with a
    continuation key outstanding, the page is returned short with
    ``has_next_page`` set and the end cursor pointing at the continuation key.
    """

    def __init__(
        self, *, max_scan_chunks: int, scan_timeout: float | None = None
    ) -> None:
        self.max_scan_chunks = max_scan_chunks
        self.scan_timeout = scan_timeout

    async def run(
        self,
        request: PageRequest,
        schema: KeySchema,
        scanner: ChunkedScanner,
        *,
        start_key: KeyValueMap | None = None,
    ) -> PageResult:
        if request.filter is None or not request.filter.expression:
            raise InvalidRequestError("missing filter")
        scan_filter = ScanFilter(
            expression=request.filter.expression,
            names=request.filter.expression_names,
            values=request.filter.typed_values(),
        )
        if start_key is None:
            start_key = decode_after_cursor(request.after)

        try:
            async with asyncio.timeout(self.scan_timeout):
                return await self._collect(
                    request, schema, scanner, scan_filter, start_key
                )
        except TimeoutError as exc:
            raise ScanError(
                "scan timed out",
                additional_info={
                    "table": request.table_name,
                    "timeout": self.scan_timeout,
                },
            ) from exc

    async def _collect(
        self,
        request: PageRequest,
        schema: KeySchema,
        scanner: ChunkedScanner,
        scan_filter: ScanFilter,
        resume_key: KeyValueMap | None,
    ) -> PageResult:
        first = request.first

        edges: list[Edge] = []
        page_info = PageInfo()
        chunks = 0

        while len(edges) < first:
            if chunks >= self.max_scan_chunks and resume_key is not None:
                logger.warning(
                    "[PaginationEngine] %s: scan budget of %d chunks spent with %d of %d items, returning short page",
                    request.table_name,
                    self.max_scan_chunks,
                    len(edges),
                    first,
                )
                page_info.has_next_page = True
                page_info.end_cursor = CursorCodec.encode_key(resume_key)
                break

            chunks += 1
            chunk = await self._scan_chunk(
                request.table_name, scanner, scan_filter, first, resume_key, chunks
            )

            cut_off = False
            for index, item in enumerate(chunk.items, start=1):
                record = Record.from_item(item)
                cursor = CursorCodec.encode(schema, record)
                edges.append(Edge(cursor=cursor, node=record.to_node()))

                if len(edges) == first:
                    # Unread items or a continuation key mean more data may follow.
                    page_info.has_next_page = (
                        index < len(chunk.items) or chunk.continuation_key is not None
                    )
                    page_info.end_cursor = cursor
                    cut_off = True
                    break

            if cut_off:
                logger.info(
                    "read '%d' items, want '%d', returning", len(edges), first
                )
                break

            if chunk.continuation_key is None:
                logger.info(
                    "read '%d' items, want '%d', no more data to return",
                    len(edges),
                    first,
                )
                break

            logger.debug(
                "read '%d' items, want '%d', reading next chunk", len(edges), first
            )
            resume_key = chunk.continuation_key

        if edges:
            page_info.start_cursor = edges[0].cursor
            if page_info.end_cursor is None:
                page_info.end_cursor = edges[-1].cursor

        return PageResult(edges=edges, page_info=page_info)

    async def _scan_chunk(
        self,
        table_name: str,
        scanner: ChunkedScanner,
        scan_filter: ScanFilter,
        limit: int,
        start_key: KeyValueMap | None,
        chunk_number: int,
    ) -> ScanChunk:
        try:
            return await scanner.scan(
                table_name=table_name,
                scan_filter=scan_filter,
                limit=limit,
                start_key=start_key,
            )
        except PaginationError:
            raise
        except Exception as exc:
            raise ScanError(
                f"scan of table {table_name!r} failed",
                additional_info={"table": table_name, "chunk": chunk_number},
            ) from exc
