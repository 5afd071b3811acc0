from enum import StrEnum
from typing import Any


class CoreException(Exception):
    def __init__(
        self, message: str | None = None, additional_info: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.additional_info = additional_info


class InfrastructureException(CoreException):
    pass


class ErrorKind(StrEnum):
    """Stage of a page request that failed."""

    INVALID_REQUEST = "invalid_request"
    INVALID_CURSOR = "invalid_cursor"
    SCHEMA_RESOLUTION = "schema_resolution"
    SCAN = "scan"
    RECORD_DECODE = "record_decode"
    CURSOR_ENCODE = "cursor_encode"
    CURSOR_DECODE = "cursor_decode"


class PaginationError(CoreException):
    """
    Base error for the pagination flow.

    ``kind`` tells caller-input mistakes apart from backend faults; the
    underlying cause is kept on ``__cause__`` via ``raise ... from``.
    """

    kind: ErrorKind

    @property
    def is_client_error(self) -> bool:
        return self.kind in {
            ErrorKind.INVALID_REQUEST,
            ErrorKind.INVALID_CURSOR,
            ErrorKind.CURSOR_DECODE,
        }


class InvalidRequestError(PaginationError):
    kind = ErrorKind.INVALID_REQUEST


class InvalidCursorError(PaginationError):
    kind = ErrorKind.INVALID_CURSOR


class SchemaResolutionError(PaginationError):
    kind = ErrorKind.SCHEMA_RESOLUTION


class ScanError(PaginationError):
    kind = ErrorKind.SCAN


class RecordDecodeError(PaginationError):
    kind = ErrorKind.RECORD_DECODE


class CursorEncodeError(PaginationError):
    kind = ErrorKind.CURSOR_ENCODE


class CursorDecodeError(PaginationError):
    kind = ErrorKind.CURSOR_DECODE
