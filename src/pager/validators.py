from loggers import get_logger
from src.core.errors.exceptions import InvalidRequestError
from src.pager.schemas import PageRequest

logger = get_logger(__name__)


class RequestValidator:
    """Normalize a raw page request or reject it before any backend call."""

    def __init__(self, *, default_page_size: int, max_page_size: int) -> None:
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def validate(self, request: PageRequest) -> PageRequest:
        if not request.table_name:
            raise InvalidRequestError("missing table name")

        if request.filter is None or not request.filter.expression:
            raise InvalidRequestError(
                "missing filter", additional_info={"table": request.table_name}
            )

        if request.before or request.last > 0:
            raise InvalidRequestError("backward paging unsupported")

        first = request.first
        if first == 0:
            first = self.default_page_size
            logger.debug("[RequestValidator] first not set, defaulting to %d", first)

        if first <= 0:
            raise InvalidRequestError(
                "first must be positive", additional_info={"first": first}
            )
        if first > self.max_page_size:
            raise InvalidRequestError(
                f"first must not exceed {self.max_page_size}",
                additional_info={"first": first},
            )

        return request.model_copy(update={"first": first})
