from typing import Any

from pydantic import ConfigDict, Field, field_validator

from src.core.dynamodb.attributes import (
    AttributeFormatError,
    KeyValueMap,
    key_map_from_envelope,
)
from src.core.schemas import CamelBase


class FilterExpression(CamelBase):
    """Scan filter in the backend's predicate language."""

    expression: str = ""
    expression_names: dict[str, str] | None = None
    expression_values: dict[str, dict[str, Any]] | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("expression_values")
    @classmethod
    def validate_expression_values(
        cls, v: dict[str, dict[str, Any]] | None
    ) -> dict[str, dict[str, Any]] | None:
        if v is not None:
            try:
                key_map_from_envelope(v)
            except AttributeFormatError as exc:
                raise ValueError(f"invalid expression value: {exc}") from exc
        return v

    def typed_values(self) -> KeyValueMap | None:
        if self.expression_values is None:
            return None
        return key_map_from_envelope(self.expression_values)


class PageRequest(CamelBase):
    """
    One forward page over a table.

    ``last`` and ``before`` are accepted on the wire but rejected by the
    request validator.
    """

    table_name: str = ""
    filter: FilterExpression | None = None
    first: int = 0
    after: str | None = None
    last: int = 0
    before: str | None = None

    model_config = ConfigDict(frozen=True)


class Edge(CamelBase):
    cursor: str
    node: dict[str, Any]


class PageInfo(CamelBase):
    """
    Relay page info.

    ``end_cursor`` is normally the cursor of the last edge. When the scan
    budget runs out before the page fills, it is the encoded continuation key
    of the backend instead: a valid ``after`` value that belongs to no edge.
    ``has_previous_page`` is always false because only forward paging exists.
    """

    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: str | None = None
    end_cursor: str | None = None


class PageResult(CamelBase):
    edges: list[Edge] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)
