"""Typed DynamoDB attribute values.

A ``TypedValue`` is a tagged variant mirroring DynamoDB's ``AttributeValue``:
the tag says which of ``S``, ``N``, ``B``, ``BOOL``, ``NULL``, ``L``, ``M``,
``SS``, ``NS`` or ``BS`` is set and the payload keeps the exact wire
representation (numbers stay decimal strings, binary stays bytes).

Three representations are supported:

* wire form, as the aioboto3 client sends and receives it: ``{"S": "x"}``,
  binary as ``bytes``;
* envelope form, the JSON layout used inside cursors and request filters:
  every slot present in a fixed order, unset slots ``null``, binary as base64
  text (compact objects with only the set slot are accepted on input);
* plain Python values through boto3's ``TypeSerializer``/``TypeDeserializer``.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Any, TypeAlias

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer


class AttributeType(StrEnum):
    B = "B"
    BOOL = "BOOL"
    BS = "BS"
    L = "L"
    M = "M"
    N = "N"
    NS = "NS"
    NULL = "NULL"
    S = "S"
    SS = "SS"


# Field order of the envelope; cursors from other instances rely on it.
ENVELOPE_SLOTS: tuple[str, ...] = tuple(t.value for t in AttributeType)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


class AttributeFormatError(ValueError):
    """Raised when a raw value is not a well-formed attribute."""


@dataclass(frozen=True, slots=True)
class TypedValue:
    type: AttributeType
    value: Any

    # ----- wire form ----- #
    @classmethod
    def from_wire(cls, raw: Any) -> TypedValue:
        tag, payload = _single_slot(raw)
        match tag:
            case AttributeType.S:
                return cls(tag, _expect(payload, str, tag))
            case AttributeType.N:
                return cls(tag, _number(payload))
            case AttributeType.B:
                return cls(tag, _bytes(payload, tag))
            case AttributeType.BOOL:
                return cls(tag, _expect(payload, bool, tag))
            case AttributeType.NULL:
                if payload is not True:
                    raise AttributeFormatError("NULL attribute must be true")
                return cls(tag, True)
            case AttributeType.SS:
                return cls(tag, tuple(_expect(v, str, tag) for v in _seq(payload, tag)))
            case AttributeType.NS:
                return cls(tag, tuple(_number(v) for v in _seq(payload, tag)))
            case AttributeType.BS:
                return cls(tag, tuple(_bytes(v, tag) for v in _seq(payload, tag)))
            case AttributeType.L:
                return cls(tag, tuple(cls.from_wire(v) for v in _seq(payload, tag)))
            case AttributeType.M:
                return cls(tag, key_map_from_wire(payload))
        raise AttributeFormatError(f"unsupported attribute type {tag!r}")

    def to_wire(self) -> dict[str, Any]:
        match self.type:
            case AttributeType.SS | AttributeType.NS | AttributeType.BS:
                return {self.type.value: list(self.value)}
            case AttributeType.L:
                return {self.type.value: [v.to_wire() for v in self.value]}
            case AttributeType.M:
                return {self.type.value: key_map_to_wire(self.value)}
        return {self.type.value: self.value}

    # ----- envelope form ----- #
    @classmethod
    def from_envelope(cls, raw: Any) -> TypedValue:
        if not isinstance(raw, Mapping):
            raise AttributeFormatError("attribute must be an object")
        unknown = set(raw) - set(ENVELOPE_SLOTS)
        if unknown:
            raise AttributeFormatError(f"unknown attribute slots: {sorted(unknown)}")
        tag, payload = _single_slot({k: v for k, v in raw.items() if v is not None})
        match tag:
            case AttributeType.B:
                return cls(tag, _b64decode(payload))
            case AttributeType.BS:
                return cls(tag, tuple(_b64decode(v) for v in _seq(payload, tag)))
            case AttributeType.L:
                return cls(tag, tuple(cls.from_envelope(v) for v in _seq(payload, tag)))
            case AttributeType.M:
                return cls(tag, key_map_from_envelope(payload))
        return cls.from_wire({tag.value: payload})

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = dict.fromkeys(ENVELOPE_SLOTS)
        match self.type:
            case AttributeType.B:
                payload: Any = base64.b64encode(self.value).decode("ascii")
            case AttributeType.BS:
                payload = [base64.b64encode(v).decode("ascii") for v in self.value]
            case AttributeType.SS | AttributeType.NS:
                payload = list(self.value)
            case AttributeType.L:
                payload = [v.to_envelope() for v in self.value]
            case AttributeType.M:
                payload = key_map_to_envelope(self.value)
            case _:
                payload = self.value
        envelope[self.type.value] = payload
        return envelope

    # ----- python values ----- #
    @classmethod
    def from_python(cls, value: Any) -> TypedValue:
        try:
            return cls.from_wire(_serializer.serialize(value))
        except TypeError as exc:
            raise AttributeFormatError(str(exc)) from exc

    def to_python(self) -> Any:
        return _deserializer.deserialize(self.to_wire())

    def to_jsonable(self) -> Any:
        """Render as plain JSON: numbers as numbers, binary as base64 text."""
        match self.type:
            case AttributeType.N:
                return _json_number(self.value)
            case AttributeType.NS:
                return [_json_number(v) for v in self.value]
            case AttributeType.B:
                return base64.b64encode(self.value).decode("ascii")
            case AttributeType.BS:
                return [base64.b64encode(v).decode("ascii") for v in self.value]
            case AttributeType.SS:
                return list(self.value)
            case AttributeType.NULL:
                return None
            case AttributeType.L:
                return [v.to_jsonable() for v in self.value]
            case AttributeType.M:
                return {k: v.to_jsonable() for k, v in self.value.items()}
        return self.value


KeyValueMap: TypeAlias = dict[str, TypedValue]


def key_map_from_wire(raw: Any) -> KeyValueMap:
    if not isinstance(raw, Mapping):
        raise AttributeFormatError("attribute map must be an object")
    return {_field_name(k): TypedValue.from_wire(v) for k, v in raw.items()}


def key_map_to_wire(values: Mapping[str, TypedValue]) -> dict[str, dict[str, Any]]:
    return {k: v.to_wire() for k, v in values.items()}


def key_map_from_envelope(raw: Any) -> KeyValueMap:
    if not isinstance(raw, Mapping):
        raise AttributeFormatError("attribute map must be an object")
    return {_field_name(k): TypedValue.from_envelope(v) for k, v in raw.items()}


def key_map_to_envelope(values: Mapping[str, TypedValue]) -> dict[str, dict[str, Any]]:
    return {k: v.to_envelope() for k, v in values.items()}


def key_map_from_python(values: Mapping[str, Any]) -> KeyValueMap:
    return {k: TypedValue.from_python(v) for k, v in values.items()}


# ----- helpers ----- #
def _single_slot(raw: Any) -> tuple[AttributeType, Any]:
    if not isinstance(raw, Mapping) or len(raw) != 1:
        raise AttributeFormatError("attribute must have exactly one type slot")
    ((tag, payload),) = raw.items()
    try:
        return AttributeType(tag), payload
    except ValueError as exc:
        raise AttributeFormatError(f"unsupported attribute type {tag!r}") from exc


def _field_name(name: Any) -> str:
    if not isinstance(name, str):
        raise AttributeFormatError("attribute names must be strings")
    return name


def _expect(payload: Any, kind: type, tag: AttributeType) -> Any:
    if not isinstance(payload, kind):
        raise AttributeFormatError(f"{tag} attribute holds {type(payload).__name__}")
    return payload


def _seq(payload: Any, tag: AttributeType) -> list[Any]:
    if isinstance(payload, (str, bytes)) or not isinstance(payload, (list, tuple, set)):
        raise AttributeFormatError(f"{tag} attribute must be a list")
    return list(payload)


def _number(payload: Any) -> str:
    if not isinstance(payload, str):
        raise AttributeFormatError("N attribute must be a decimal string")
    try:
        parsed = Decimal(payload)
    except InvalidOperation as exc:
        raise AttributeFormatError(f"invalid number {payload!r}") from exc
    if not parsed.is_finite():
        raise AttributeFormatError(f"invalid number {payload!r}")
    return payload


def _bytes(payload: Any, tag: AttributeType) -> bytes:
    if isinstance(payload, bytearray):
        return bytes(payload)
    return _expect(payload, bytes, tag)


def _b64decode(payload: Any) -> bytes:
    if not isinstance(payload, str):
        raise AttributeFormatError("binary attribute must be base64 text")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise AttributeFormatError("binary attribute is not valid base64") from exc


def _json_number(value: str) -> int | float:
    parsed = Decimal(value)
    if parsed == parsed.to_integral_value():
        return int(parsed)
    return float(parsed)
