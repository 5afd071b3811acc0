"""Cursor encoding and decoding for table pagination.

A cursor is the primary-key projection of a record, serialized as JSON in the
attribute envelope layout (see ``src.core.dynamodb.attributes``) and standard
base64 encoded. Decoding yields a key map usable as the scan start key.

Example cursor payload for a table keyed on ``id``:
    {"id":{"B":null,"BOOL":null,"BS":null,"L":null,"M":null,"N":null,"NS":null,"NULL":null,"S":"11111","SS":null}}
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
import json

from src.core.dynamodb.attributes import (
    AttributeFormatError,
    KeyValueMap,
    TypedValue,
    key_map_from_envelope,
    key_map_to_envelope,
)
from src.core.dynamodb.key_schema import KeySchema
from src.core.errors.exceptions import CursorDecodeError
from src.pager.records import Record

# Escapes applied by other instances' JSON encoders; cursors must be byte-identical.
_HTML_SAFE_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class CursorCodec:
    """Encode records into opaque cursors and decode cursors into start keys."""

    @staticmethod
    def encode(schema: KeySchema, record: Record) -> str:
        """
        Encode the key fields of ``record``.

        Raises:
            CursorEncodeError: If a key field is missing from the record.
        """
        return CursorCodec.encode_key(record.project(schema))

    @staticmethod
    def encode_key(key: Mapping[str, TypedValue]) -> str:
        """Encode an already projected key map, e.g. a scan continuation key."""
        # Field names are sorted so composite keys encode the same in any field order.
        payload = json.dumps(
            key_map_to_envelope(key),
            separators=(",", ":"),
            ensure_ascii=False,
            sort_keys=True,
        )
        for char, escaped in _HTML_SAFE_ESCAPES.items():
            payload = payload.replace(char, escaped)
        return base64.b64encode(payload.encode("utf-8")).decode("ascii")

    @staticmethod
    def decode(cursor: str) -> KeyValueMap:
        """
        Decode a cursor into a typed key map.

        Raises:
            CursorDecodeError: If the cursor is not valid base64, not valid JSON,
                or does not describe a non-empty attribute map.
        """
        try:
            raw = base64.b64decode(cursor.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise CursorDecodeError("cursor is not valid base64") from exc

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CursorDecodeError("cursor payload is not valid JSON") from exc

        try:
            key = key_map_from_envelope(payload)
        except AttributeFormatError as exc:
            raise CursorDecodeError(f"cursor payload is malformed: {exc}") from exc

        if not key:
            raise CursorDecodeError("cursor payload holds no key fields")
        return key


__all__ = ["CursorCodec"]
