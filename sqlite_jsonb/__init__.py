"""sqlite_jsonb: decoder for SQLite's JSONB binary format.

Decode a JSONB blob (as produced by SQLite's jsonb() family of functions)
into a lazily expanded tree of typed values, or straight into Python
objects.

Quick start:
    >>> from sqlite_jsonb import decode, to_python
    >>> blob = bytes([0x2B, 0x00, 0x00])    # ARRAY holding two NULLs
    >>> decode(blob).as_array()
    [Value(NULL, b''), Value(NULL, b'')]
    >>> to_python(blob)
    [None, None]

Values never copy the blob: every Value is a type tag plus a window onto
the caller's buffer, and children are decoded only when asked for.
"""

from __future__ import annotations

from ._constants import (
    MAX_DEPTH,
    NUMERIC_TYPES,
    RESERVED_TYPES,
    TEXT_TYPES,
    JSONBType,
)
from ._core import Value, decode_header
from ._errors import (
    ERR_BAD_PATH,
    ERR_INVALID_HEADER,
    ERR_INVALID_NUMBER,
    ERR_INVALID_SIZE_TYPE,
    ERR_INVALID_UTF8,
    ERR_LIMIT_DEPTH,
    ERR_UNHANDLED_TYPE,
    ERR_UNKNOWN_TYPE,
    JSONBError,
)
from ._native import to_json, to_python
from ._numbers import decode_number
from ._path import extract
from ._text import decode_key, decode_string
from ._view import BytesLike, BytesView, bytes_to_uint

__version__ = "0.1.0"

__all__ = [
    # Public API functions
    "decode",
    "decode_header",
    "to_python",
    "to_json",
    "extract",
    "decode_key",
    "decode_string",
    "decode_number",
    "bytes_to_uint",
    # Types
    "Value",
    "BytesView",
    "JSONBType",
    "TEXT_TYPES",
    "NUMERIC_TYPES",
    "RESERVED_TYPES",
    "MAX_DEPTH",
    # Exception
    "JSONBError",
    # Error codes
    "ERR_INVALID_HEADER",
    "ERR_UNKNOWN_TYPE",
    "ERR_INVALID_SIZE_TYPE",
    "ERR_INVALID_UTF8",
    "ERR_UNHANDLED_TYPE",
    "ERR_INVALID_NUMBER",
    "ERR_LIMIT_DEPTH",
    "ERR_BAD_PATH",
]


def decode(blob: BytesLike) -> Value:
    """Decode the top-level element of a JSONB blob.

    Only the first header is read; children are decoded when the returned
    Value is expanded.  Bytes after the element's payload are ignored.
    """
    return Value.from_bytes(blob)
