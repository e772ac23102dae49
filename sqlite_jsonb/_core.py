"""JSONB core: header decoding and the lazily expanded value tree.

Every encoded element is a header followed by a payload:

    byte 0, bits 0-3   element type (JSONBType)
    byte 0, bits 4-7   size class
    size class 0-11    payload length is the size class itself
    size class 12-15   payload length in the next 1/2/4/8 bytes, big-endian

ARRAY and OBJECT payloads are the back-to-back encodings of their
children, with no counts, delimiters or padding.  A Value only records
its type and the window of the caller's buffer holding its payload;
children are found by re-running the header decoder over that window
each time they are asked for.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple, Union

from ._constants import (
    MAX_INLINE_SIZE,
    SIZE_CLASS_BYTES,
    SIZE_SHIFT,
    TYPE_MASK,
    JSONBType,
)
from ._errors import (
    ERR_INVALID_HEADER,
    ERR_INVALID_SIZE_TYPE,
    ERR_UNKNOWN_TYPE,
    JSONBError,
)
from ._text import decode_key
from ._view import BytesLike, BytesView, as_view, bytes_to_uint


# ── Header decoding ───────────────────────────────────────────

def decode_header(buffer: BytesView) -> Tuple[JSONBType, BytesView]:
    """Decode the header at `buffer.start`.

    Returns the element type and a view of its payload.  The payload view
    never includes header bytes and never extends past `buffer.end`; this
    bounds check is what keeps every later read inside the caller's buffer.
    """
    if buffer.is_empty:
        raise JSONBError(ERR_INVALID_HEADER, "empty buffer where a header was expected")

    index = buffer.start
    first = buffer.byte_at(index)

    raw_type = first & TYPE_MASK
    try:
        element_type = JSONBType(raw_type)
    except ValueError:
        raise JSONBError(ERR_UNKNOWN_TYPE,
                         "unknown element type 0x{:x}".format(raw_type), raw_type)

    size_class = first >> SIZE_SHIFT
    if size_class <= MAX_INLINE_SIZE:
        size_bytes = 0
    elif size_class in SIZE_CLASS_BYTES:
        size_bytes = SIZE_CLASS_BYTES[size_class]
    else:
        raise JSONBError(ERR_INVALID_SIZE_TYPE,
                         "invalid size class {}".format(size_class), size_class)

    payload_start = index + 1 + size_bytes
    if payload_start > buffer.end:
        raise JSONBError(ERR_INVALID_HEADER,
                         "truncated {}-byte size field at offset {}".format(size_bytes, index))

    if size_bytes == 0:
        payload_size = size_class
    else:
        payload_size = bytes_to_uint(buffer.slice(index + 1, payload_start), big_endian=True)

    payload_end = payload_start + payload_size
    if payload_end > buffer.end:
        raise JSONBError(ERR_INVALID_HEADER,
                         "payload of {} bytes at offset {} runs past end of buffer ({})"
                         .format(payload_size, payload_start, buffer.end))

    return element_type, buffer.slice(payload_start, payload_end)


# ── Value tree ────────────────────────────────────────────────

class Value:
    """One decoded JSONB element: a type plus a window onto its payload.

    For scalars the payload is the literal text of the value (numbers are
    stored as their decimal or JSON5 spelling, not as binary).  For ARRAY
    and OBJECT it holds the encoded children, which are decoded on demand
    by iter_array() / iter_items() and never cached.
    """

    __slots__ = ("type", "payload")

    def __init__(self, type: JSONBType, payload: BytesView) -> None:
        self.type = type
        self.payload = payload

    @classmethod
    def from_view(cls, buffer: BytesView) -> "Value":
        element_type, payload = decode_header(buffer)
        return cls(element_type, payload)

    @classmethod
    def from_bytes(cls, data: Union[BytesView, BytesLike]) -> "Value":
        return cls.from_view(as_view(data))

    @classmethod
    def null(cls) -> "Value":
        """NULL with an empty payload, built without decoding anything."""
        return cls(JSONBType.NULL, BytesView())

    @property
    def start(self) -> int:
        return self.payload.start

    @property
    def end(self) -> int:
        """End of the payload, which is also the end of the whole element."""
        return self.payload.end

    @property
    def is_empty(self) -> bool:
        return self.payload.is_empty

    # ── ARRAY ──

    def iter_array(self) -> Iterator["Value"]:
        """Yield the elements of an ARRAY one at a time.

        Non-arrays have no elements.  A malformed element raises at its
        position, so nothing after it is ever yielded.
        """
        if self.type != JSONBType.ARRAY:
            return
        payload = self.payload
        index = payload.start
        while index < payload.end:
            value = Value.from_view(payload.slice(index))
            yield value
            index = value.end

    def as_array(self) -> List["Value"]:
        """All elements of an ARRAY, or [] for any other type."""
        return list(self.iter_array())

    # ── OBJECT ──

    def iter_members(self) -> Iterator[Tuple["Value", "Value"]]:
        """Yield the raw (key, value) element pairs of an OBJECT.

        Keys are returned undecoded.  The loop stops one byte short of the
        end so a single dangling byte is ignored; a key that is not
        followed by a value fails in decode_header.
        """
        if self.type != JSONBType.OBJECT:
            return
        payload = self.payload
        index = payload.start
        while index < payload.end - 1:
            key = Value.from_view(payload.slice(index))
            value = Value.from_view(payload.slice(key.end))
            index = value.end
            yield key, value

    def iter_items(self) -> Iterator[Tuple[str, "Value"]]:
        """Yield the (key, value) pairs of an OBJECT in encoded order.

        Duplicate keys are yielded as they occur.
        """
        for key, value in self.iter_members():
            yield decode_key(key), value

    def as_object(self) -> Dict[str, "Value"]:
        """Mapping of an OBJECT's members, or {} for any other type.

        Insertion ordered; when a key repeats the later value wins.
        """
        values: Dict[str, Value] = {}
        for key, value in self.iter_items():
            values[key] = value
        return values

    # ── dunder ──

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.type == other.type and self.payload == other.payload

    def __hash__(self) -> int:
        return hash((self.type, self.payload))

    def __repr__(self) -> str:
        return "Value({}, {!r})".format(self.type.name, self.payload.tobytes())
