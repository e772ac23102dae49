"""Zero-copy byte windows over a caller-owned buffer.

A BytesView is a `[start, end)` pair of absolute indices into one shared,
read-only memoryview.  Slicing a view yields another view over the same
memory, so a whole decoded tree references the single buffer handed to
the top-level decode call and never copies it.
"""

from __future__ import annotations

import struct
from typing import Iterator, Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]

# struct codes for the size-field widths the header can carry.
_UINT_FORMATS = {1: "B", 2: "H", 4: "I", 8: "Q"}


class BytesView:
    """Read-only window `[start, end)` over a shared buffer.

    Indices are absolute: `view.slice(view.start + 1)` drops the first byte,
    and a child view reports positions in the parent's coordinates.
    Equality is element-wise, like comparing two slices of bytes.
    """

    __slots__ = ("buffer", "start", "end")

    def __init__(self, data: BytesLike = b"", start: int = 0,
                 end: Optional[int] = None) -> None:
        mem = data if isinstance(data, memoryview) else memoryview(data)
        # cast() and struct.unpack_from() need a contiguous buffer.
        if not mem.c_contiguous:
            mem = memoryview(mem.tobytes())
        if mem.ndim != 1 or mem.format != "B":
            mem = mem.cast("B")
        if not mem.readonly:
            mem = mem.toreadonly()
        if end is None:
            end = len(mem)
        if not 0 <= start <= end <= len(mem):
            raise IndexError("view range [{}, {}) outside buffer of {} bytes"
                             .format(start, end, len(mem)))
        self.buffer = mem
        self.start = start
        self.end = end

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def __len__(self) -> int:
        return self.end - self.start

    def byte_at(self, index: int) -> int:
        """Return the byte at absolute position `index`."""
        if not self.start <= index < self.end:
            raise IndexError("index {} outside [{}, {})".format(index, self.start, self.end))
        return self.buffer[index]

    def slice(self, start: int, end: Optional[int] = None) -> "BytesView":
        """Sub-view `[start, end)` in absolute indices; `end` defaults to self.end."""
        if end is None:
            end = self.end
        if not self.start <= start <= end <= self.end:
            raise IndexError("slice [{}, {}) outside [{}, {})"
                             .format(start, end, self.start, self.end))
        view = BytesView.__new__(BytesView)
        view.buffer = self.buffer
        view.start = start
        view.end = end
        return view

    def tobytes(self) -> bytes:
        return self.buffer[self.start:self.end].tobytes()

    __bytes__ = tobytes

    def __iter__(self) -> Iterator[int]:
        return iter(self.buffer[self.start:self.end])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BytesView):
            return self.buffer[self.start:self.end] == other.buffer[other.start:other.end]
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.tobytes())

    def __repr__(self) -> str:
        return "BytesView(start={}, end={}, data={!r})".format(
            self.start, self.end, self.tobytes())


def as_view(data: Union[BytesView, BytesLike]) -> BytesView:
    """Wrap a bytes-like object in a view covering all of it."""
    if isinstance(data, BytesView):
        return data
    return BytesView(data)


def bytes_to_uint(view: BytesView, big_endian: bool = True) -> int:
    """Decode the bytes of `view` as one unsigned integer.

    JSONB size fields are always big-endian, whatever the host byte order.
    """
    fmt = _UINT_FORMATS.get(len(view))
    if fmt is None:
        return int.from_bytes(view.tobytes(), "big" if big_endian else "little")
    prefix = ">" if big_endian else "<"
    return struct.unpack_from(prefix + fmt, view.buffer, view.start)[0]
