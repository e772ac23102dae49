"""SQLite JSONB constants: element types, size classes and limits.

Format reference: https://sqlite.org/jsonb.html (§3 payload size,
§3.1 element types).
"""

from __future__ import annotations

import enum
from typing import Dict, FrozenSet


# ── Element types (low nibble of the first header byte) ──────
# All sixteen nibble values are named so the lookup in the header
# decoder is exhaustive.  13–15 are reserved by SQLite for future use.

class JSONBType(enum.IntEnum):
    NULL = 0x0
    TRUE = 0x1
    FALSE = 0x2
    INT = 0x3          # canonical RFC 8259 integer text
    INT5 = 0x4         # JSON5 integer: hex, leading "+"
    FLOAT = 0x5        # canonical RFC 8259 floating-point text
    FLOAT5 = 0x6       # JSON5 float: Infinity, NaN, ".5", "5."
    TEXT = 0x7         # string, no escapes
    TEXTJ = 0x8        # string with RFC 8259 escapes
    TEXT5 = 0x9        # string with JSON5 escapes
    TEXTRAW = 0xA      # raw UTF-8 that would need escaping in JSON text
    ARRAY = 0xB
    OBJECT = 0xC
    RESERVED_13 = 0xD
    RESERVED_14 = 0xE
    RESERVED_15 = 0xF


TEXT_TYPES: FrozenSet[JSONBType] = frozenset({
    JSONBType.TEXT,
    JSONBType.TEXTJ,
    JSONBType.TEXT5,
    JSONBType.TEXTRAW,
})

NUMERIC_TYPES: FrozenSet[JSONBType] = frozenset({
    JSONBType.INT,
    JSONBType.INT5,
    JSONBType.FLOAT,
    JSONBType.FLOAT5,
})

RESERVED_TYPES: FrozenSet[JSONBType] = frozenset({
    JSONBType.RESERVED_13,
    JSONBType.RESERVED_14,
    JSONBType.RESERVED_15,
})

# ── Size classes (high nibble of the first header byte) ──────
# 0–11: the nibble is the payload length itself, header is one byte.
# 12–15: the payload length follows in 1/2/4/8 big-endian bytes.
MAX_INLINE_SIZE: int = 11

SIZE_CLASS_BYTES: Dict[int, int] = {
    12: 1,
    13: 2,
    14: 4,
    15: 8,
}

TYPE_MASK: int = 0x0F
SIZE_SHIFT: int = 4

# SQLite refuses JSON nested deeper than this (JSON_MAX_DEPTH).
MAX_DEPTH: int = 1000
