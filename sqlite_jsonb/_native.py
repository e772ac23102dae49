"""JSONB value → Python objects and JSON text.

Type mapping:
    NULL                       → None
    TRUE / FALSE               → bool
    INT / INT5                 → int
    FLOAT / FLOAT5             → float   (Infinity and NaN included)
    TEXT / TEXTJ / TEXT5 / RAW → str
    ARRAY                      → list
    OBJECT                     → dict    (insertion ordered, last key wins)
    RESERVED_13..15            → ERR_UNHANDLED_TYPE

Conversion is the one place a whole tree gets walked, so it is also where
nesting depth is limited.  The walk keeps its own stack: SQLite allows
1000 levels, which is more than Python's default recursion limit.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Optional, Tuple, Union

from ._constants import MAX_DEPTH, NUMERIC_TYPES, TEXT_TYPES, JSONBType
from ._core import Value
from ._errors import ERR_LIMIT_DEPTH, ERR_UNHANDLED_TYPE, JSONBError
from ._numbers import decode_number
from ._text import decode_string
from ._view import BytesLike, BytesView

ValueSource = Union[Value, BytesView, BytesLike]

_CONTAINERS = (JSONBType.ARRAY, JSONBType.OBJECT)

# (converted container, iterator of (key or None, child Value))
_Frame = Tuple[Any, Iterator[Tuple[Optional[str], Value]]]


def as_value(source: ValueSource) -> Value:
    """Accept either an already decoded Value or the raw blob."""
    if isinstance(source, Value):
        return source
    return Value.from_bytes(source)


def scalar_to_python(value: Value) -> Any:
    """Convert a non-container Value."""
    element_type = value.type
    if element_type == JSONBType.NULL:
        return None
    if element_type == JSONBType.TRUE:
        return True
    if element_type == JSONBType.FALSE:
        return False
    if element_type in NUMERIC_TYPES:
        return decode_number(value)
    if element_type in TEXT_TYPES:
        return decode_string(value)
    raise JSONBError(ERR_UNHANDLED_TYPE,
                     "no conversion for element type {}".format(element_type.name),
                     element_type)


def _open(value: Value) -> _Frame:
    if value.type == JSONBType.ARRAY:
        return [], ((None, item) for item in value.iter_array())
    return {}, value.iter_items()


def value_to_python(value: Value) -> Any:
    """Convert a decoded Value and everything below it to Python objects."""
    if value.type not in _CONTAINERS:
        return scalar_to_python(value)

    root = _open(value)
    stack: List[_Frame] = [root]
    while stack:
        container, children = stack[-1]
        try:
            key, child = next(children)
        except StopIteration:
            stack.pop()
            continue

        if child.type in _CONTAINERS:
            if len(stack) >= MAX_DEPTH:
                raise JSONBError(ERR_LIMIT_DEPTH,
                                 "nesting exceeds MAX_DEPTH ({})".format(MAX_DEPTH))
            frame = _open(child)
            converted = frame[0]
            stack.append(frame)
        else:
            converted = scalar_to_python(child)

        if key is None:
            container.append(converted)
        else:
            container[key] = converted

    return root[0]


def to_python(source: ValueSource) -> Any:
    """Decode a JSONB blob (or Value) fully into Python objects."""
    return value_to_python(as_value(source))


def to_json(source: ValueSource, indent: Optional[int] = None) -> str:
    """Render a JSONB blob (or Value) as JSON text.

    Non-finite floats from FLOAT5 payloads come out as the json module
    writes them: Infinity, -Infinity, NaN.
    """
    return json.dumps(to_python(source), ensure_ascii=False, indent=indent)
