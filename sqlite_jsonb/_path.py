"""JSON path lookup over a decoded Value.

Paths use SQLite's syntax:

    $               the root value
    .label          OBJECT member; the label runs to the next "." or "["
    ."any label"    OBJECT member, quoted (may contain "." and "[")
    [N]             ARRAY element N, counting from 0
    [#-N]           ARRAY element N from the end ([#-1] is the last one)

Lookup walks the encoded tree directly: only the containers along the
path are expanded, and an ARRAY index stops decoding at the element it
needs.  OBJECT members are scanned to the end so that, as in as_object(),
the last of several equal keys is the one found.

A path that parses but leads nowhere (missing key, index out of range,
indexing into a scalar) gives None rather than an error, which is what
json_extract() does.
"""

from __future__ import annotations

import itertools
import re
from typing import Any, List, Optional, Tuple

from ._constants import JSONBType
from ._core import Value
from ._errors import ERR_BAD_PATH, JSONBError
from ._native import ValueSource, as_value

_KEY = "key"
_INDEX = "index"
_FROM_END = "from_end"

_DIGITS = re.compile(r"[0-9]+")

PathStep = Tuple[str, Any]


def _bad_path(path: str, msg: str) -> JSONBError:
    return JSONBError(ERR_BAD_PATH, "bad JSON path {!r}: {}".format(path, msg), path)


def parse_path(path: str) -> List[PathStep]:
    """Parse a path string into (kind, argument) steps."""
    if not path.startswith("$"):
        raise _bad_path(path, "must start with '$'")

    steps: List[PathStep] = []
    i = 1
    n = len(path)
    while i < n:
        ch = path[i]

        if ch == ".":
            i += 1
            if i < n and path[i] == '"':
                close = path.find('"', i + 1)
                if close < 0:
                    raise _bad_path(path, "unterminated quoted label")
                steps.append((_KEY, path[i + 1:close]))
                i = close + 1
                continue
            j = i
            while j < n and path[j] not in ".[":
                j += 1
            if j == i:
                raise _bad_path(path, "empty label at character {}".format(i))
            steps.append((_KEY, path[i:j]))
            i = j
            continue

        if ch == "[":
            close = path.find("]", i)
            if close < 0:
                raise _bad_path(path, "unterminated '['")
            inner = path[i + 1:close]
            if _DIGITS.fullmatch(inner):
                steps.append((_INDEX, int(inner)))
            elif inner == "#":
                # One past the last element: never present.
                steps.append((_FROM_END, 0))
            elif inner.startswith("#-") and _DIGITS.fullmatch(inner[2:]):
                steps.append((_FROM_END, int(inner[2:])))
            else:
                raise _bad_path(path, "bad array index [{}]".format(inner))
            i = close + 1
            continue

        raise _bad_path(path, "unexpected {!r} at character {}".format(ch, i))

    return steps


def _member(value: Value, label: str) -> Optional[Value]:
    if value.type != JSONBType.OBJECT:
        return None
    found: Optional[Value] = None
    for key, member in value.iter_items():
        if key == label:
            found = member
    return found


def _element(value: Value, index: int) -> Optional[Value]:
    if value.type != JSONBType.ARRAY:
        return None
    return next(itertools.islice(value.iter_array(), index, None), None)


def _element_from_end(value: Value, offset: int) -> Optional[Value]:
    if value.type != JSONBType.ARRAY:
        return None
    items = value.as_array()
    if offset < 1 or offset > len(items):
        return None
    return items[len(items) - offset]


def lookup(value: Value, steps: List[PathStep]) -> Optional[Value]:
    """Follow already parsed steps from `value`."""
    current: Optional[Value] = value
    for kind, arg in steps:
        if kind == _KEY:
            current = _member(current, arg)
        elif kind == _INDEX:
            current = _element(current, arg)
        else:
            current = _element_from_end(current, arg)
        if current is None:
            return None
    return current


def extract(source: ValueSource, path: str) -> Optional[Value]:
    """Return the Value at `path`, or None when nothing is there."""
    steps = parse_path(path)
    return lookup(as_value(source), steps)
