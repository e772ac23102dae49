"""Numeric payload decoding.

JSONB stores numbers as text, never as binary.  The canonical types hold
RFC 8259 spellings; the "5" types hold JSON5 spellings that SQLite keeps
verbatim (hex integers, leading "+", Infinity, NaN, bare leading or
trailing decimal points).

Python's int() and float() accept more than either grammar (underscores,
whitespace, "inf"), so each payload is matched against its grammar first.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Union

from ._constants import JSONBType
from ._errors import ERR_INVALID_NUMBER, ERR_UNHANDLED_TYPE, JSONBError

if TYPE_CHECKING:
    from ._core import Value

_INT = re.compile(r"-?[0-9]+")
_INT5_HEX = re.compile(r"[+-]?0[xX][0-9a-fA-F]+")
_INT5_DEC = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"-?[0-9]+(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_FLOAT5 = re.compile(
    r"[+-]?(?:Infinity|NaN|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def _payload_text(value: "Value") -> str:
    raw = value.payload.tobytes()
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError:
        raise JSONBError(ERR_INVALID_NUMBER, "non-ASCII numeric payload", raw)


def _bad_number(value: "Value", text: str) -> JSONBError:
    return JSONBError(ERR_INVALID_NUMBER,
                      "invalid {} payload {!r}".format(value.type.name, text),
                      value.payload.tobytes())


def decode_int(value: "Value") -> int:
    text = _payload_text(value)
    if value.type == JSONBType.INT:
        if _INT.fullmatch(text):
            return int(text)
        raise _bad_number(value, text)
    if value.type == JSONBType.INT5:
        if _INT5_HEX.fullmatch(text):
            return int(text, 16)
        if _INT5_DEC.fullmatch(text):
            return int(text)
        raise _bad_number(value, text)
    raise JSONBError(ERR_UNHANDLED_TYPE,
                     "cannot decode {} as an integer".format(value.type.name), value.type)


def decode_float(value: "Value") -> float:
    text = _payload_text(value)
    if value.type == JSONBType.FLOAT:
        pattern = _FLOAT
    elif value.type == JSONBType.FLOAT5:
        pattern = _FLOAT5
    else:
        raise JSONBError(ERR_UNHANDLED_TYPE,
                         "cannot decode {} as a float".format(value.type.name), value.type)
    if not pattern.fullmatch(text):
        raise _bad_number(value, text)
    return float(text)


def decode_number(value: "Value") -> Union[int, float]:
    """Decode any of the four numeric types."""
    if value.type in (JSONBType.INT, JSONBType.INT5):
        return decode_int(value)
    return decode_float(value)
