"""Text payload decoding for the four JSONB string types.

    TEXT     UTF-8, no escapes
    TEXTJ    UTF-8 with RFC 8259 escapes
    TEXT5    UTF-8 with RFC 8259 and JSON5 escapes
    TEXTRAW  UTF-8 that may contain characters JSON text would escape

TEXT and TEXTRAW decode to exactly their bytes.  The escaped forms keep
the escapes as they appeared in the source JSON, so they are resolved
here, one character at a time.
"""

from __future__ import annotations

import string
from typing import TYPE_CHECKING, List

from ._constants import TEXT_TYPES, JSONBType
from ._errors import ERR_INVALID_UTF8, ERR_UNHANDLED_TYPE, JSONBError

if TYPE_CHECKING:
    from ._core import Value

_RFC8259_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_JSON5_ESCAPES = dict(_RFC8259_ESCAPES)
_JSON5_ESCAPES.update({"'": "'", "v": "\v", "0": "\0"})

# A backslash before any of these is a line continuation in JSON5 and
# produces nothing.  "\r\n" is handled separately as a pair.
_LINE_TERMINATORS = frozenset({"\n", "\r", "\u2028", "\u2029"})

_HEXDIGITS = frozenset(string.hexdigits)


def _bad_text(raw: bytes, msg: str) -> JSONBError:
    return JSONBError(ERR_INVALID_UTF8, msg, raw)


def _read_hex(text: str, i: int, width: int, raw: bytes) -> int:
    digits = text[i:i + width]
    if len(digits) != width or not all(c in _HEXDIGITS for c in digits):
        raise _bad_text(raw, "bad hex escape at character {}".format(i))
    return int(digits, 16)


def _unescape(text: str, raw: bytes, json5: bool) -> str:
    """Resolve backslash escapes in `text`.

    Surrogate pairs written as two \\u escapes combine into one code point;
    a lone surrogate is rejected.
    """
    if "\\" not in text:
        return text

    table = _JSON5_ESCAPES if json5 else _RFC8259_ESCAPES
    out: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        if i + 1 >= n:
            raise _bad_text(raw, "dangling backslash at end of text")
        esc = text[i + 1]
        i += 2

        if esc == "u":
            cp = _read_hex(text, i, 4, raw)
            i += 4
            if 0xD800 <= cp <= 0xDBFF:
                if not text.startswith("\\u", i):
                    raise _bad_text(raw, "unpaired surrogate U+{:04X}".format(cp))
                low = _read_hex(text, i + 2, 4, raw)
                if not 0xDC00 <= low <= 0xDFFF:
                    raise _bad_text(raw, "unpaired surrogate U+{:04X}".format(cp))
                cp = 0x10000 + ((cp - 0xD800) << 10) + (low - 0xDC00)
                i += 6
            elif 0xDC00 <= cp <= 0xDFFF:
                raise _bad_text(raw, "unpaired surrogate U+{:04X}".format(cp))
            out.append(chr(cp))
            continue

        if esc in table:
            if esc == "0" and i < n and text[i] in string.digits:
                raise _bad_text(raw, "\\0 followed by a digit at character {}".format(i))
            out.append(table[esc])
            continue

        if json5:
            if esc == "x":
                out.append(chr(_read_hex(text, i, 2, raw)))
                i += 2
                continue
            if esc in _LINE_TERMINATORS:
                if esc == "\r" and text.startswith("\n", i):
                    i += 1
                continue

        raise _bad_text(raw, "invalid escape \\{}".format(esc))

    return "".join(out)


def decode_string(value: "Value") -> str:
    """Decode a text-typed value's payload into a str."""
    if value.type not in TEXT_TYPES:
        raise JSONBError(ERR_UNHANDLED_TYPE,
                         "cannot decode {} as text".format(value.type.name), value.type)

    raw = value.payload.tobytes()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise _bad_text(raw, "invalid utf-8 in text payload")

    if value.type == JSONBType.TEXTJ:
        return _unescape(text, raw, json5=False)
    if value.type == JSONBType.TEXT5:
        return _unescape(text, raw, json5=True)
    return text


def decode_key(key: "Value") -> str:
    """Decode an OBJECT member key.  Keys must be one of the text types."""
    if key.type not in TEXT_TYPES:
        raise JSONBError(ERR_UNHANDLED_TYPE,
                         "object key must be text, got {}".format(key.type.name), key.type)
    return decode_string(key)
