"""JSONB error codes and exception class.

Every failure in this package is raised as a JSONBError whose `.code` is
one of the ERR_* strings below.  Decoding fails fast: the first problem
found is the one reported, and no partial tree is ever returned.
"""

from __future__ import annotations

from typing import Any

# ── Error codes ───────────────────────────────────────────────

ERR_INVALID_HEADER: str = "ERR_INVALID_HEADER"        # empty or truncated input
ERR_UNKNOWN_TYPE: str = "ERR_UNKNOWN_TYPE"            # type nibble without meaning
ERR_INVALID_SIZE_TYPE: str = "ERR_INVALID_SIZE_TYPE"  # size nibble without meaning
ERR_INVALID_UTF8: str = "ERR_INVALID_UTF8"            # bad text payload or escape
ERR_UNHANDLED_TYPE: str = "ERR_UNHANDLED_TYPE"        # reserved type, non-text key
ERR_INVALID_NUMBER: str = "ERR_INVALID_NUMBER"        # numeric payload off-grammar
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"              # exceeds MAX_DEPTH
ERR_BAD_PATH: str = "ERR_BAD_PATH"                    # malformed JSON path


class JSONBError(Exception):
    """Exception for JSONB decoding errors.

    `.code` is one of the ERR_* strings above.  `.detail` carries the
    offending item where there is one: the raw type nibble, the size
    class, the payload bytes or the JSONBType that could not be handled.
    """

    def __init__(self, code: str, msg: str = "", detail: Any = None) -> None:
        super().__init__(msg or code)
        self.code = code
        self.detail = detail
