"""sqlite-jsonb command-line interface.

Usage:
    sqlite3 db.sqlite "SELECT hex(data) FROM t" | sqlite-jsonb decode --hex
    sqlite-jsonb decode --input blob.bin [--indent 2] [--path '$.a[0]']
    sqlite-jsonb inspect --input blob.bin
    sqlite-jsonb version
"""

from __future__ import annotations

import argparse
import binascii
import itertools
import sys
from typing import Iterable, List, Optional, Tuple

from . import (
    JSONBError,
    JSONBType,
    Value,
    __version__,
    decode,
    extract,
    to_json,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlite-jsonb",
        description="Decode SQLite JSONB blobs",
    )
    sub = parser.add_subparsers(dest="command")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Print a blob as JSON")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read the blob from FILE instead of stdin")
    dec_p.add_argument("--hex", action="store_true",
                       help="Input is hex text, as printed by SQLite's hex()")
    dec_p.add_argument("--indent", type=int, default=None, metavar="N",
                       help="Pretty-print with N spaces of indentation")
    dec_p.add_argument("--path", metavar="PATH",
                       help="Print only the value at a JSON path such as $.a[0]")

    # ── inspect ──
    ins_p = sub.add_parser("inspect", help="List every encoded element and its header")
    ins_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read the blob from FILE instead of stdin")
    ins_p.add_argument("--hex", action="store_true",
                       help="Input is hex text, as printed by SQLite's hex()")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str], as_hex: bool) -> bytes:
    """Read blob bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            raw = f.read()
    else:
        if sys.stdin.isatty():
            print("sqlite-jsonb: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
        raw = sys.stdin.buffer.read()
    if as_hex:
        # Whitespace, including the trailing newline from sqlite3, is ignored.
        return binascii.unhexlify(b"".join(raw.split()))
    return raw


def _cmd_decode(args: argparse.Namespace) -> None:
    blob = _read_input(args.input, args.hex)
    value: Optional[Value] = decode(blob)
    if args.path:
        value = extract(value, args.path)
    if value is None:
        # Nothing at the path; json_extract() gives SQL NULL here.
        print("null")
        return
    print(to_json(value, indent=args.indent))


def inspect_lines(root: Value) -> List[str]:
    """One line per encoded element: offset, header size, type, payload size.

    Offsets are positions in the blob.  Nested elements are indented under
    their container, and OBJECT keys and values both appear in order.
    """
    lines: List[str] = []
    # (value, offset of its header, depth)
    pending: List[Tuple[Value, int, int]] = [(root, 0, 0)]
    while pending:
        value, offset, depth = pending.pop()
        lines.append("{:>8}  {}{:<8} hdr={} len={}".format(
            offset, "  " * depth, value.type.name,
            value.start - offset, len(value.payload)))
        if value.type not in (JSONBType.ARRAY, JSONBType.OBJECT):
            continue
        if value.type == JSONBType.ARRAY:
            elements: Iterable[Value] = value.iter_array()
        else:
            elements = itertools.chain.from_iterable(value.iter_members())
        children: List[Tuple[Value, int, int]] = []
        # Each header starts where the previous element ended.
        child_offset = value.start
        for child in elements:
            children.append((child, child_offset, depth + 1))
            child_offset = child.end
        # Reversed so the stack pops them in encoded order.
        pending.extend(reversed(children))
    return lines


def _cmd_inspect(args: argparse.Namespace) -> None:
    blob = _read_input(args.input, args.hex)
    for line in inspect_lines(decode(blob)):
        print(line)


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"sqlite-jsonb {__version__}")
        return

    try:
        if args.command == "decode":
            _cmd_decode(args)
        elif args.command == "inspect":
            _cmd_inspect(args)
    except JSONBError as e:
        print(f"sqlite-jsonb: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except binascii.Error as e:
        print(f"sqlite-jsonb: bad hex input: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
