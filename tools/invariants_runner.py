#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Decoder invariants (property tests) against SQLite's own JSONB encoder.
#
# This runner:
# - generates random JSON trees within limits
# - turns them into JSONB blobs with sqlite3's jsonb() (SQLite >= 3.45)
# - checks that sqlite_jsonb decodes each blob back to the source tree,
#   that every container's children tile its payload exactly, and that
#   repeated expansion gives equal results
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation
#   2 -> SQLite too old to produce JSONB

import os, sys, json, random, sqlite3
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from sqlite_jsonb import JSONBType, Value, decode, to_python

SEED = int(os.environ.get("JSONB_SEED", "1337"))
TRIALS = int(os.environ.get("JSONB_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("JSONB_GEN_MAX_DEPTH", "6"))
MAX_KEYS = int(os.environ.get("JSONB_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("JSONB_GEN_MAX_LIST", "6"))
MAX_STR = int(os.environ.get("JSONB_GEN_MAX_STR", "24"))

random.seed(SEED)

def rand_string() -> str:
    # Scalars excluding surrogates; quotes, backslashes and controls now and then
    # so SQLite has to store escaped (TEXTJ) and raw (TEXTRAW) strings too.
    out = []
    n = random.randint(0, MAX_STR)
    for _ in range(n):
        r = random.random()
        if r < 0.70:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.80:
            out.append(random.choice('"\\\n\t\x01'))
        elif r < 0.90:
            out.append(chr(random.randint(0xA0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_number() -> Any:
    if random.random() < 0.6:
        return random.randint(-(2**63), 2**63 - 1)
    return random.uniform(-1e6, 1e6)

def gen_value(depth: int) -> Any:
    r = random.random()
    if depth >= MAX_GEN_DEPTH or r < 0.35:
        s = random.random()
        if s < 0.15:
            return random.choice([None, True, False])
        if s < 0.50:
            return rand_number()
        return rand_string()
    if r < 0.70:
        d: Dict[str, Any] = {}
        for _ in range(random.randint(0, MAX_KEYS)):
            d[rand_string()] = gen_value(depth + 1)
        return d
    return [gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST))]

def check_tiling(value: Value) -> bool:
    """Children of every container end exactly at the container's end."""
    pending: List[Value] = [value]
    while pending:
        v = pending.pop()
        if v.type == JSONBType.ARRAY:
            children = v.as_array()
        elif v.type == JSONBType.OBJECT:
            children = [child for _, child in v.iter_items()]
        else:
            continue
        if children and children[-1].end != v.end:
            return False
        pending.extend(children)
    return True

def main() -> int:
    if sqlite3.sqlite_version_info < (3, 45, 0):
        print(f"SKIP: SQLite {sqlite3.sqlite_version} has no jsonb()")
        return 2

    conn = sqlite3.connect(":memory:")
    for t in range(TRIALS):
        tree = gen_value(0)
        text = json.dumps(tree, ensure_ascii=False)
        blob = conn.execute("SELECT jsonb(?)", (text,)).fetchone()[0]

        # (1) Decoding reproduces the source tree
        got = to_python(blob)
        if got != json.loads(text):
            print("INVARIANT FAIL: decode mismatch", {"trial": t, "json": text[:2000]})
            return 1

        # (2) The root consumes the whole blob
        root = decode(blob)
        if root.end != len(blob):
            print("INVARIANT FAIL: root does not span blob", {"trial": t})
            return 1

        # (3) Children tile their container's payload
        if not check_tiling(root):
            print("INVARIANT FAIL: children do not tile payload", {"trial": t, "json": text[:2000]})
            return 1

        # (4) Expansion is idempotent
        if root.as_array() != root.as_array() or root.as_object() != root.as_object():
            print("INVARIANT FAIL: expansion not idempotent", {"trial": t})
            return 1

        # (5) Agreement with SQLite's own rendering
        rendered = conn.execute("SELECT json(?)", (blob,)).fetchone()[0]
        if to_python(blob) != json.loads(rendered):
            print("INVARIANT FAIL: disagrees with json()", {"trial": t, "json": rendered[:2000]})
            return 1

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
