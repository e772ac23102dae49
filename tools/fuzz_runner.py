#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutation fuzzing of the JSONB decoder.
#
# Generates three fuzz categories:
#   A) valid blobs with random byte flips
#   B) valid blobs truncated at a random point
#   C) random byte strings
#
# Every input is fully decoded (to_python, inspect listing, a path lookup).
# Decoding may succeed or raise JSONBError; any other exception is a
# decoder bug and prints a repro payload and exits non-zero.

import os, sys, json, random, traceback
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from sqlite_jsonb import JSONBError, decode, extract, to_python
from sqlite_jsonb._cli import inspect_lines

SEED = int(os.environ.get("JSONB_SEED", "4242"))
ROUNDS = int(os.environ.get("JSONB_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

def crash(label: str, blob: bytes, ctx: Dict[str, Any]) -> None:
    print("CRASH:", label)
    print("INPUT:", blob.hex())
    print("CTX:", json.dumps(ctx)[:4000])
    traceback.print_exc()
    raise SystemExit(1)

# --- generators ---

def enc(element_type: int, payload: bytes) -> bytes:
    n = len(payload)
    if n <= 11:
        return bytes([(n << 4) | element_type]) + payload
    for size_class, width in ((12, 1), (13, 2), (14, 4), (15, 8)):
        if n < 1 << (8 * width):
            return bytes([(size_class << 4) | element_type]) + n.to_bytes(width, "big") + payload
    raise ValueError("payload too large")

def rand_ascii(nmax: int) -> bytes:
    n = random.randint(0, nmax)
    return bytes(random.randint(0x20, 0x7E) for _ in range(n))

def rand_blob(depth: int = 0) -> bytes:
    r = random.random()
    if depth > 4 or r < 0.4:
        s = random.random()
        if s < 0.2:
            return bytes([random.choice([0, 1, 2])])
        if s < 0.4:
            return enc(random.choice([3, 4]), str(random.randint(-999, 999)).encode())
        if s < 0.5:
            return enc(random.choice([5, 6]), random.choice([b"1.5", b".5", b"Infinity", b"-2e3"]))
        return enc(random.choice([7, 8, 9, 10]), rand_ascii(20))
    if r < 0.7:
        members = b"".join(enc(7, rand_ascii(8)) + rand_blob(depth + 1)
                           for _ in range(random.randint(0, 5)))
        return enc(12, members)
    return enc(11, b"".join(rand_blob(depth + 1) for _ in range(random.randint(0, 5))))

def flip(blob: bytes) -> bytes:
    b = bytearray(blob)
    for _ in range(random.randint(1, 3)):
        if b:
            b[random.randrange(len(b))] = random.getrandbits(8)
    return bytes(b)

def truncate(blob: bytes) -> bytes:
    return blob[:random.randint(0, len(blob))]

def exercise(blob: bytes) -> None:
    try:
        to_python(blob)
    except JSONBError:
        pass
    try:
        inspect_lines(decode(blob))
    except JSONBError:
        pass
    try:
        extract(blob, "$[0]")
    except JSONBError:
        pass

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()
        if r < 0.45:
            label, blob = "A flip", flip(rand_blob())
        elif r < 0.80:
            label, blob = "B truncate", truncate(rand_blob())
        else:
            label, blob = "C random", bytes(random.getrandbits(8) for _ in range(random.randint(0, 32)))
        try:
            exercise(blob)
        except Exception:
            crash(label, blob, {"round": i})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no crashes)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
