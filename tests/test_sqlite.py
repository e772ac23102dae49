"""Decode blobs produced by SQLite itself.

SQLite gained jsonb() in 3.45.0; with an older library these tests skip.
"""

from __future__ import annotations

import json
import math
import os
import sqlite3
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sqlite_jsonb import JSONBType, decode, extract, to_python

_HAS_JSONB = sqlite3.sqlite_version_info >= (3, 45, 0)


@unittest.skipUnless(_HAS_JSONB, "SQLite {} has no jsonb()".format(sqlite3.sqlite_version))
class TestSqliteBlobs(unittest.TestCase):
    def setUp(self):
        self.conn = sqlite3.connect(":memory:")
        self.addCleanup(self.conn.close)

    def _jsonb(self, text: str) -> bytes:
        return self.conn.execute("SELECT jsonb(?)", (text,)).fetchone()[0]

    def test_matches_json_text(self):
        docs = [
            "null",
            "true",
            "[1, 2.5, -3e2, \"x\"]",
            '{"name": "widget", "tags": ["a", "b"], "dims": {"w": 10, "h": 2.25}}',
            '{"esc": "tab\\tquote\\"slash\\\\u:\\u00e9"}',
            '["' + "long" * 100 + '"]',
            "[" + ",".join(str(i) for i in range(300)) + "]",
        ]
        for doc in docs:
            with self.subTest(doc=doc[:40]):
                self.assertEqual(to_python(self._jsonb(doc)), json.loads(doc))

    def test_json5_input(self):
        blob = self._jsonb("{a: 0x10, b: .5, c: 'x\\'y', d: +7, e: Infinity}")
        result = to_python(blob)
        self.assertEqual(result["a"], 16)
        self.assertEqual(result["b"], 0.5)
        self.assertEqual(result["c"], "x'y")
        self.assertEqual(result["d"], 7)
        self.assertEqual(result["e"], math.inf)

    def test_round_trip_through_sqlite_json(self):
        blob = self._jsonb('{"a": [1, {"b": null}], "c": "\\u2603"}')
        text = self.conn.execute("SELECT json(?)", (blob,)).fetchone()[0]
        self.assertEqual(to_python(blob), json.loads(text))

    def test_extract_agrees_with_json_extract(self):
        doc = '{"a": [10, 20, {"b": "deep"}], "c": {"d": false}}'
        blob = self._jsonb(doc)
        for path in ("$.a[0]", "$.a[#-1].b", "$.c.d", "$.a[2]"):
            with self.subTest(path=path):
                # "->" always returns the JSON text of the selected element.
                want = self.conn.execute("SELECT ? -> ?", (doc, path)).fetchone()[0]
                got = extract(blob, path)
                self.assertIsNotNone(got)
                self.assertEqual(to_python(got), json.loads(want))

    def test_top_level_type(self):
        self.assertEqual(decode(self._jsonb("[]")).type, JSONBType.ARRAY)
        self.assertEqual(decode(self._jsonb("{}")).type, JSONBType.OBJECT)
