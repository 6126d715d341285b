import unittest
import sys
import os
import zlib

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mazemin.io.base64_codec import encode_base64
from mazemin.io.payload import (
    Inflater,
    InflaterState,
    PayloadDecoder,
    encode_json_payload,
    try_decode,
)

class TestInflater(unittest.TestCase):
    def test_lifecycle(self):
        inflater = Inflater()
        self.assertIs(inflater.state, InflaterState.UNINITIALIZED)
        self.assertTrue(inflater.ensure_ready())
        self.assertIs(inflater.state, InflaterState.READY)

    def test_missing_primitive_degrades(self):
        inflater = Inflater(primitive=None)
        with self.assertLogs("mazemin.io.payload", level="WARNING"):
            self.assertFalse(inflater.ensure_ready())
        self.assertIs(inflater.state, InflaterState.DEGRADED)

class TestPayloadDecoder(unittest.TestCase):
    def test_compressed_json(self):
        decoder = PayloadDecoder()
        result = decoder.decode(encode_json_payload([[1, 0], [0, 1]]))
        self.assertTrue(result.ok)
        self.assertEqual(result.strategy, "zlib-json")
        self.assertEqual(result.value, [[1, 0], [0, 1]])
        self.assertIs(decoder.last_result, result)

    def test_uncompressed_json(self):
        result = PayloadDecoder().decode(encode_json_payload({"a": 1}, compress=False))
        self.assertTrue(result.ok)
        self.assertEqual(result.strategy, "raw-json")
        self.assertEqual(result.value, {"a": 1})

    def test_bad_base64_is_tagged(self):
        result = PayloadDecoder().decode("abc")
        self.assertFalse(result.ok)
        self.assertEqual(result.strategy, "base64")
        self.assertIsNone(result.value)
        self.assertTrue(result.reason)

    def test_legacy_bytes_are_not_json(self):
        # Nibble-packed grid bytes: neither strategy applies
        result = PayloadDecoder().decode("x1E=")
        self.assertFalse(result.ok)
        self.assertEqual(result.strategy, "none")
        self.assertIn("zlib-json", result.reason)
        self.assertIn("raw-json", result.reason)

    def test_degraded_inflater_still_reads_raw_json(self):
        decoder = PayloadDecoder(inflater=Inflater(primitive=None))
        with self.assertLogs("mazemin.io.payload", level="WARNING"):
            compressed = decoder.decode(encode_json_payload([1, 2, 3]))
        self.assertFalse(compressed.ok)

        plain = decoder.decode(encode_json_payload([1, 2, 3], compress=False))
        self.assertEqual(plain.strategy, "raw-json")
        self.assertEqual(plain.value, [1, 2, 3])

    def test_injected_primitive(self):
        calls = []

        def inflate(data):
            calls.append(data)
            return b"[7]"

        decoder = PayloadDecoder(inflater=Inflater(primitive=inflate))
        self.assertEqual(decoder.try_decode("AAAA"), [7])
        self.assertEqual(calls, [b"\x00\x00\x00"])

    def test_deeply_nested_json_is_rejected(self):
        nested = b"[" * 100000 + b"]" * 100000
        decoder = PayloadDecoder()
        self.assertIsNone(decoder.try_decode(encode_base64(zlib.compress(nested))))
        self.assertEqual(decoder.last_result.strategy, "none")
        self.assertIsNone(decoder.try_decode(encode_base64(nested)))

    def test_failing_primitive_is_contained(self):
        def inflate(data):
            raise MemoryError("out of buffer")

        decoder = PayloadDecoder(inflater=Inflater(primitive=inflate))
        result = decoder.decode(encode_json_payload([1]))
        self.assertFalse(result.ok)
        self.assertIn("out of buffer", result.reason)
        self.assertEqual(decoder.try_decode(encode_json_payload([1], compress=False)), [1])

    def test_module_try_decode(self):
        self.assertEqual(try_decode(encode_json_payload("x")), "x")
        self.assertIsNone(try_decode("!!"))

if __name__ == '__main__':
    unittest.main()
