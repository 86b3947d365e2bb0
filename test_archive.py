from __future__ import annotations

import struct
import unittest

from rfarc.archive import ArchiveEntry, decode_archive, encode_archive
from rfarc.sniff import sniff_tag
from rfarc.constants import ARC_HEADER_STRUCT, ARC_POINTER_STRUCT
from rfarc.errors import TruncatedHeader, UnsupportedStride, CorruptArchive


def _entries(*payloads: bytes):
    return [ArchiveEntry(tag="na", payload=p) for p in payloads]


class SniffTests(unittest.TestCase):
    def test_ascii_magic(self):
        self.assertEqual(sniff_tag(b"ATBL\x01\x02"), "ATBL")
        self.assertEqual(sniff_tag(b"TEXT"), "TEXT")

    def test_zeros_are_stripped(self):
        self.assertEqual(sniff_tag(b"BM\x00\x00"), "BM")
        self.assertEqual(sniff_tag(b"\x00A\x00B"), "AB")

    def test_non_alnum_is_bin(self):
        self.assertEqual(sniff_tag(b"\x00\x00\x00\x01"), "bin")
        self.assertEqual(sniff_tag(b"AB C"), "bin")
        self.assertEqual(sniff_tag(b"\xc3\xa9AB"), "bin")

    def test_only_first_four_bytes(self):
        self.assertEqual(sniff_tag(b"ABCD\xff\xff"), "ABCD")

    def test_short_and_empty(self):
        self.assertEqual(sniff_tag(b"AB"), "AB")
        self.assertEqual(sniff_tag(b""), "")
        self.assertEqual(sniff_tag(b"\x00\x00\x00\x00"), "")


class ArchiveCodecTests(unittest.TestCase):
    def test_empty_archive_is_header_only(self):
        data = encode_archive([])
        self.assertEqual(data, struct.pack("<HHII", 12, 8, 0, 0))
        self.assertEqual(decode_archive(data), [])

    def test_two_entry_layout(self):
        a = bytes([0x41, 0x42, 0x43, 0x44])
        b = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06])
        data = encode_archive(_entries(a, b))
        self.assertEqual(ARC_HEADER_STRUCT.unpack_from(data, 0), (12, 8, 0, 2))
        self.assertEqual(ARC_POINTER_STRUCT.unpack_from(data, 12), (0, 4))
        self.assertEqual(ARC_POINTER_STRUCT.unpack_from(data, 20), (4, 6))
        self.assertEqual(data[28:], a + b)
        self.assertEqual(len(data), 12 + 16 + 10)

        entries = decode_archive(data)
        self.assertEqual([e.payload for e in entries], [a, b])
        self.assertEqual([e.tag for e in entries], ["ABCD", "bin"])

    def test_roundtrip_preserves_payloads_and_order(self):
        payloads = [b"TEXT" + bytes(range(40)), b"", b"\x00" * 7, b"MDL0" * 100, b"x"]
        data = encode_archive(_entries(*payloads))
        decoded = decode_archive(data)
        self.assertEqual([e.payload for e in decoded], payloads)
        # Re-encoding a buffer we produced is byte-identical
        self.assertEqual(encode_archive(decoded), data)

    def test_tags_are_not_persisted(self):
        data = encode_archive([ArchiveEntry(tag="WHATEVER", payload=b"MDL0abc")])
        self.assertEqual(decode_archive(data)[0].tag, "MDL0")

    def test_accepts_bytearray_and_memoryview(self):
        data = encode_archive(_entries(b"ABCD", b"EFGH"))
        for buf in (bytearray(data), memoryview(data)):
            entries = decode_archive(buf)
            self.assertEqual([e.payload for e in entries], [b"ABCD", b"EFGH"])
            self.assertIsInstance(entries[0].payload, bytes)

    def test_external_gaps_are_normalized(self):
        # Archive from another producer: table at 16, 4 bytes padding before data
        header = struct.pack("<HHII", 16, 8, 0, 1) + b"\x00" * 4
        data = header + struct.pack("<II", 0, 3) + b"abc" + b"\xff" * 5
        entries = decode_archive(data)
        self.assertEqual(entries[0].payload, b"abc")
        rebuilt = encode_archive(entries)
        self.assertNotEqual(rebuilt, data)
        self.assertEqual(decode_archive(rebuilt)[0].payload, b"abc")


class ArchiveErrorTests(unittest.TestCase):
    def test_truncated_header(self):
        data = encode_archive(_entries(b"ABCD"))[:10]
        with self.assertRaises(TruncatedHeader) as cm:
            decode_archive(data)
        self.assertEqual(cm.exception.buffer_len, 10)

    def test_unsupported_stride(self):
        data = struct.pack("<HHII", 12, 12, 0, 0)
        with self.assertRaises(UnsupportedStride) as cm:
            decode_archive(data)
        self.assertEqual(cm.exception.stride, 12)

    def test_payload_past_end(self):
        data = bytearray(encode_archive(_entries(b"ABCD", b"EFGHIJ")))
        ARC_POINTER_STRUCT.pack_into(data, 20, 4, 60)
        with self.assertRaises(CorruptArchive) as cm:
            decode_archive(bytes(data))
        exc = cm.exception
        self.assertEqual(exc.index, 1)
        self.assertEqual(exc.offset, 28 + 4)
        self.assertEqual(exc.size, 60)
        self.assertEqual(exc.buffer_len, len(data))

    def test_pointer_table_past_end(self):
        data = struct.pack("<HHII", 12, 8, 0, 3) + struct.pack("<II", 0, 0)
        with self.assertRaises(CorruptArchive) as cm:
            decode_archive(data)
        self.assertEqual(cm.exception.index, 1)

    def test_input_buffer_untouched(self):
        data = bytearray(encode_archive(_entries(b"ABCD")))
        before = bytes(data)
        decode_archive(data)
        self.assertEqual(bytes(data), before)


if __name__ == "__main__":
    unittest.main()
