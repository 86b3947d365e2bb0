from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .constants import (
    ARC_HEADER_STRUCT,
    ARC_POINTER_STRUCT,
    ARC_HEADER_SIZE,
    ARC_ENTRY_TABLE_OFFSET,
    ARC_ENTRY_STRIDE,
    ARC_RESERVED,
    SNIFF_WINDOW,
)
from .errors import TruncatedHeader, UnsupportedStride, CorruptArchive
from .sniff import sniff_tag


@dataclass(frozen=True)
class ArchiveEntry:
    tag: str
    payload: bytes


@dataclass(frozen=True)
class ArchivePointer:
    offset: int  # absolute
    size: int


def _read_pointer_table(buf: memoryview) -> List[ArchivePointer]:
    if len(buf) < ARC_HEADER_SIZE:
        raise TruncatedHeader(len(buf))
    table_off, stride, _reserved, file_count = ARC_HEADER_STRUCT.unpack_from(buf, 0)
    if stride != ARC_ENTRY_STRIDE:
        raise UnsupportedStride(stride)
    data_start = table_off + file_count * stride

    pointers: List[ArchivePointer] = []
    for i in range(file_count):
        row_off = table_off + i * stride
        if row_off + ARC_POINTER_STRUCT.size > len(buf):
            # Pointer row itself lies past the end of the buffer
            raise CorruptArchive(i, row_off, ARC_POINTER_STRUCT.size, len(buf))
        rel_off, size = ARC_POINTER_STRUCT.unpack_from(buf, row_off)
        pointers.append(ArchivePointer(offset=rel_off + data_start, size=size))
    return pointers


def decode_archive(data: bytes) -> List[ArchiveEntry]:
    """Decode an archive buffer into its entries, in pointer-table order.

    Raises:
        TruncatedHeader: fewer than 12 bytes.
        UnsupportedStride: stride other than 8.
        CorruptArchive: a pointer row or payload lies outside the buffer.
    """
    buf = memoryview(data)
    entries: List[ArchiveEntry] = []
    for i, ptr in enumerate(_read_pointer_table(buf)):
        end = ptr.offset + ptr.size
        if end > len(buf):
            raise CorruptArchive(i, ptr.offset, ptr.size, len(buf))
        payload = bytes(buf[ptr.offset:end])
        entries.append(ArchiveEntry(tag=sniff_tag(payload[:SNIFF_WINDOW]), payload=payload))
    return entries


def encode_archive(entries: Sequence[ArchiveEntry]) -> bytes:
    """Encode entries into a tightly packed archive buffer.

    Row offsets are relative to the data region and cumulative; tags are
    not stored.
    """
    out = bytearray()
    out += ARC_HEADER_STRUCT.pack(ARC_ENTRY_TABLE_OFFSET, ARC_ENTRY_STRIDE, ARC_RESERVED, len(entries))
    cur = 0
    for e in entries:
        out += ARC_POINTER_STRUCT.pack(cur, len(e.payload))
        cur += len(e.payload)
    for e in entries:
        out += e.payload
    return bytes(out)
