from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Sequence

from .constants import (
    TEXT_MAGIC,
    TEXT_HEADER_STRUCT,
    TEXT_ROW_STRUCT,
    TEXT_TERMINATOR,
    UNMAPPED_THRESHOLD,
)
from .errors import InvalidMagic, CorruptTextSection, Utf8DecodeError


@dataclass(frozen=True)
class TextSection:
    strings: List[str]
    # Characters >= U+0080 seen while decoding; input for manual char mapping
    unmapped: FrozenSet[str]


@dataclass(frozen=True)
class TextEntry:
    offset: int
    length: int
    data: bytes


def decode_text_section(data: bytes) -> TextSection:
    """Parse a TEXT section into its string table.

    Strings are UTF-8 and located by the (length, offset) rows that follow
    the header; offsets count from the start of ``data``. The 0x00 that
    follows each string is not checked.

    Raises:
        InvalidMagic: the buffer does not start with b"TEXT".
        CorruptTextSection: a row or string lies outside the buffer.
        Utf8DecodeError: a string is not valid UTF-8.
    """
    buf = memoryview(data)
    magic = bytes(buf[: len(TEXT_MAGIC)])
    if magic != TEXT_MAGIC:
        raise InvalidMagic(magic)
    if len(buf) < TEXT_HEADER_STRUCT.size:
        raise CorruptTextSection(0, len(TEXT_MAGIC), TEXT_HEADER_STRUCT.size - len(TEXT_MAGIC))
    _magic, count = TEXT_HEADER_STRUCT.unpack_from(buf, 0)

    strings: List[str] = []
    unmapped = set()
    for i in range(count):
        row_off = TEXT_HEADER_STRUCT.size + i * TEXT_ROW_STRUCT.size
        if row_off + TEXT_ROW_STRUCT.size > len(buf):
            raise CorruptTextSection(i, row_off, TEXT_ROW_STRUCT.size)
        length, offset = TEXT_ROW_STRUCT.unpack_from(buf, row_off)
        if length < 0 or offset < 0 or offset + length > len(buf):
            raise CorruptTextSection(i, offset, length)
        try:
            s = bytes(buf[offset : offset + length]).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8DecodeError(i) from exc
        unmapped.update(c for c in s if ord(c) >= UNMAPPED_THRESHOLD)
        strings.append(s)
    return TextSection(strings=strings, unmapped=frozenset(unmapped))


def encode_text_section(strings: Sequence[str]) -> bytes:
    """Build a TEXT section; strings are laid out in order, each NUL-terminated."""
    encoded = [s.encode("utf-8") for s in strings]
    running = TEXT_HEADER_STRUCT.size + len(encoded) * TEXT_ROW_STRUCT.size
    table: List[TextEntry] = []
    for raw in encoded:
        table.append(TextEntry(offset=running, length=len(raw), data=raw))
        running += len(raw) + len(TEXT_TERMINATOR)

    out = bytearray(TEXT_HEADER_STRUCT.pack(TEXT_MAGIC, len(table)))
    for t in table:
        out += TEXT_ROW_STRUCT.pack(t.length, t.offset)
    for t in table:
        out += t.data
        out += TEXT_TERMINATOR
    return bytes(out)
