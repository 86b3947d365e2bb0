"""
rfarc: codecs for Rune Factory 3 .arc containers and their TEXT sections.

- Container codec: 12-byte header, fixed 8-byte (offset, size) pointer
  table, tightly packed payloads. Byte-identical round trip for archives
  this encoder wrote.
- TEXT section codec: UTF-8 string table with (length, offset) rows and
  NUL-terminated strings. Decoding also reports non-ASCII characters so
  they can be mapped by hand.
- CLI (rfarc.cli) for extracting, packing, dumping/replacing sections and
  exporting/importing text tables as JSON.

The codecs work on in-memory buffers only; all file I/O is in the CLI.
"""

from .archive import ArchiveEntry, decode_archive, encode_archive
from .textsection import TextSection, decode_text_section, encode_text_section
from .sniff import sniff_tag

__version__ = "0.1"

__all__ = [
    "ArchiveEntry",
    "TextSection",
    "decode_archive",
    "encode_archive",
    "decode_text_section",
    "encode_text_section",
    "sniff_tag",
    "constants",
    "errors",
]
