from __future__ import annotations

from .constants import SNIFF_WINDOW, TAG_BINARY


def _is_ascii_alnum(b: int) -> bool:
    return (0x30 <= b <= 0x39) or (0x41 <= b <= 0x5A) or (0x61 <= b <= 0x7A)


def sniff_tag(head: bytes) -> str:
    """Classify a payload by its leading bytes.

    Zero bytes in the first four bytes are dropped. If what remains is all
    ASCII letters/digits it becomes the tag, otherwise the tag is "bin".
    The result is a label for humans (e.g. extracted file extensions); it
    must not decide how a payload gets decoded.
    """
    window = [b for b in bytes(head[:SNIFF_WINDOW]) if b != 0]
    if all(_is_ascii_alnum(b) for b in window):
        return bytes(window).decode("ascii").strip()
    return TAG_BINARY
