from __future__ import annotations

from typing import Optional


def first_difference(expected: bytes, actual: bytes) -> Optional[int]:
    """Return the first offset where the buffers differ, or None if equal.

    A strict prefix differs at the length of the shorter buffer.
    """
    if expected == actual:
        return None
    n = min(len(expected), len(actual))
    for i in range(n):
        if expected[i] != actual[i]:
            return i
    return n
