from __future__ import annotations

import os
from typing import List, Optional, Tuple

from .constants import TAG_BINARY


def section_filename(index: int, tag: Optional[str]) -> str:
    """File name used when extracting entry ``index``: "<index>.<tag>"."""
    return f"{index}.{tag or TAG_BINARY}"


def section_index(name: str) -> Optional[int]:
    """Parse the leading decimal index of an extracted section file name.

    "12.TEXT" -> 12, "7" -> 7, "notes.txt" -> None
    """
    head = name.split(".", 1)[0]
    if not head or not head.isdigit() or not head.isascii():
        return None
    return int(head)


def numbered_sections(directory: str) -> List[Tuple[int, str]]:
    """List regular files in ``directory`` named by section index, in index order.

    Rejects two files that map to the same index.
    """
    found = {}
    for fn in os.listdir(directory):
        path = os.path.join(directory, fn)
        if not os.path.isfile(path):
            continue
        idx = section_index(fn)
        if idx is None:
            continue
        if idx in found:
            raise ValueError(
                f"Duplicate section index {idx}: {os.path.basename(found[idx])} and {fn}"
            )
        found[idx] = path
    return sorted(found.items())
