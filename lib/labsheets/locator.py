"""Key column scan mapping an opaque id to its row position."""

from __future__ import annotations

from typing import Any, Optional, Sequence


def find_index(rows: Sequence[Sequence[Any]], key: str) -> Optional[int]:
    for idx, row in enumerate(rows):
        if row and row[0] == key:
            return idx
    return None


def locate(backend, tab: str, key_range: str, key: str) -> Optional[int]:
    """Return the zero-based position of the first row whose first cell equals ``key``.

    The position is relative to ``key_range``; with a whole-column range such
    as ``A:A`` position ``p`` is sheet row ``p + 1``. Returns None when no row
    matches or the column is empty.
    """
    return find_index(backend.read_range(tab, key_range), key)
