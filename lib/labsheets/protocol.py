"""Order protocol numbering."""

from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from .logs import log

PROTOCOL_WIDTH = 5

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def parse_protocol(value: Any) -> Optional[int]:
    m = _LEADING_DIGITS.match(str(value or ""))
    return int(m.group(1)) if m else None


def format_protocol(n: int) -> str:
    return str(n).zfill(PROTOCOL_WIDTH)


def next_protocol(column: Sequence[Sequence[Any]]) -> str:
    """Next protocol from the key column (header included).

    Only the last row is inspected. An empty or header-only column starts at
    00001, and so does a non-numeric last value. Numbers past 99999 simply
    render wider.
    """
    next_id = 1
    if len(column) > 1:
        last_row = column[-1]
        last_id = last_row[0] if last_row else ""
        parsed = parse_protocol(last_id)
        if parsed is None:
            log("WARN", "order.protocol_reseed", last=last_id)
        else:
            next_id = parsed + 1
    return format_protocol(next_id)
