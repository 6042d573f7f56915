"""JSON line logging shared by the store, jobs and verify tools."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    """Return the current UTC time in ISO-8601 with Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def err_text(exc: BaseException) -> str:
    return str(exc)[:200]


def log(lvl: str, msg: str, **fields: Any) -> None:
    """Print one compact JSON object with ts/lvl/msg and any extra fields."""
    payload = {"ts": utc_now_iso(), "lvl": lvl, "msg": msg}
    payload.update(fields)
    print(json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str))
