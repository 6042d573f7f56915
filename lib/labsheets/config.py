"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .errors import ConfigError

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
READONLY_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


def env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


@dataclass(frozen=True)
class Settings:
    sheet_id: str
    exams_tab: str = "Exames"
    orders_tab: str = "Pedidos"

    @classmethod
    def from_env(cls) -> "Settings":
        sheet_id = env("SHEET_ID") or env("SPREADSHEET_ID")
        if not sheet_id:
            raise ConfigError("SHEET_ID missing")
        return cls(
            sheet_id=sheet_id,
            exams_tab=env("EXAMS_TAB", "Exames") or "Exames",
            orders_tab=env("ORDERS_TAB", "Pedidos") or "Pedidos",
        )
