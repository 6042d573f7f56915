"""Google Sheets access for the record store.

Wraps the four capabilities the store consumes (read a range, append rows,
update a range, apply a structural batch edit) plus tab metadata lookups.
The spreadsheet id is bound at construction; tab titles and A1 ranges are
passed per call.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from google.auth import default as google_auth_default
from google.auth.transport.requests import Request as GARequest
from googleapiclient.discovery import build

from .config import SCOPES, Settings
from .errors import SheetNotFound

USER_ENTERED = "USER_ENTERED"
RAW = "RAW"

Rows = List[List[Any]]


def col_letters(n: int) -> str:
    """1->A, 26->Z, 27->AA..."""
    s = ""
    while n > 0:
        n, r = divmod(n - 1, 26)
        s = chr(65 + r) + s
    return s


def sheets_service(scopes: Optional[Sequence[str]] = None):
    creds, _ = google_auth_default(scopes=list(scopes or SCOPES))
    if not creds.valid:
        creds.refresh(GARequest())
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


class SheetsBackend:
    """Thin pass-through to ``spreadsheets()`` for one document."""

    def __init__(self, svc, sheet_id: str) -> None:
        self.svc = svc
        self.sheet_id = sheet_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "SheetsBackend":
        return cls(sheets_service(), settings.sheet_id)

    def read_range(self, tab: str, a1: str) -> Rows:
        """Return the rows of ``tab!a1`` as sent by the API, or [] when the range is empty.

        Short rows are not padded; trailing empty cells are simply absent.
        """
        resp = self.svc.spreadsheets().values().get(
            spreadsheetId=self.sheet_id,
            range=f"{tab}!{a1}",
        ).execute()
        return resp.get("values", [])

    def append_rows(self, tab: str, a1: str, rows: Rows, input_mode: str = USER_ENTERED) -> Dict[str, Any]:
        """Append rows after the used part of ``tab!a1``."""
        return self.svc.spreadsheets().values().append(
            spreadsheetId=self.sheet_id,
            range=f"{tab}!{a1}",
            valueInputOption=input_mode,
            insertDataOption="INSERT_ROWS",
            body={"values": rows},
        ).execute()

    def update_range(self, tab: str, a1: str, rows: Rows, input_mode: str = USER_ENTERED) -> Dict[str, Any]:
        """Overwrite ``tab!a1`` with rows; ``None`` cells are left unchanged by the API."""
        return self.svc.spreadsheets().values().update(
            spreadsheetId=self.sheet_id,
            range=f"{tab}!{a1}",
            valueInputOption=input_mode,
            body={"values": rows},
        ).execute()

    def apply_structural_edit(self, requests: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        """Send a ``batchUpdate`` with the given requests (e.g. ``deleteDimension``)."""
        return self.svc.spreadsheets().batchUpdate(
            spreadsheetId=self.sheet_id,
            body={"requests": list(requests)},
        ).execute()

    def _tabs_by_title(self) -> Dict[str, Dict[str, Any]]:
        meta = self.svc.spreadsheets().get(spreadsheetId=self.sheet_id).execute()
        return {s["properties"]["title"]: s for s in meta.get("sheets", [])}

    def sheet_gid(self, tab: str) -> int:
        """Resolve a tab title to its structural id (the ``gid`` in sheet URLs)."""
        by_title = self._tabs_by_title()
        if tab not in by_title:
            raise SheetNotFound(tab)
        return int(by_title[tab]["properties"].get("sheetId", 0))

    def ensure_header(self, tab: str, header: Sequence[str]) -> bool:
        """Create ``tab`` when missing and write the header row. Returns True if the tab was added."""
        added = False
        if tab not in self._tabs_by_title():
            self.apply_structural_edit([{"addSheet": {"properties": {"title": tab}}}])
            added = True
        end_col = col_letters(len(header))
        self.update_range(tab, f"A1:{end_col}1", [list(header)], input_mode=RAW)
        return added


__all__: Iterable[str] = ("SheetsBackend", "sheets_service", "col_letters", "USER_ENTERED", "RAW")
