"""CRUD over the Exames and Pedidos tabs.

The spreadsheet is the only source of truth; a store keeps no records between
calls. Rows are addressed by scanning column A for the key (see ``locator``),
so update and delete cost one column read before the write.

Mutations that locate a row, or derive a protocol, run under a per-store lock.
Two stores pointed at the same document (e.g. two processes) are not
serialised against each other: they can still assign the same protocol or
write to a row that moved between locate and write.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping

from .config import Settings
from .errors import ExamNotFound, NotFound, OrderNotFound
from .locator import locate
from .logs import log
from .protocol import next_protocol
from .records import (
    Exam,
    Order,
    exam_to_row,
    is_header_row,
    order_to_row,
    row_to_exam,
    row_to_order,
)
from .sheets import USER_ENTERED, SheetsBackend

KEY_COLUMN = "A:A"

EXAM_DATA_RANGE = "A2:H"
EXAM_APPEND_RANGE = "A:H"

ORDER_DATA_RANGE = "A2:M"
ORDER_APPEND_RANGE = "A:K"

TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"


def exam_row_range(sheet_row: int) -> str:
    return f"A{sheet_row}:H{sheet_row}"


def order_row_range(sheet_row: int) -> str:
    return f"A{sheet_row}:M{sheet_row}"


def order_status_range(sheet_row: int) -> str:
    return f"L{sheet_row}:M{sheet_row}"


class SheetStore:
    def __init__(
        self,
        backend,
        exams_tab: str = "Exames",
        orders_tab: str = "Pedidos",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.backend = backend
        self.exams_tab = exams_tab
        self.orders_tab = orders_tab
        self.clock = clock
        self._lock = threading.Lock()
        self._gids: Dict[str, int] = {}

    @classmethod
    def from_settings(cls, settings: Settings, backend=None) -> "SheetStore":
        return cls(
            backend or SheetsBackend.from_settings(settings),
            exams_tab=settings.exams_tab,
            orders_tab=settings.orders_tab,
        )

    @classmethod
    def from_env(cls) -> "SheetStore":
        return cls.from_settings(Settings.from_env())

    # ---------- helpers ----------
    def _new_exam_id(self) -> str:
        return str(int(self.clock().timestamp() * 1000))

    def _timestamp(self) -> str:
        return self.clock().strftime(TIMESTAMP_FORMAT)

    def _locate(self, tab: str, key: str, not_found: Callable[[str], NotFound]) -> int:
        """Zero-based grid row of ``key``. Row 0 is the header and never a record."""
        idx = locate(self.backend, tab, KEY_COLUMN, key)
        if idx is None or idx == 0:
            raise not_found(key)
        return idx

    def _sheet_gid(self, tab: str) -> int:
        if tab not in self._gids:
            self._gids[tab] = self.backend.sheet_gid(tab)
        return self._gids[tab]

    # ---------- exams ----------
    def get_exams(self) -> List[Exam]:
        rows = self.backend.read_range(self.exams_tab, EXAM_DATA_RANGE)
        exams = (row_to_exam(row) for row in rows)
        return [e for e in exams if not is_header_row(e)]

    def create_exam(self, data: Mapping[str, Any]) -> Exam:
        exam = Exam.from_input(self._new_exam_id(), data)
        self.backend.append_rows(self.exams_tab, EXAM_APPEND_RANGE, [exam_to_row(exam)], USER_ENTERED)
        return exam

    def update_exam(self, exam_id: str, data: Mapping[str, Any]) -> Exam:
        """Overwrite every column of the exam's row in place."""
        exam = Exam.from_input(exam_id, data)
        with self._lock:
            idx = self._locate(self.exams_tab, exam_id, ExamNotFound)
            self.backend.update_range(
                self.exams_tab, exam_row_range(idx + 1), [exam_to_row(exam)], USER_ENTERED
            )
        return exam

    def delete_exam(self, exam_id: str) -> bool:
        """Physically remove the exam's row; rows below shift up by one."""
        with self._lock:
            idx = self._locate(self.exams_tab, exam_id, ExamNotFound)
            gid = self._sheet_gid(self.exams_tab)
            self.backend.apply_structural_edit([{
                "deleteDimension": {
                    "range": {
                        "sheetId": gid,
                        "dimension": "ROWS",
                        "startIndex": idx,
                        "endIndex": idx + 1,
                    }
                }
            }])
        log("INFO", "exam.delete", tab=self.exams_tab, sheet_gid=gid, row=idx + 1, id=exam_id)
        return True

    # ---------- orders ----------
    def get_orders(self) -> List[Order]:
        rows = self.backend.read_range(self.orders_tab, ORDER_DATA_RANGE)
        return [row_to_order(row) for row in rows]

    def create_order(self, data: Mapping[str, Any]) -> Order:
        log("INFO", "order.create", payload=dict(data))
        with self._lock:
            column = self.backend.read_range(self.orders_tab, KEY_COLUMN)
            protocol = next_protocol(column)
            row = order_to_row(protocol, data, self._timestamp())
            self.backend.append_rows(self.orders_tab, ORDER_APPEND_RANGE, [row], USER_ENTERED)
        return row_to_order(row)

    def update_order(self, protocol: str, data: Mapping[str, Any]) -> Order:
        """Write only status (L) and observation (M); an absent value leaves its cell as is."""
        with self._lock:
            idx = self._locate(self.orders_tab, protocol, OrderNotFound)
            sheet_row = idx + 1
            self.backend.update_range(
                self.orders_tab,
                order_status_range(sheet_row),
                [[data.get("status"), data.get("observation")]],
                USER_ENTERED,
            )
            rows = self.backend.read_range(self.orders_tab, order_row_range(sheet_row))
        return row_to_order(rows[0] if rows else [protocol])
