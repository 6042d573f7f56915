"""Failures raised by the record store.

Transport failures (``googleapiclient.errors.HttpError``, auth errors) are not
wrapped here; they reach the caller unmodified.
"""

from __future__ import annotations


class LabSheetsError(Exception):
    """Base class for store errors."""


class ConfigError(LabSheetsError):
    """Required configuration is missing."""


class NotFound(LabSheetsError, LookupError):
    """No row matches the requested key."""

    entity = "Row"

    def __init__(self, key: str, entity: str | None = None) -> None:
        if entity is not None:
            self.entity = entity
        self.key = key
        super().__init__(f"{self.entity} not found: {key}")


class ExamNotFound(NotFound):
    entity = "Exam"


class OrderNotFound(NotFound):
    entity = "Order"


class SheetNotFound(NotFound):
    entity = "Sheet"
