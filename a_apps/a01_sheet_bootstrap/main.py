from __future__ import annotations
import sys

from labsheets.config import Settings
from labsheets.errors import ConfigError
from labsheets.logs import log
from labsheets.records import EXAM_HEADER, ORDER_HEADER
from labsheets.sheets import SheetsBackend


def bootstrap(backend, settings: Settings) -> list:
    """Ensure both tabs exist with their header rows; return the tabs that were added."""
    added = []
    for tab, header in ((settings.exams_tab, EXAM_HEADER), (settings.orders_tab, ORDER_HEADER)):
        if backend.ensure_header(tab, header):
            added.append(tab)
    return added


def main(backend=None):
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        log("ERROR", str(e)); sys.exit(2)
    backend = backend or SheetsBackend.from_settings(settings)
    added = bootstrap(backend, settings)
    log("INFO", "a01_sheet_bootstrap",
        job="a01_sheet_bootstrap",
        tabs=[settings.exams_tab, settings.orders_tab],
        added=added)

if __name__ == "__main__":
    main()
