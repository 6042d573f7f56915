import sys

from labsheets.config import READONLY_SCOPES, env
from labsheets.records import EXAM_HEADER, ORDER_HEADER
from labsheets.sheets import SheetsBackend, sheets_service


def check_header(backend, tab, expected):
    vals = (backend.read_range(tab, "1:1") or [[]])[0]
    ok = list(vals[:len(expected)]) == list(expected)
    print(f'...[INFO] [verify] step=sheet_schema tab="{tab}" ok={str(ok).lower()} cols={len(vals)}')
    return ok

def main():
    sheet_id = env("SHEET_ID") or env("SPREADSHEET_ID")
    if not sheet_id:
        print('...[ERROR] [verify] step=sheet_schema ok=false reason="missing SHEET_ID"'); sys.exit(2)
    backend = SheetsBackend(sheets_service(READONLY_SCOPES), sheet_id)
    ok = check_header(backend, env("EXAMS_TAB", "Exames"), EXAM_HEADER)
    ok = check_header(backend, env("ORDERS_TAB", "Pedidos"), ORDER_HEADER) and ok
    sys.exit(0 if ok else 1)

if __name__=="__main__":
    main()
