import sys

from labsheets.errors import ConfigError
from labsheets.logs import utc_now_iso
from labsheets.store import SheetStore


def run_cycle(store: SheetStore) -> None:
    exam = store.create_exam({
        "name": f"smoke-test {utc_now_iso()}",
        "price": "1.00",
        "description": "smoke cycle, safe to delete",
    })
    print(f'...[INFO] [verify] step=exam_create ok=true id="{exam.id}"')

    store.update_exam(exam.id, dict(exam.to_dict(), category="Smoke"))
    found = [e for e in store.get_exams() if e.id == exam.id]
    ok = bool(found) and found[0].category == "Smoke"
    print(f'...[INFO] [verify] step=exam_update ok={str(ok).lower()} id="{exam.id}"')

    store.delete_exam(exam.id)
    gone = all(e.id != exam.id for e in store.get_exams())
    print(f'...[INFO] [verify] step=exam_delete ok={str(gone).lower()} id="{exam.id}"')
    if not (ok and gone):
        sys.exit(1)


def main() -> None:
    try:
        store = SheetStore.from_env()
    except ConfigError:
        print('...[ERROR] [verify] step=exam_cycle ok=false reason="missing SHEET_ID"')
        sys.exit(2)

    try:
        run_cycle(store)
    except Exception as exc:  # pragma: no cover - best effort smoke path
        print(
            '...[ERROR] [verify] step=exam_cycle ok=false '
            f'reason="{exc.__class__.__name__}: {str(exc).strip()}"'
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
