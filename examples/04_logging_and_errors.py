"""Query logging callbacks, error handlers and error types."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "securedb").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from securedb import Db, QueryError, TemplateError


def expect_error(label: str, fn) -> None:  # noqa: ANN001
    try:
        fn()
    except Exception as exc:  # noqa: BLE001
        print(f"[OK] {label}: {type(exc).__name__}: {exc}")
    else:
        print(f"[UNEXPECTED] {label}: no exception raised")


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    def on_query(record: dict) -> None:
        print("query log:", record["query"], record["params"], record.get("execution_time"))

    def on_error(exc: BaseException, query: str, params: list) -> None:
        print("error handler:", type(exc).__name__, query, params)

    with Db.connect("sqlite::memory:") as db:
        db.set_logger(on_query)
        db.set_error_handler(on_error)

        db.select("SELECT ? AS answer", 42)

        expect_error("missing table", lambda: db.select("SELECT * FROM missing WHERE id = ?", 1))
        expect_error("missing parameter", lambda: db.select("SELECT ?, ?", 1))
        expect_error("empty IN list", lambda: db.select("SELECT 1 WHERE 1 IN (?a)", []))
        expect_error("identifier type", lambda: db.select("SELECT ?#", 5))
        expect_error("surplus parameter", lambda: db.select("SELECT 1", 2))
        expect_error("empty insert", lambda: db.insert("t", {}))

        try:
            db.select("SELECT * FROM missing")
        except QueryError as exc:
            print("wrapped driver error:", repr(exc.__cause__))
        try:
            db.select("SELECT ?#", None)
        except TemplateError as exc:
            print("template errors are ValueErrors:", isinstance(exc, ValueError))


if __name__ == "__main__":
    main()
