"""Basic CRUD example for the securedb `Db` facade."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "securedb").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from securedb import Db


def main() -> None:
    # 1) Open an in-memory SQLite database.
    with Db.connect("sqlite::memory:") as db:
        db.query(
            "CREATE TABLE users ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " email TEXT NOT NULL,"
            " age INTEGER)"
        )

        # 2) Insert rows; the new id is returned.
        alice = db.insert("users", {"email": "alice@example.com", "age": 25})
        bob = db.insert("users", {"email": "bob@example.com", "age": 30})
        print("Inserted ids:", alice, bob)

        # 3) Select helpers.
        print("Row:", db.select_row("SELECT * FROM ?# WHERE id = ?", "users", alice))
        print("Emails:", db.select_col("SELECT email FROM users ORDER BY id"))
        print("Count:", db.select_cell("SELECT COUNT(*) FROM users"))

        # 4) `?a` expands lists for IN and mappings for SET.
        print("IN:", db.select("SELECT * FROM users WHERE id IN (?a)", [alice, bob]))
        db.query("UPDATE users SET ?a WHERE id = ?", {"age": 31}, bob)

        # 5) CRUD helpers build the same templates.
        print("Updated:", db.update("users", {"age": 26}, {"id": alice}))
        print("Deleted:", db.delete("users", {"email": ["bob@example.com"]}))
        print("Remaining:", db.select("SELECT * FROM users"))


if __name__ == "__main__":
    main()
