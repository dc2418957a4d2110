"""Optional `{ ... }` blocks driven by the SKIP sentinel."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "securedb").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from securedb import SKIP, Db

SEARCH = """
    SELECT name, age FROM ?_users
    WHERE 1=1
    { AND name LIKE ? }
    { AND age BETWEEN ? AND ? }
    { AND id IN (?a) }
    ORDER BY id
"""


def search(
    db: Db,
    name: Optional[str] = None,
    ages: Optional[tuple] = None,
    ids: Optional[list] = None,
) -> Any:
    low, high = ages if ages else (SKIP, SKIP)
    return db.select_page(
        SEARCH,
        f"%{name}%" if name else SKIP,
        low,
        high,
        ids if ids else SKIP,
        limit=2,
    )


def main() -> None:
    with Db.connect("sqlite::memory:") as db:
        db.set_identifier_prefix("app_")
        db.query("CREATE TABLE ?_users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER)")
        for name, age in [("Ann", 21), ("Anton", 35), ("Bert", 40), ("Cleo", 19)]:
            db.insert("app_users", {"name": name, "age": age})

        print("All (first page):", search(db))
        print("Name filter:", search(db, name="An"))
        print("Age filter:", search(db, ages=(20, 39)))
        print("Ids + name:", search(db, name="e", ids=[3, 4]))

        # The engine output can be inspected without a database.
        print(db.engine.process(SEARCH, [SKIP, 18, 30, SKIP]))


if __name__ == "__main__":
    main()
