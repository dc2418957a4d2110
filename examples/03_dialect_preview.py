"""Show how one template renders for each supported dialect."""

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

from securedb import SKIP, EngineConfig, QueryTemplateEngine, dialect_for

TEMPLATE = "SELECT ?# FROM ?_orders WHERE status IN (?a) { AND total > ? } AND note LIKE '5%'"


def show_for_dialect(name: str) -> None:
    print(f"\n===== {name} =====")
    dialect = dialect_for(name)
    engine = QueryTemplateEngine(EngineConfig(dialect=dialect.name, identifier_prefix="shop_"))

    statement = engine.compile(TEMPLATE, ["customer.name?", ["new", "paid"], SKIP])
    statement = statement.append(*dialect.pagination_clause(10, 20))

    # Only the reported markers are rewritten; the `?` in the column name stays.
    print("Engine SQL:", statement.sql)
    print("Driver SQL:", dialect.render(statement.sql, statement.markers))
    print("Params:", dialect.bind(statement.params))


def main() -> None:
    for name in ("sqlite", "pgsql", "mysql", "sqlsrv", "oci", "firebird"):
        show_for_dialect(name)


if __name__ == "__main__":
    main()
