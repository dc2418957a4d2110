"""Template builders for the CRUD helpers of `Db`.

Builders return a query template in the engine's own token grammar plus the
parameters for it, so table and column names go through `?#` quoting and
values through `?`/`?a` binding exactly as in hand-written templates.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

from .contracts import DialectPort
from .errors import EmptyDataError

Template = Tuple[str, List[Any]]


def compile_where(where: Mapping[str, Any]) -> Template:
    """Compile a `{column: value}` mapping into an `AND`-joined template.

    `None` values compile to `IS NULL`, list/tuple/set values to
    `IN (?a)` and everything else to `= ?`.
    """

    clauses: List[str] = []
    params: List[Any] = []
    for column, value in where.items():
        if value is None:
            clauses.append("?# IS NULL")
            params.append(column)
        elif isinstance(value, (list, tuple, set, frozenset)):
            values = list(value)
            if not values:
                clauses.append("1=0")
                continue
            clauses.append("?# IN (?a)")
            params.extend([column, values])
        else:
            clauses.append("?# = ?")
            params.extend([column, value])
    return " AND ".join(clauses), params


def insert_template(
    table: str,
    data: Mapping[str, Any],
    dialect: DialectPort,
    *,
    returning: Optional[str] = None,
) -> Template:
    """Build `INSERT INTO table (cols) VALUES (...)`."""

    if not data:
        raise EmptyDataError("Insert data cannot be empty")
    columns = ", ".join("?#" for _ in data)
    sql = f"INSERT INTO ?# ({columns}) VALUES (?a)"
    if returning:
        sql += dialect.returning_clause(returning)
    return sql, [table, *data.keys(), list(data.values())]


def update_template(
    table: str, data: Mapping[str, Any], where: Mapping[str, Any]
) -> Template:
    """Build `UPDATE table SET col = ?, ... WHERE ...`."""

    if not data:
        raise EmptyDataError("Update data cannot be empty")
    if not where:
        raise EmptyDataError("Update WHERE clause cannot be empty")
    where_sql, where_params = compile_where(where)
    set_sql = ", ".join("?# = ?" for _ in data)
    params: List[Any] = [table]
    for column, value in data.items():
        params.extend([column, value])
    return f"UPDATE ?# SET {set_sql} WHERE {where_sql}", [*params, *where_params]


def delete_template(table: str, where: Mapping[str, Any]) -> Template:
    """Build `DELETE FROM table WHERE ...`."""

    if not where:
        raise EmptyDataError("Delete WHERE clause cannot be empty")
    where_sql, where_params = compile_where(where)
    return f"DELETE FROM ?# WHERE {where_sql}", [table, *where_params]


def count_template(query: str) -> str:
    """Wrap a SELECT template so it returns its row count."""

    return f"SELECT COUNT(*) FROM ({query}) count_query"
