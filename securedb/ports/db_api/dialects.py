"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from ...core.quoting import IdentifierQuoter, normalize_dialect_name
from ...core.types import QueryParams


class Dialect:
    """Base dialect that defines identifier quoting and paramstyle behavior.

    The template engine always emits `?` markers; `render()` rewrites them
    for the driver's DB-API paramstyle.
    """

    name: str = "generic"
    paramstyle: str = "qmark"
    supports_returning: bool = False
    # "limit" -> LIMIT ? OFFSET ?, "fetch" -> OFFSET ? ROWS FETCH NEXT ? ROWS ONLY
    pagination: str = "limit"

    def __init__(self) -> None:
        self.quoter = IdentifierQuoter(self.name)

    @property
    def quote_chars(self) -> Tuple[str, str]:
        return self.quoter.open_char, self.quoter.close_char

    def q(self, ident: str) -> str:
        """Quote SQL identifier."""

        return self.quoter.quote_identifier(ident)

    def placeholder(self, position: int) -> str:
        """Return the marker for the 1-based parameter `position`."""

        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        if self.paramstyle == "numeric":
            return f":{position}"
        if self.paramstyle == "named":
            return f":p{position}"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    def render(self, sql: str, markers: Optional[Sequence[int]] = None) -> str:
        """Rewrite `?` markers for this paramstyle.

        Args:
            sql: Statement text.
            markers: Offsets of the `?` characters that are parameter markers,
                as reported by the engine. Without it every `?` is a marker.
        """

        if self.paramstyle == "qmark":
            return sql
        marker_set = None if markers is None else frozenset(markers)
        parts: List[str] = []
        position = 0
        for i, ch in enumerate(sql):
            if ch == "?" and (marker_set is None or i in marker_set):
                position += 1
                parts.append(self.placeholder(position))
            elif ch == "%" and self.paramstyle == "format":
                parts.append("%%")
            else:
                parts.append(ch)
        return "".join(parts)

    def bind(self, params: Sequence[Any]) -> QueryParams:
        """Return the parameter container the driver expects."""

        if self.paramstyle == "named":
            return {f"p{i}": value for i, value in enumerate(params, start=1)}
        return list(params)

    def returning_clause(self, column: str) -> str:
        """Return `RETURNING` clause when dialect supports it."""

        if self.supports_returning:
            return f" RETURNING {self.q(column)}"
        return ""

    def paginate(
        self,
        sql: str,
        params: Sequence[Any],
        *,
        limit: Optional[int],
        offset: Optional[int] = None,
    ) -> Tuple[str, List[Any]]:
        """Append pagination to engine output (`?` markers) and its values."""

        values = list(params)
        if limit is None:
            return sql, values
        clause, extra = self.pagination_clause(limit, offset)
        return sql + clause, values + extra

    def pagination_clause(
        self, limit: int, offset: Optional[int] = None
    ) -> Tuple[str, List[Any]]:
        """Return the pagination clause (`?` markers) and its values."""

        offset = offset or 0
        if self.pagination == "fetch":
            return " OFFSET ? ROWS FETCH NEXT ? ROWS ONLY", [offset, limit]
        return " LIMIT ? OFFSET ?", [limit, offset]

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        """Extract `lastrowid` from DB-API cursor when available."""

        return getattr(cursor, "lastrowid", None)


class SQLiteDialect(Dialect):
    """SQLite dialect (`?` parameters, supports `RETURNING`)."""

    name = "sqlite"
    paramstyle = "qmark"
    supports_returning = True


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters)."""

    name = "postgres"
    paramstyle = "format"
    supports_returning = True


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters, no `RETURNING`)."""

    name = "mysql"
    paramstyle = "format"
    supports_returning = False


class SQLServerDialect(Dialect):
    """SQL Server dialect (`?` parameters, bracket quoting)."""

    name = "sqlserver"
    paramstyle = "qmark"
    pagination = "fetch"


class OracleDialect(Dialect):
    """Oracle dialect (`:1` numeric parameters)."""

    name = "oracle"
    paramstyle = "numeric"
    pagination = "fetch"


class FirebirdDialect(Dialect):
    """Firebird dialect (`?` parameters, supports `RETURNING`)."""

    name = "firebird"
    paramstyle = "qmark"
    supports_returning = True
    pagination = "fetch"


DIALECTS: Dict[str, Type[Dialect]] = {
    cls.name: cls
    for cls in (
        SQLiteDialect,
        PostgresDialect,
        MySQLDialect,
        SQLServerDialect,
        OracleDialect,
        FirebirdDialect,
    )
}


def dialect_for(name: str) -> Dialect:
    """Return a dialect instance for a tag or alias (`pgsql`, `sqlsrv`, ...)."""

    return DIALECTS.get(normalize_dialect_name(name), Dialect)()
