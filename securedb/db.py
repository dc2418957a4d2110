"""`Db` facade: query templates executed over a DB-API connection."""

from __future__ import annotations

import contextlib
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, TypeVar

from .core.contracts import DatabasePort
from .core.engine import EngineConfig, QueryTemplateEngine
from .core.errors import QueryError
from .core.query_builder import (
    count_template,
    delete_template,
    insert_template,
    update_template,
)
from .core.types import ErrorHandler, LoggerCallback, LogRecord, MaybeRow, Rows
from .ports.db_api.connector import connect as open_connection
from .ports.db_api.database import Database
from .ports.db_api.dialects import Dialect, dialect_for

logger = logging.getLogger("securedb")

R = TypeVar("R")


@dataclass(frozen=True)
class Page:
    """One page of rows plus the row count of the whole query."""

    rows: Rows
    total: int


class Db:
    """Runs query templates (`?`, `?a`, `?#`, `?_name`, `{ ... }`) on a connection.

    Example::

        db = Db.connect("sqlite::memory:")
        db.select("SELECT * FROM ?# WHERE id IN (?a) { AND active = ? }",
                  "users", [1, 2], SKIP)
    """

    def __init__(
        self,
        conn: Any,
        dialect: Dialect | str,
        *,
        identifier_prefix: str = "",
        logger: Optional[LoggerCallback] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """Create a facade over a DB-API connection.

        Args:
            conn: DB-API connection, or an already built `Database` adapter.
            dialect: Dialect instance or tag (`sqlite`, `pgsql`, `mysql`, ...).
            identifier_prefix: Prefix applied to `?_name` identifiers.
            logger: Callback receiving one dict per logged statement.
            error_handler: Callback `(exc, query, params)` run on driver errors.
        """

        self.dialect: Dialect = dialect_for(dialect) if isinstance(dialect, str) else dialect
        self.database: DatabasePort = (
            conn if isinstance(conn, Database) else Database(conn, self.dialect)
        )
        self._engine = QueryTemplateEngine(
            EngineConfig(dialect=self.dialect.name, identifier_prefix=identifier_prefix)
        )
        self._logger = logger
        self._error_handler = error_handler

    @classmethod
    def wrap(cls, conn: Any, dialect: Dialect | str) -> Db:
        """Wrap an existing DB-API connection."""

        return cls(conn, dialect)

    @classmethod
    def connect(
        cls, dsn: str, username: str = "", password: str = "", **options: Any
    ) -> Db:
        """Open a connection from a DSN, see `securedb.ports.db_api.connector`."""

        conn, dialect = open_connection(dsn, username, password, **options)
        return cls(conn, dialect)

    @property
    def conn(self) -> Any:
        return getattr(self.database, "conn", None)

    @property
    def engine(self) -> QueryTemplateEngine:
        return self._engine

    @property
    def identifier_prefix(self) -> str:
        return self._engine.identifier_prefix

    def set_identifier_prefix(self, prefix: str) -> None:
        """Use `prefix` for `?_name` identifiers in subsequent calls."""

        self._engine = self._engine.with_prefix(prefix)

    def set_logger(self, callback: Optional[LoggerCallback]) -> None:
        self._logger = callback

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        self._error_handler = handler

    # Queries

    def run(self, query: str, *params: Any) -> Rows:
        """Alias for `select()`."""

        return self.select(query, *params)

    def select(self, query: str, *params: Any) -> Rows:
        """Return all rows as mappings."""

        return self._run(self.database.fetchall, query, params)

    def select_row(self, query: str, *params: Any) -> MaybeRow:
        """Return the first row, or `None` when there is none."""

        return self._run(self.database.fetchone, query, params)

    def select_col(self, query: str, *params: Any) -> List[Any]:
        """Return the first column of every row."""

        return self._run(self.database.fetchcol, query, params)

    def select_cell(self, query: str, *params: Any) -> Any:
        """Return the first column of the first row, or `None`."""

        return self._run(self.database.fetchvalue, query, params)

    def select_page(
        self,
        query: str,
        *params: Any,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Page:
        """Return one page of rows and the total row count of `query`.

        Without `limit` every row is returned.
        """

        total = self.select_cell(count_template(query), *params)
        rows = self._run(
            self.database.fetchall, query, params, limit=limit, offset=offset
        )
        return Page(rows=rows, total=int(total or 0))

    def query(self, query: str, *params: Any) -> int:
        """Execute a statement and return the affected row count."""

        cursor = self._run(self.database.execute, query, params)
        return getattr(cursor, "rowcount", -1)

    # CRUD helpers

    def insert(
        self,
        table: str,
        data: Mapping[str, Any],
        *,
        returning: Optional[str] = None,
    ) -> Any:
        """Insert one row and return its id.

        With `returning` and a dialect supporting `RETURNING`, the value of
        that column is returned; otherwise the cursor's `lastrowid`.
        """

        use_returning = bool(returning) and self.dialect.supports_returning
        template, params = insert_template(
            table, data, self.dialect, returning=returning if use_returning else None
        )
        if use_returning:
            return self._run(self.database.fetchvalue, template, params)
        cursor = self._run(self.database.execute, template, params)
        return self.dialect.get_lastrowid(cursor)

    def update(
        self, table: str, data: Mapping[str, Any], where: Mapping[str, Any]
    ) -> int:
        """Update rows matching `where`; return affected row count."""

        template, params = update_template(table, data, where)
        return self.query(template, *params)

    def delete(self, table: str, where: Mapping[str, Any]) -> int:
        """Delete rows matching `where`; return affected row count."""

        template, params = delete_template(table, where)
        return self.query(template, *params)

    # Transactions

    def begin(self) -> None:
        self.database.begin()

    def commit(self) -> None:
        self.database.commit()

    def rollback(self) -> None:
        self.database.rollback()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[Db]:
        """Commit on success, roll back and re-raise on error."""

        with self.database.transaction():
            yield self

    def try_flat_transaction(self, callback: Callable[[Db], R]) -> R:
        """Run `callback(db)` in one transaction and return its result."""

        with self.database.transaction():
            return callback(self)

    def close(self) -> None:
        self.database.close()

    def __enter__(self) -> Db:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    # Execution

    def _run(
        self,
        action: Callable[..., R],
        query: str,
        params: Sequence[Any],
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> R:
        statement = self._engine.compile(query, params)
        if limit is not None:
            statement = statement.append(
                *self.dialect.pagination_clause(limit, offset)
            )
        sql, bound = statement.sql, statement.params

        started = time.time()
        logger.debug("Executing query", extra={"sql": sql, "param_count": len(bound)})
        self._log_query(sql, bound, None, started)
        try:
            result = action(sql, bound, markers=statement.markers)
        except Exception as exc:
            self._handle_error(exc, query, list(params))
            raise QueryError("Database query failed", query=sql, params=bound) from exc

        elapsed = time.time() - started
        logger.debug(
            "Executed query in %.3f ms",
            elapsed * 1000,
            extra={"sql": sql, "duration": elapsed},
        )
        self._log_query(sql, bound, elapsed, started)
        return result

    def _handle_error(self, exc: Exception, query: str, params: List[Any]) -> None:
        logger.warning("Query failed: %s", exc, extra={"sql": query})
        if self._error_handler is not None:
            self._error_handler(exc, query, params)
        if self._logger is not None:
            self._logger(
                {
                    "error": str(exc),
                    "query": query,
                    "params": params,
                    "timestamp": time.time(),
                    "caller": _caller_info(),
                }
            )

    def _log_query(
        self,
        sql: str,
        params: List[Any],
        execution_time: Optional[float],
        started: float,
    ) -> None:
        if self._logger is None:
            return
        record: LogRecord = {
            "query": sql,
            "params": params,
            "execution_time": execution_time,
            "timestamp": started,
            "caller": _caller_info(),
        }
        self._logger(record)


def _caller_info() -> Dict[str, Any]:
    """Describe the first stack frame outside this package."""

    frame = inspect.currentframe()
    try:
        while frame is not None:
            module = frame.f_globals.get("__name__", "")
            if module != "securedb" and not module.startswith("securedb."):
                return {
                    "file": frame.f_code.co_filename,
                    "line": frame.f_lineno,
                    "function": frame.f_code.co_name,
                }
            frame = frame.f_back
    finally:
        del frame
    return {"file": "unknown", "line": 0, "function": "unknown"}
