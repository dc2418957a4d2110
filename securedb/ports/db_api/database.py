"""DB-API adapter implementation for the core database port."""

from __future__ import annotations

import contextlib
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from ...core.types import MaybeRow, RowMapping, Rows
from .dialects import Dialect


class Database:
    """Thin DB-API wrapper that normalizes execute and row mapping behavior.

    Statements passed in use `?` markers (the template engine output); they
    are rendered for the dialect's paramstyle right before execution.
    """

    def __init__(self, conn: Any, dialect: Dialect):
        """Create database adapter.

        Args:
            conn: DB-API connection object.
            dialect: Concrete SQL dialect instance.
        """

        self._closed = False
        self.conn: Any | None = conn
        self.dialect = dialect

    def _require_open_connection(self) -> Any:
        if self._closed or self.conn is None:
            raise RuntimeError("connection is closed")
        return self.conn

    def _should_begin_sqlite_transaction(self, conn: Any) -> bool:
        if getattr(self.dialect, "name", "").lower() != "sqlite":
            return False
        if getattr(conn, "isolation_level", None) is not None:
            return False
        return not bool(getattr(conn, "in_transaction", False))

    def begin(self) -> None:
        """Open a transaction explicitly.

        DB-API connections start transactions implicitly; only SQLite
        connections in autocommit mode need an explicit `BEGIN`.
        """

        conn = self._require_open_connection()
        if self._should_begin_sqlite_transaction(conn):
            conn.execute("BEGIN")

    def commit(self) -> None:
        self._require_open_connection().commit()

    def rollback(self) -> None:
        self._require_open_connection().rollback()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        """Provide commit/rollback transaction scope."""

        conn = self._require_open_connection()
        try:
            if self._should_begin_sqlite_transaction(conn):
                conn.execute("BEGIN")
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise

    def execute(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Any:
        """Execute SQL with optional positional parameters and return cursor.

        `markers` are the offsets of the parameter `?` markers in `sql` (see
        `Statement`); without them every `?` is treated as a marker.
        """

        conn = self._require_open_connection()
        cur = conn.cursor()
        rendered = self.dialect.render(sql, markers)
        if params is None:
            cur.execute(rendered)
        else:
            cur.execute(rendered, self.dialect.bind(params))
        return cur

    def _row_to_mapping(self, cursor: Any, row: Any) -> RowMapping:
        """Normalize row object to mapping.

        Supports mapping rows directly and tuple/list rows via
        `cursor.description`.
        """

        if isinstance(row, Mapping):
            return row

        if isinstance(row, (tuple, list)):
            desc = getattr(cursor, "description", None)
            if not desc:
                raise TypeError(
                    "Cursor has no description; cannot map tuple rows to dict."
                )
            cols = [d[0] for d in desc]
            return dict(zip(cols, row))

        try:
            m = dict(row)
        except (TypeError, ValueError):
            m = {}
        if m:
            return m

        raise TypeError(f"Unsupported row type: {type(row)}")

    def fetchone(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> MaybeRow:
        """Execute query and return one normalized row mapping."""

        cur = self.execute(sql, params, markers=markers)
        row = cur.fetchone()
        if row is None:
            return None
        return self._row_to_mapping(cur, row)

    def fetchall(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Rows:
        """Execute query and return all rows as normalized mappings."""

        cur = self.execute(sql, params, markers=markers)
        rows = cur.fetchall()
        return [self._row_to_mapping(cur, r) for r in rows]

    def fetchcol(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> List[Any]:
        """Execute query and return the first column of every row."""

        cur = self.execute(sql, params, markers=markers)
        return [self._first_column(cur, r) for r in cur.fetchall()]

    def fetchvalue(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Any:
        """Execute query and return the first column of the first row."""

        cur = self.execute(sql, params, markers=markers)
        row = cur.fetchone()
        if row is None:
            return None
        return self._first_column(cur, row)

    def _first_column(self, cursor: Any, row: Any) -> Any:
        if isinstance(row, (tuple, list)):
            return row[0] if row else None
        return next(iter(self._row_to_mapping(cursor, row).values()), None)

    def close(self) -> None:
        """Close the underlying connection once."""

        if self._closed:
            return
        conn = self.conn
        self._closed = True
        self.conn = None
        close = getattr(conn, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
