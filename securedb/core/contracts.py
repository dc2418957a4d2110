"""Core port contracts used by adapters and the `Db` facade."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, List, Optional, Protocol, Sequence, Tuple

from .types import MaybeRow, QueryParams, Rows


class DialectPort(Protocol):
    """Dialect behavior required by statement building and execution."""

    name: str
    paramstyle: str
    supports_returning: bool

    def q(self, ident: str) -> str: ...

    def render(self, sql: str, markers: Optional[Sequence[int]] = None) -> str: ...

    def bind(self, params: Sequence[Any]) -> QueryParams: ...

    def returning_clause(self, column: str) -> str: ...

    def paginate(
        self,
        sql: str,
        params: Sequence[Any],
        *,
        limit: Optional[int],
        offset: Optional[int] = None,
    ) -> Tuple[str, List[Any]]: ...

    def pagination_clause(
        self, limit: int, offset: Optional[int] = None
    ) -> Tuple[str, List[Any]]: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...


class DatabasePort(Protocol):
    """Database adapter behavior required by the `Db` facade.

    Statements use `?` markers and positional parameter lists; `markers`
    gives the offsets of the `?` characters that are parameter markers.
    """

    dialect: DialectPort

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def transaction(self) -> AbstractContextManager[None]: ...

    def execute(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Any: ...

    def fetchone(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> MaybeRow: ...

    def fetchall(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Rows: ...

    def fetchcol(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> List[Any]: ...

    def fetchvalue(
        self,
        sql: str,
        params: Optional[Sequence[Any]] = None,
        *,
        markers: Optional[Sequence[int]] = None,
    ) -> Any: ...

    def close(self) -> None: ...
