"""Open DB-API connections from DSN strings.

Supported forms::

    sqlite::memory:
    sqlite:/path/to/file.db          sqlite:///relative.db
    postgresql://user:pw@host:5432/db
    pgsql:host=localhost;dbname=app
    mysql://user:pw@host:3306/db
    mysql:host=localhost;dbname=app;port=3306

Drivers other than `sqlite3` are imported on demand (`psycopg`/`psycopg2`,
`pymysql`/`MySQLdb`).
"""

from __future__ import annotations

import importlib
import sqlite3
from types import ModuleType
from typing import Any, Dict, Sequence, Tuple
from urllib.parse import unquote, urlsplit

from ...core.errors import DbConnectionError
from .dialects import Dialect, dialect_for

POSTGRES_DRIVERS = ("psycopg", "psycopg2")
MYSQL_DRIVERS = ("pymysql", "MySQLdb")


def connect(
    dsn: str, username: str = "", password: str = "", **options: Any
) -> Tuple[Any, Dialect]:
    """Open a connection for `dsn` and return it with its dialect.

    Args:
        dsn: Connection string, see module docstring.
        username: Login name; overrides one embedded in `dsn`.
        password: Password; overrides one embedded in `dsn`.
        **options: Extra keyword arguments for the driver's `connect()`.

    Raises:
        DbConnectionError: Unknown scheme, missing driver, or driver failure.
    """

    scheme, sep, rest = dsn.partition(":")
    if not sep or not scheme:
        raise DbConnectionError(f"Invalid DSN: {dsn!r}")
    dialect = dialect_for(scheme)

    try:
        if dialect.name == "sqlite":
            conn = _connect_sqlite(rest, options)
        elif dialect.name == "postgres":
            conn = _connect_postgres(rest, username, password, options)
        elif dialect.name == "mysql":
            conn = _connect_mysql(rest, username, password, options)
        else:
            raise DbConnectionError(f"Unsupported DSN scheme: {scheme!r}")
    except DbConnectionError:
        raise
    except Exception as exc:
        raise DbConnectionError(f"Database connection failed: {exc}") from exc
    return conn, dialect


def sqlite_path(rest: str) -> str:
    """Return the sqlite3 database path for the part after `sqlite:`."""

    if rest.startswith("///"):
        rest = rest[3:]
    elif rest.startswith("//"):
        rest = rest[2:]
    return rest or ":memory:"


def parse_dsn_params(rest: str) -> Dict[str, Any]:
    """Parse the part after the scheme into connection keywords.

    Handles URL form (`//user:pw@host:port/db`) and `key=value;...` form.
    Result keys: `host`, `port`, `user`, `password`, `database`.
    """

    if rest.startswith("//"):
        parts = urlsplit(f"db:{rest}")
        params: Dict[str, Any] = {
            "host": parts.hostname,
            "port": parts.port,
            "user": unquote(parts.username) if parts.username else None,
            "password": unquote(parts.password) if parts.password else None,
            "database": unquote(parts.path.lstrip("/")) or None,
        }
        return {key: value for key, value in params.items() if value is not None}

    params = {}
    for item in rest.split(";"):
        key, sep, value = item.partition("=")
        key = key.strip().lower()
        if not sep or not key:
            continue
        if key in ("dbname", "db"):
            key = "database"
        elif key == "username":
            key = "user"
        params[key] = int(value) if key == "port" else value.strip()
    return params


def _import_driver(names: Sequence[str]) -> ModuleType:
    for name in names:
        try:
            return importlib.import_module(name)
        except ImportError:
            continue
    raise DbConnectionError(
        f"No database driver installed; tried: {', '.join(names)}"
    )


def _credentials(
    params: Dict[str, Any], username: str, password: str
) -> Dict[str, Any]:
    if username:
        params["user"] = username
    if password:
        params["password"] = password
    return params


def _connect_sqlite(rest: str, options: Dict[str, Any]) -> Any:
    # Autocommit outside explicit transactions; `Database.begin()` issues BEGIN.
    options.setdefault("isolation_level", None)
    return sqlite3.connect(sqlite_path(rest), **options)


def _connect_postgres(
    rest: str, username: str, password: str, options: Dict[str, Any]
) -> Any:
    driver = _import_driver(POSTGRES_DRIVERS)
    params = _credentials(parse_dsn_params(rest), username, password)
    if "database" in params:
        params["dbname"] = params.pop("database")
    return driver.connect(**params, **options)


def _connect_mysql(
    rest: str, username: str, password: str, options: Dict[str, Any]
) -> Any:
    driver = _import_driver(MYSQL_DRIVERS)
    params = _credentials(parse_dsn_params(rest), username, password)
    return driver.connect(**params, **options)
