"""DB-API adapter, dialect, and connection factory exports."""

from .connector import connect
from .database import Database
from .dialects import (
    Dialect,
    FirebirdDialect,
    MySQLDialect,
    OracleDialect,
    PostgresDialect,
    SQLiteDialect,
    SQLServerDialect,
    dialect_for,
)

__all__ = [
    "Database",
    "Dialect",
    "FirebirdDialect",
    "MySQLDialect",
    "OracleDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "SQLServerDialect",
    "connect",
    "dialect_for",
]
