"""Public port exports for concrete adapter implementations."""

from .db_api import (
    Database,
    Dialect,
    FirebirdDialect,
    MySQLDialect,
    OracleDialect,
    PostgresDialect,
    SQLiteDialect,
    SQLServerDialect,
    connect,
    dialect_for,
)

__all__ = [
    "Database",
    "Dialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MySQLDialect",
    "SQLServerDialect",
    "OracleDialect",
    "FirebirdDialect",
    "connect",
    "dialect_for",
]
