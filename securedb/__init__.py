"""securedb: SQL query templates with safe placeholders over DB-API connections."""

from .core import (
    SKIP,
    ArrayParamError,
    DbConnectionError,
    EmptyDataError,
    EngineConfig,
    IdentifierQuoter,
    IdentifierTypeError,
    MacroControl,
    MacroProcessor,
    MissingParameterError,
    ParameterCountError,
    PlaceholderProcessor,
    QueryError,
    QueryTemplateEngine,
    SecureDbError,
    Statement,
    TemplateError,
    TypedValue,
)
from .db import Db, Page
from .ports import (
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
    "Db",
    "Page",
    "SKIP",
    "MacroControl",
    "TypedValue",
    "EngineConfig",
    "QueryTemplateEngine",
    "MacroProcessor",
    "PlaceholderProcessor",
    "Statement",
    "IdentifierQuoter",
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
    "SecureDbError",
    "TemplateError",
    "MissingParameterError",
    "ArrayParamError",
    "IdentifierTypeError",
    "ParameterCountError",
    "EmptyDataError",
    "QueryError",
    "DbConnectionError",
]
