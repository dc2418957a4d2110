"""Public core API: template engine, quoting, and parameter values."""

from .engine import EngineConfig, QueryTemplateEngine
from .errors import (
    ArrayParamError,
    DbConnectionError,
    EmptyDataError,
    IdentifierTypeError,
    MissingParameterError,
    ParameterCountError,
    QueryError,
    SecureDbError,
    TemplateError,
)
from .lexer import count_placeholders, tokenize
from .macros import FilteredQuery, MacroProcessor
from .placeholders import PlaceholderProcessor, Statement, is_associative
from .quoting import IdentifierQuoter
from .values import SKIP, MacroControl, TypedValue, is_skip, unwrap_value

__all__ = [
    "EngineConfig",
    "QueryTemplateEngine",
    "MacroProcessor",
    "FilteredQuery",
    "PlaceholderProcessor",
    "Statement",
    "IdentifierQuoter",
    "MacroControl",
    "SKIP",
    "TypedValue",
    "is_skip",
    "unwrap_value",
    "is_associative",
    "tokenize",
    "count_placeholders",
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
