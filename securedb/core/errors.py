"""Exception hierarchy shared by the template engine and the `Db` facade."""

from __future__ import annotations

from typing import Any, List, Optional


class SecureDbError(Exception):
    """Base class for every error raised by securedb."""


class TemplateError(SecureDbError, ValueError):
    """Raised when a query template cannot be turned into SQL."""


class MissingParameterError(TemplateError):
    """A placeholder token has no parameter at its index."""


class ArrayParamError(TemplateError):
    """A `?a` parameter is not a sequence/mapping, or it is empty."""


class IdentifierTypeError(TemplateError, TypeError):
    """A `?#` parameter is not a string."""


class ParameterCountError(TemplateError):
    """More parameters were supplied than the template consumes."""


class EmptyDataError(SecureDbError, ValueError):
    """A CRUD helper got an empty data or WHERE mapping."""


class DbConnectionError(SecureDbError):
    """Opening a connection from a DSN failed."""


class QueryError(SecureDbError):
    """The driver failed to execute a statement.

    The original driver exception is available as `__cause__`.
    """

    def __init__(
        self,
        message: str,
        *,
        query: str = "",
        params: Optional[List[Any]] = None,
    ) -> None:
        super().__init__(message)
        self.query = query
        self.params = list(params or [])
