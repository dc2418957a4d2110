"""Shared core type aliases used across the engine, contracts, and ports."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

Param = Any
Params = Sequence[Param]
BoundParams = List[Any]
ProcessedQuery = Tuple[str, BoundParams]

NamedParams = Dict[str, Any]
PositionalParams = List[Any]
QueryParams = Union[NamedParams, PositionalParams, None]

RowMapping = Mapping[str, Any]
Rows = List[RowMapping]
MaybeRow = Optional[RowMapping]

LogRecord = Dict[str, Any]
LoggerCallback = Callable[[LogRecord], None]
ErrorHandler = Callable[[BaseException, str, List[Any]], None]
