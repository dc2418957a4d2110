"""Placeholder substitution for macro-filtered query templates."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple

from .errors import ArrayParamError, IdentifierTypeError, MissingParameterError
from .lexer import (
    ArrayPlaceholder,
    IdentifierPlaceholder,
    PrefixedPlaceholder,
    Token,
    tokenize,
)
from .quoting import IdentifierQuoter
from .types import BoundParams, ProcessedQuery
from .values import unwrap_value


@dataclass(frozen=True)
class Statement:
    """Engine output: SQL with `?` markers, bound values and marker offsets.

    `markers` holds the index in `sql` of every `?` that stands for a bound
    value. Any other `?` in `sql` (inside a quoted identifier, for example)
    is plain text.
    """

    sql: str
    params: BoundParams = field(default_factory=list)
    markers: Tuple[int, ...] = ()

    def append(self, fragment: str, values: Sequence[Any]) -> Statement:
        """Return a statement with `fragment` appended.

        Every `?` in `fragment` is a marker for the matching entry of `values`.
        """

        base = len(self.sql)
        added = tuple(base + i for i, ch in enumerate(fragment) if ch == "?")
        return Statement(
            self.sql + fragment,
            [*self.params, *values],
            self.markers + added,
        )


def is_associative(keys: Iterable[Any]) -> bool:
    """Return whether `keys` is anything but the dense run `0..n-1` in order."""

    for position, key in enumerate(keys):
        if isinstance(key, bool) or not isinstance(key, int) or key != position:
            return True
    return False


class PlaceholderProcessor:
    """Expands `?_name`, `?#`, `?a` and `?` tokens into driver-ready SQL.

    The output query holds one `?` marker per bound value; their offsets are
    reported on the `Statement`.
    """

    def __init__(self, quoter: IdentifierQuoter, identifier_prefix: str = ""):
        self.quoter = quoter
        self.identifier_prefix = identifier_prefix

    def substitute(self, query: str, params: Sequence[Any]) -> ProcessedQuery:
        """Rewrite `query` and flatten `params` into bound values.

        Args:
            query: Macro-filtered template. Braces are plain text here.
            params: Parameters aligned to the parameter-consuming tokens.

        Returns:
            Final SQL and the positional values to bind.

        Raises:
            MissingParameterError: A token has no parameter left.
            ArrayParamError: A `?a` value is not a non-empty sequence/mapping.
            IdentifierTypeError: A `?#` value is not a string.
        """

        statement = self.substitute_tokens(tokenize(query, blocks=False), params)
        return statement.sql, statement.params

    def substitute_tokens(
        self, tokens: Iterable[Token], params: Sequence[Any]
    ) -> Statement:
        """Substitute an already tokenized template.

        Tokens are used as given and never re-read from joined text, so text
        next to a placeholder cannot change what the placeholder is.
        """

        values = list(params)
        parts: List[str] = []
        bound: BoundParams = []
        markers: List[int] = []
        offset = 0
        index = 0

        def emit(text: str) -> None:
            nonlocal offset
            parts.append(text)
            offset += len(text)

        def emit_marker() -> None:
            markers.append(offset)
            emit("?")

        for token in tokens:
            if isinstance(token, PrefixedPlaceholder):
                emit(self.quoter.quote_identifier(self.identifier_prefix + token.name))
                continue
            if not token.consumes_param:
                emit(token.text)
                continue

            if index >= len(values):
                raise MissingParameterError(
                    f"Missing parameter for placeholder {token.text} "
                    f"at position {index + 1}."
                )
            value = values[index]
            index += 1

            if isinstance(token, IdentifierPlaceholder):
                emit(self._identifier_sql(value))
            elif isinstance(token, ArrayPlaceholder):
                for i, (key, item) in enumerate(self._array_items(value)):
                    if i:
                        emit(", ")
                    if key is not None:
                        emit(f"{self.quoter.quote_identifier(key)} = ")
                    emit_marker()
                    bound.append(unwrap_value(item))
            else:
                emit_marker()
                bound.append(unwrap_value(value))

        return Statement("".join(parts), bound, tuple(markers))

    def _identifier_sql(self, value: Any) -> str:
        identifier = unwrap_value(value)
        if not isinstance(identifier, str):
            raise IdentifierTypeError(
                "Identifier placeholder ?# requires a string parameter, "
                f"got {type(identifier).__name__}."
            )
        return self.quoter.quote_identifier(identifier)

    def _array_items(self, value: Any) -> List[Tuple[Any, Any]]:
        """Return `(column or None, value)` pairs for a `?a` parameter.

        Associative input (SET form) yields column names, dense sequences
        (IN form) yield `None`.
        """

        items: List[Tuple[Any, Any]]
        if isinstance(value, Mapping):
            items = list(value.items())
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            items = list(enumerate(value))
        else:
            raise ArrayParamError(
                "Array placeholder ?a requires a sequence or mapping parameter, "
                f"got {type(value).__name__}."
            )
        if not items:
            raise ArrayParamError("Array placeholder ?a cannot be empty.")

        if is_associative(key for key, _ in items):
            return [(str(key), item) for key, item in items]
        return [(None, item) for _, item in items]
