"""Conditional `{ ... }` macro blocks.

A block is kept when none of the parameters aligned to its placeholders is
`MacroControl.SKIP`; otherwise the block text and its parameters are dropped
together. Example::

    SELECT * FROM users WHERE id = ? { AND active = ? }

    params [1, 1]     -> "... WHERE id = ?  AND active = ? ", [1, 1]
    params [1, SKIP]  -> "... WHERE id = ? ", [1]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .lexer import BlockEnd, BlockStart, Token, count_params, render, tokenize
from .values import is_skip


@dataclass(frozen=True)
class FilteredQuery:
    """Result of macro filtering.

    Attributes:
        sql: Query text with skipped blocks removed and kept blocks unwrapped.
        params: Parameters aligned to the placeholders left in `sql`.
        consumed: Number of input parameters the template walked over.
        tokens: Tokens of `sql`, with the block boundaries they came from.
    """

    sql: str
    params: List[Any]
    consumed: int
    tokens: Tuple[Token, ...] = ()


class MacroProcessor:
    """Filters macro blocks and their parameters out of a template."""

    def filter(self, query: str, params: Sequence[Any]) -> Tuple[str, List[Any]]:
        """Return the block-filtered query and its filtered parameters."""

        result = self.filter_detailed(query, params)
        return result.sql, result.params

    def filter_detailed(self, query: str, params: Sequence[Any]) -> FilteredQuery:
        """Filter blocks and report how many parameters were walked over."""

        source = list(params)
        parts: List[Token] = []
        kept: List[Any] = []
        cursor = 0
        block: List[Token] | None = None

        for token in tokenize(query):
            if isinstance(token, BlockStart):
                block = []
                continue
            if isinstance(token, BlockEnd):
                cursor = self._close_block(block or [], source, cursor, parts, kept)
                block = None
                continue
            if block is not None:
                block.append(token)
                continue

            parts.append(token)
            if token.consumes_param:
                if cursor < len(source) and not is_skip(source[cursor]):
                    kept.append(source[cursor])
                cursor += 1

        return FilteredQuery(render(parts), kept, cursor, tuple(parts))

    @staticmethod
    def _close_block(
        block: List[Token],
        source: List[Any],
        cursor: int,
        parts: List[Token],
        kept: List[Any],
    ) -> int:
        needed = count_params(block)
        window = source[cursor : cursor + needed]
        if not any(is_skip(value) for value in window):
            parts.extend(block)
            kept.extend(window)
        return cursor + needed
