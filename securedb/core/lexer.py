"""Single-pass tokenizer for query templates.

A template is plain SQL text with a handful of placeholder tokens:

- `?`        positional value
- `?a`       sequence (`IN (...)`) or mapping (`SET a = ?, ...`)
- `?#`       identifier
- `?_name`   prefixed identifier, consumes no parameter

and optional `{ ... }` macro blocks. Blocks do not nest: a block runs from
`{` to the first following `}`. An unmatched `{` or an empty `{}` stays
literal text.

Quoted SQL string literals are not recognized, so a `?` or a brace inside
one is read as template syntax.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import ClassVar, Iterable, List

_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")


@dataclass(frozen=True)
class Token:
    """One lexical unit of a query template."""

    text: str
    consumes_param: ClassVar[bool] = False


@dataclass(frozen=True)
class Literal(Token):
    """Raw SQL text copied through unchanged."""


@dataclass(frozen=True)
class PositionalPlaceholder(Token):
    consumes_param: ClassVar[bool] = True


@dataclass(frozen=True)
class ArrayPlaceholder(Token):
    consumes_param: ClassVar[bool] = True


@dataclass(frozen=True)
class IdentifierPlaceholder(Token):
    consumes_param: ClassVar[bool] = True


@dataclass(frozen=True)
class PrefixedPlaceholder(Token):
    """`?_name` token; `name` is the identifier without the `?_` marker."""

    name: str = ""


@dataclass(frozen=True)
class BlockStart(Token):
    pass


@dataclass(frozen=True)
class BlockEnd(Token):
    pass


POSITIONAL = PositionalPlaceholder("?")
ARRAY = ArrayPlaceholder("?a")
IDENTIFIER = IdentifierPlaceholder("?#")
BLOCK_START = BlockStart("{")
BLOCK_END = BlockEnd("}")


def tokenize(query: str, *, blocks: bool = True) -> List[Token]:
    """Split `query` into tokens, left to right.

    Args:
        query: Template text.
        blocks: Recognize `{ ... }` macro blocks. When false, braces are
            literal text.

    Returns:
        Token list whose texts concatenate back to `query`.
    """

    tokens: List[Token] = []
    buffer: List[str] = []
    length = len(query)
    block_end = -1
    i = 0

    def flush() -> None:
        if buffer:
            tokens.append(Literal("".join(buffer)))
            buffer.clear()

    while i < length:
        ch = query[i]

        if ch == "?":
            nxt = query[i + 1] if i + 1 < length else ""
            if nxt == "_" and i + 2 < length and query[i + 2] in _IDENT_START:
                end = i + 3
                while end < length and query[end] in _IDENT_CHARS:
                    end += 1
                flush()
                tokens.append(PrefixedPlaceholder(query[i:end], name=query[i + 2 : end]))
                i = end
                continue
            flush()
            if nxt == "#":
                tokens.append(IDENTIFIER)
                i += 2
            elif nxt == "a":
                tokens.append(ARRAY)
                i += 2
            else:
                tokens.append(POSITIONAL)
                i += 1
            continue

        if blocks:
            if block_end < 0 and ch == "{":
                close = query.find("}", i + 1)
                if close > i + 1:
                    flush()
                    tokens.append(BLOCK_START)
                    block_end = close
                    i += 1
                    continue
            elif i == block_end:
                flush()
                tokens.append(BLOCK_END)
                block_end = -1
                i += 1
                continue

        buffer.append(ch)
        i += 1

    flush()
    return tokens


def count_params(tokens: Iterable[Token]) -> int:
    """Count tokens that consume one parameter each."""

    return sum(1 for token in tokens if token.consumes_param)


def count_placeholders(text: str) -> int:
    """Count parameter-consuming placeholders in a span of template text.

    `?`, `?a` and `?#` count one each; `?_name` counts zero.
    """

    return count_params(tokenize(text, blocks=False))


def render(tokens: Iterable[Token]) -> str:
    """Join token texts back into query text."""

    return "".join(token.text for token in tokens)
