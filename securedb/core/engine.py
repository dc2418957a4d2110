"""Query template engine: macro filtering followed by placeholder substitution."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Sequence

from .errors import ParameterCountError
from .macros import MacroProcessor
from .placeholders import PlaceholderProcessor, Statement
from .quoting import IdentifierQuoter
from .types import ProcessedQuery
from .values import is_skip


@dataclass(frozen=True)
class EngineConfig:
    """Immutable engine settings.

    Attributes:
        dialect: Dialect tag used for identifier quoting.
        identifier_prefix: Text prepended to every `?_name` identifier.
    """

    dialect: str = "sqlite"
    identifier_prefix: str = ""


class QueryTemplateEngine:
    """Turns a query template and its parameters into SQL plus bound values."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()
        self.quoter = IdentifierQuoter(self.config.dialect)
        self.macros = MacroProcessor()
        self.placeholders = PlaceholderProcessor(
            self.quoter, self.config.identifier_prefix
        )

    @property
    def identifier_prefix(self) -> str:
        return self.config.identifier_prefix

    def with_prefix(self, prefix: str) -> QueryTemplateEngine:
        """Return an engine identical to this one but with another prefix."""

        return QueryTemplateEngine(replace(self.config, identifier_prefix=prefix))

    def quote_identifier(self, name: str) -> str:
        return self.quoter.quote_identifier(name)

    def quote_identifiers(self, names: Iterable[str]) -> List[str]:
        return self.quoter.quote_identifiers(names)

    def process(self, query: str, params: Sequence[Any] = ()) -> ProcessedQuery:
        """Process `query` with `params`.

        Returns:
            `(sql, bound_params)` with one `?` marker in `sql` per bound value.

        Raises:
            TemplateError: (or subclass) when the template and parameters do
                not line up.
        """

        statement = self.compile(query, params)
        return statement.sql, statement.params

    def compile(self, query: str, params: Sequence[Any] = ()) -> Statement:
        """Like `process()`, but also report where the markers are."""

        values = list(params)
        filtered = self.macros.filter_detailed(query, values)
        surplus = [value for value in values[filtered.consumed :] if not is_skip(value)]
        if surplus:
            raise ParameterCountError(
                f"Query consumes {filtered.consumed} parameter(s) but "
                f"{len(values)} were supplied."
            )
        return self.placeholders.substitute_tokens(filtered.tokens, filtered.params)
