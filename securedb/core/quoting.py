"""Dialect-aware quoting for table and column identifiers."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from .errors import IdentifierTypeError

QUOTE_PAIRS: Dict[str, Tuple[str, str]] = {
    "mysql": ("`", "`"),
    "postgres": ('"', '"'),
    "sqlite": ("`", "`"),
    "sqlserver": ("[", "]"),
    "oracle": ('"', '"'),
    "firebird": ('"', '"'),
}

DIALECT_ALIASES: Dict[str, str] = {
    "mariadb": "mysql",
    "pgsql": "postgres",
    "postgresql": "postgres",
    "sqlite3": "sqlite",
    "sqlsrv": "sqlserver",
    "mssql": "sqlserver",
    "oci": "oracle",
}

DEFAULT_QUOTE_PAIR = ('"', '"')


def normalize_dialect_name(name: str) -> str:
    """Lowercase a dialect tag and resolve known aliases."""

    key = name.strip().lower()
    return DIALECT_ALIASES.get(key, key)


class IdentifierQuoter:
    """Quotes identifiers with the delimiter pair of one dialect."""

    def __init__(self, dialect: str) -> None:
        self.dialect = normalize_dialect_name(dialect)
        self.open_char, self.close_char = QUOTE_PAIRS.get(
            self.dialect, DEFAULT_QUOTE_PAIR
        )

    def quote_identifier(self, name: str) -> str:
        """Quote an identifier, quoting each part of a dotted name separately."""

        if not isinstance(name, str):
            raise IdentifierTypeError(
                f"Identifier must be a string, got {type(name).__name__}."
            )
        return ".".join(self._quote_segment(part) for part in name.split("."))

    def quote_identifiers(self, names: Iterable[str]) -> List[str]:
        """Quote every identifier in `names`."""

        return [self.quote_identifier(name) for name in names]

    def _quote_segment(self, segment: str) -> str:
        segment = segment.strip(self.open_char + self.close_char)
        # The closing delimiter is the one that terminates the identifier.
        escaped = segment.replace(self.close_char, self.close_char * 2)
        return f"{self.open_char}{escaped}{self.close_char}"
