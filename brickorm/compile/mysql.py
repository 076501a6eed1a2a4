"""MySQL dialect writer."""

from __future__ import annotations

import re

from brickorm.compile.base import DialectWriter

# Largest unsigned BIGINT; MySQL's documented way to say "no limit".
_MYSQL_NO_LIMIT = 18446744073709551615


class MySQLWriter(DialectWriter):
    """Writes MySQL-flavoured parameterized SQL.

    Parameter style: ``?`` – the positional form of the MySQL binary
    protocol (``aiomysql`` / ``asyncmy`` accept it through their
    prepared-statement paths).

    Identifiers are quoted with backticks (`` ` ``) rather than double-quotes.

    MySQL has no row-return clause for ``INSERT`` and rejects ``LIMIT``
    inside ``IN (SELECT ...)`` sub-queries; both paths raise
    :class:`~brickorm.errors.UnsupportedOperationError`.
    """

    placeholder_pattern = re.compile(r"\?")
    supports_limit_in_subquery = False

    @property
    def dialect_name(self) -> str:
        return "mysql"

    @property
    def max_params(self) -> int:
        return 64000

    def param_placeholder(self, index: int) -> str:
        return "?"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("`", "``")
        return f"`{escaped}`"

    def limit_skip(self, limit: int | None, offset: int | None) -> str | None:
        if limit is None and offset is not None:
            return f"LIMIT {_MYSQL_NO_LIMIT} OFFSET {offset}"
        return super().limit_skip(limit, offset)
