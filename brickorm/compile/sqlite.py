"""SQLite dialect writer."""
from __future__ import annotations

import re
from collections.abc import Sequence

from brickorm.compile.base import DialectWriter
from brickorm.schema.descriptor import Column


class SQLiteWriter(DialectWriter):
    """Writes SQLite-flavoured parameterized SQL.

    Parameter style: ``?`` – compatible with Python's built-in ``sqlite3``
    positional execution (``cursor.execute(sql, args)``).

    Note: SQLite has no ``ILIKE``; the operator is emitted as written and the
    statement fails in the backend.  SQLite's ``LIKE`` is already
    case-insensitive for ASCII.
    """

    placeholder_pattern = re.compile(r"\?")

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    @property
    def max_params(self) -> int:
        return 999

    def param_placeholder(self, index: int) -> str:
        return "?"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def limit_skip(self, limit: int | None, offset: int | None) -> str | None:
        if limit is None and offset is not None:
            # SQLite only accepts OFFSET after a LIMIT; -1 means no limit.
            return f"LIMIT -1 OFFSET {offset}"
        return super().limit_skip(limit, offset)

    def write_insert(
        self,
        table_sql: str,
        colargs: Sequence[tuple[str, str]],
        columns: Sequence[Column],
    ) -> str:
        # RETURNING requires SQLite 3.35+.
        cols = ", ".join(c for c, _ in colargs)
        args = ", ".join(p for _, p in colargs)
        return f"INSERT INTO {table_sql} ({cols}) VALUES ({args}) RETURNING *"
