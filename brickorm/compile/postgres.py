"""PostgreSQL dialect writer."""

from __future__ import annotations

import re
from collections.abc import Sequence

from brickorm.compile.base import DialectWriter
from brickorm.schema.descriptor import Column


class PostgresWriter(DialectWriter):
    """Writes PostgreSQL-flavoured parameterized SQL.

    Parameter style: ``$1, $2, ...`` – the numbered form used by
    ``asyncpg`` and by server-side prepared statements.
    """

    placeholder_pattern = re.compile(r"\$\d+")

    @property
    def dialect_name(self) -> str:
        return "postgres"

    @property
    def max_params(self) -> int:
        return 65535

    def param_placeholder(self, index: int) -> str:
        return f"${index}"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def write_insert(
        self,
        table_sql: str,
        colargs: Sequence[tuple[str, str]],
        columns: Sequence[Column],
    ) -> str:
        cols = ", ".join(c for c, _ in colargs)
        args = ", ".join(p for _, p in colargs)
        return f"INSERT INTO {table_sql} ({cols}) VALUES ({args}) RETURNING *"
