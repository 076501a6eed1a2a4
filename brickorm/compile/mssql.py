"""SQL Server dialect writer."""

from __future__ import annotations

import re
from collections.abc import Sequence

from brickorm.compile.base import DialectWriter
from brickorm.schema.descriptor import Column


class MssqlWriter(DialectWriter):
    """Writes SQL Server-flavoured parameterized SQL.

    Parameter style: ``@p1, @p2, ...`` – the named-positional form used by
    ``sp_executesql``.

    Identifiers are quoted with square brackets.  Paging uses
    ``OFFSET ... ROWS FETCH NEXT ... ROWS ONLY``, which SQL Server only
    accepts after an ``ORDER BY``; the assemblers add
    ``ORDER BY (SELECT NULL)`` when the query has no ordering of its own.
    """

    placeholder_pattern = re.compile(r"@p\d+")
    requires_order_for_offset = True

    @property
    def dialect_name(self) -> str:
        return "mssql"

    @property
    def max_params(self) -> int:
        return 2100

    def param_placeholder(self, index: int) -> str:
        return f"@p{index}"

    def quote_identifier(self, name: str) -> str:
        escaped = name.replace("]", "]]")
        return f"[{escaped}]"

    def limit_skip(self, limit: int | None, offset: int | None) -> str | None:
        if limit is None and offset is None:
            return None
        sql = f"OFFSET {offset or 0} ROWS"
        if limit is not None:
            sql += f" FETCH NEXT {limit} ROWS ONLY"
        return sql

    def write_insert(
        self,
        table_sql: str,
        colargs: Sequence[tuple[str, str]],
        columns: Sequence[Column],
    ) -> str:
        cols = ", ".join(c for c, _ in colargs)
        args = ", ".join(p for _, p in colargs)
        outputs = ", ".join(self.write_column("Inserted", c.name) for c in columns)
        return f"INSERT INTO {table_sql} ({cols}) OUTPUT {outputs} VALUES ({args})"
