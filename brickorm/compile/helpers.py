"""Fragment helpers shared by every statement assembler.

``build_where`` and ``build_tail`` are the only places WHERE and
ORDER/LIMIT/OFFSET text is produced, so SELECT, COUNT, the bulk-update
WHERE-IN sub-query and EXISTS sub-queries never drift apart in filtering
semantics.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from brickorm.errors import ValueTypeError
from brickorm.schema.values import is_null

if TYPE_CHECKING:
    from brickorm.compile.base import DialectWriter
    from brickorm.compile.clauses import Clause
    from brickorm.compile.context import StatementState
    from brickorm.schema.descriptor import SchemaDescriptor


@dataclass(frozen=True)
class OrderBy:
    """A single ORDER BY entry.

    Attributes:
        column: Column name to order by.
        direction: Sort direction.
    """

    column: str
    direction: Literal["ASC", "DESC"] = "ASC"


def join_sql_parts(parts: Iterable[str | None]) -> str:
    """Join the non-empty fragments with single spaces."""
    return " ".join(p for p in parts if p)


def render_predicates(
    state: StatementState,
    alias: str | None,
    clauses: Sequence[Clause],
) -> list[str]:
    """Render ``clauses`` in order, binding their values as they are written."""
    parts: list[str] = []
    for clause in clauses:
        sql = clause.render(state, alias)
        if sql:
            parts.append(sql)
    return parts


def build_where(
    state: StatementState,
    alias: str | None,
    wheres: Sequence[Clause],
    exist_ins: Sequence[Clause] = (),
) -> str | None:
    """Return ``WHERE ( p1 AND p2 ... )`` or ``None`` when nothing filters.

    Plain predicates are written first, then EXISTS sub-queries, and
    arguments are bound in that same order.
    """
    parts = render_predicates(state, alias, wheres)
    parts.extend(render_predicates(state, alias, exist_ins))
    if not parts:
        return None
    return f"WHERE ( {' AND '.join(parts)} )"


def build_tail(
    writer: DialectWriter,
    alias: str | None,
    order_by: Sequence[OrderBy],
    limit: int | None,
    offset: int | None,
) -> str | None:
    """Return the ``ORDER BY`` / paging fragment, or ``None``."""
    parts: list[str] = []
    paging = writer.limit_skip(limit, offset)

    if order_by:
        items = [
            f"{column_sql(writer, alias, o.column)} {o.direction}" for o in order_by
        ]
        parts.append(f"ORDER BY {', '.join(items)}")
    elif paging and writer.requires_order_for_offset:
        parts.append("ORDER BY (SELECT NULL)")

    if paging:
        parts.append(paging)
    return join_sql_parts(parts) or None


def column_sql(writer: DialectWriter, alias: str | None, column: str) -> str:
    """Return the column qualified by ``alias``, or bare when ``alias`` is ``None``."""
    if alias is None:
        return writer.quote_identifier(column)
    return writer.write_column(alias, column)


def key_filter(state: StatementState, schema: SchemaDescriptor, obj: Any) -> str:
    """Return ``"pk"=<placeholder>`` for ``obj``, joined with AND for compound keys.

    Raises:
        ValueTypeError: If a key value is missing, ``None`` or does not fit
            the key column's type.
    """
    from brickorm.schema.fields import validate_value

    writer = state.writer
    parts: list[str] = []
    for col in schema.primary_key_columns:
        value = schema.bind(obj, col.name)
        if is_null(value):
            raise ValueTypeError(col.name, col.type, None)
        value = validate_value(col, value)
        parts.append(f"{writer.quote_identifier(col.name)}={state.bind(value)}")
    return " AND ".join(parts)
