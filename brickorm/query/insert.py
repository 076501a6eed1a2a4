"""Single-row INSERT that hands the stored row back.

Columns whose value is :data:`~brickorm.schema.values.UNSET` are left out of
the column list so the database default (or sequence) applies.  How the
written row comes back is the dialect writer's business: ``RETURNING *`` on
Postgres and SQLite, ``OUTPUT Inserted.<col>`` on SQL Server.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.context import CompilationContext
from brickorm.compile.registry import WriterFactory
from brickorm.errors import CompilationError
from brickorm.executor import Executor
from brickorm.logs import get_logger
from brickorm.schema.descriptor import SchemaDescriptor, schema_of
from brickorm.schema.fields import validate_value
from brickorm.schema.values import UNSET

logger = get_logger(__name__)


def compile_insert_one(
    obj: Any,
    dialect: str | DialectWriter | None = None,
    schema: SchemaDescriptor | None = None,
) -> CompiledStatement:
    """Compile an ``INSERT`` of every provided column of ``obj``.

    Raises:
        CompilationError: If every column of ``obj`` is ``UNSET``.
        UnsupportedOperationError: If the dialect cannot return the written row.
        ValueTypeError: If an attribute does not fit its column type.
    """
    schema = schema or schema_of(obj)
    ctx = CompilationContext(WriterFactory.create(dialect), schema)
    writer = ctx.writer
    state = ctx.new_state()

    colargs: list[tuple[str, str]] = []
    for col in schema.columns:
        value = schema.bind(obj, col.name)
        if value is UNSET:
            continue
        colargs.append(
            (writer.quote_identifier(col.name), state.bind(validate_value(col, value)))
        )
    if not colargs:
        raise CompilationError(
            f"INSERT into '{schema.table_name}' has no column values.", clause="INSERT"
        )
    return state.finish(writer.write_insert(ctx.table_sql, colargs, schema.columns))


async def insert_one(
    obj: Any,
    executor: Executor,
    schema: SchemaDescriptor | None = None,
) -> Sequence[Any] | None:
    """Insert ``obj`` and return the stored row (``None`` if nothing came back)."""
    statement = compile_insert_one(obj, executor.syntax, schema)
    logger.debug("statement_executing", kind="insert_one", dialect=statement.dialect)
    rows = await executor.fetch_rows(statement.sql, list(statement.args))
    return rows[0] if rows else None
