"""Single-row DELETE, targeted by primary key."""
from __future__ import annotations

from typing import Any

from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.context import CompilationContext
from brickorm.compile.helpers import key_filter
from brickorm.compile.registry import WriterFactory
from brickorm.errors import NoPrimaryKeyError
from brickorm.executor import Executor
from brickorm.logs import get_logger
from brickorm.schema.descriptor import SchemaDescriptor, schema_of

logger = get_logger(__name__)


def compile_delete_one(
    obj: Any,
    dialect: str | DialectWriter | None = None,
    schema: SchemaDescriptor | None = None,
) -> CompiledStatement:
    """Compile ``DELETE FROM <table> where "pk"=<placeholder>`` for ``obj``.

    Raises:
        NoPrimaryKeyError: If the table has no primary key.
    """
    schema = schema or schema_of(obj)
    if not schema.primary_keys:
        raise NoPrimaryKeyError(schema.table_name, "delete")

    ctx = CompilationContext(WriterFactory.create(dialect), schema)
    state = ctx.new_state()
    where = key_filter(state, schema, obj)
    return state.finish(f"DELETE FROM {ctx.table_sql} where {where}")


async def delete_one(
    obj: Any,
    executor: Executor,
    schema: SchemaDescriptor | None = None,
) -> int | None:
    """Delete the row ``obj`` maps to; returns the executor's affected-row count."""
    statement = compile_delete_one(obj, executor.syntax, schema)
    logger.debug("statement_executing", kind="delete_one", dialect=statement.dialect)
    return await executor.execute(statement.sql, list(statement.args))
