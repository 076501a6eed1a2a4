"""UPDATE assembly: bulk updates driven by a query and single-row updates.

Bulk updates take their SET list from explicit :meth:`UpdateBuilder.set`
calls and their filter from the :class:`~brickorm.query.select.SelectBuilder`
they were started from::

    await (
        select(PRODUCTS)
        .where(lambda p: p.active.equal(False))
        .limit(100)
        .set(lambda p: p.price, 0)
        .run(executor)
    )

Most backends reject ``LIMIT`` on UPDATE, so a limited (or offset) query is
rewritten into ``WHERE ( <table>.<pk> IN ( SELECT t1.<pk> ... LIMIT n ) )``.
SET arguments are always bound before the sub-query's arguments.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.clauses import (
    Clause,
    ColumnValueClause,
    ManualClause,
    SetColumnNull,
    SetColumnValue,
    WhereIn,
)
from brickorm.compile.context import CompilationContext, StatementState
from brickorm.compile.helpers import build_where, join_sql_parts, key_filter, render_predicates
from brickorm.compile.registry import WriterFactory
from brickorm.errors import CompilationError, NoPrimaryKeyError, ValueTypeError
from brickorm.executor import Executor
from brickorm.logs import get_logger
from brickorm.query.select import (
    ClauseArg,
    ColumnArg,
    SelectBuilder,
    resolve_clause,
    resolve_column,
)
from brickorm.schema.descriptor import SchemaDescriptor, schema_of
from brickorm.schema.fields import field_for, validate_value

logger = get_logger(__name__)

_ASSIGNMENTS = (SetColumnValue, SetColumnNull, ManualClause)


class UpdateBuilder:
    """Bulk ``UPDATE`` of every row a query selects.

    Args:
        query: The query whose filter, ordering and paging pick the rows.
    """

    def __init__(self, query: SelectBuilder) -> None:
        self._query = query
        self._sets: list[Clause] = []

    @property
    def schema(self) -> SchemaDescriptor:
        return self._query.schema

    @property
    def assignments(self) -> Sequence[Clause]:
        return tuple(self._sets)

    def set(self, column: ColumnArg, value: Any) -> UpdateBuilder:
        """Add ``column=value`` to the SET list.

        Raises:
            ValueTypeError: If ``value`` does not fit the column, or is null
                for a non-nullable column.
        """
        col = self.schema.column(resolve_column(self.schema, column))
        self._sets.append(field_for(col, self.schema.table_name).assign(value))
        return self

    def set_null(self, column: ColumnArg) -> UpdateBuilder:
        """Add ``column=NULL`` to the SET list."""
        col = self.schema.column(resolve_column(self.schema, column))
        self._sets.append(field_for(col, self.schema.table_name).assign_null())
        return self

    def set_col(self, clause: ClauseArg) -> UpdateBuilder:
        """Add a prepared assignment to the SET list.

        Accepts :class:`SetColumnValue`, :class:`SetColumnNull`, a
        :class:`ManualClause` (``p.stock.manual("=stock + ?", 5)``) or an
        equality clause (``p.name.equal("x")``), or a callable returning one.
        """
        resolved = resolve_clause(self.schema, clause)
        if isinstance(resolved, ColumnValueClause):
            resolved = resolved.as_assignment()
        if not isinstance(resolved, _ASSIGNMENTS):
            raise CompilationError(
                f"{type(resolved).__name__} cannot be used in a SET list.", clause="SET"
            )
        if isinstance(resolved, SetColumnNull):
            col = self.schema.column(resolved.column)
            if not col.nullable:
                raise ValueTypeError(col.name, col.type, None)
        self._sets.append(resolved)
        return self

    def compile(self, dialect: str | DialectWriter | None = None) -> CompiledStatement:
        """Compile the ``UPDATE``.

        Raises:
            CompilationError: If nothing was assigned.
            NoPrimaryKeyError: If the query is limited and the table has no
                primary key.
            UnsupportedOperationError: If the query is limited and the dialect
                rejects ``LIMIT`` in a sub-query.
        """
        if not self._sets:
            raise CompilationError("UPDATE requires at least one SET assignment.", clause="SET")

        ctx = CompilationContext(WriterFactory.create(dialect), self.schema)
        state = ctx.new_state()
        sets = render_predicates(state, None, self._sets)
        head = f"UPDATE {ctx.table_sql} SET {', '.join(sets)}"
        return state.finish(join_sql_parts([head, self._build_where(ctx, state)]))

    def to_sql(self, dialect: str | DialectWriter | None = None) -> str:
        return self.compile(dialect).sql

    def _build_where(self, ctx: CompilationContext, state: StatementState) -> str | None:
        query = self._query
        if query.limit_value is None and query.offset_value is None:
            return build_where(state, ctx.table_sql, query.wheres, query.exist_ins)
        return f"WHERE ( {WhereIn(query).render(state, ctx.table_sql)} )"

    async def run(self, executor: Executor) -> int | None:
        """Execute the update; returns the executor's affected-row count."""
        statement = self.compile(executor.syntax)
        logger.debug("statement_executing", kind="update", table=self.schema.table_name)
        return await executor.execute(statement.sql, list(statement.args))


# ---------------------------------------------------------------------------
# Single-row update
# ---------------------------------------------------------------------------


def compile_update_one(
    obj: Any,
    dialect: str | DialectWriter | None = None,
    schema: SchemaDescriptor | None = None,
) -> CompiledStatement | None:
    """Compile an ``UPDATE`` writing every non-key column of ``obj``.

    Args:
        obj: The model object (attributes or mapping keys named after fields).
        dialect: Dialect tag or writer; ``None`` uses the configured default.
        schema: Descriptor to use; defaults to ``obj.__schema__``.

    Returns:
        The statement, or ``None`` when the table has no non-key columns.

    Raises:
        NoPrimaryKeyError: If the table has no primary key.
        ValueTypeError: If an attribute does not fit its column type.
    """
    schema = schema or schema_of(obj)
    if not schema.primary_keys:
        raise NoPrimaryKeyError(schema.table_name, "update")
    columns = schema.non_key_columns
    if not columns:
        return None

    ctx = CompilationContext(WriterFactory.create(dialect), schema)
    writer = ctx.writer
    state = ctx.new_state()
    sets = [
        f"{writer.quote_identifier(col.name)}="
        f"{state.bind(validate_value(col, schema.bind(obj, col.name)))}"
        for col in columns
    ]
    where = key_filter(state, schema, obj)
    return state.finish(f"UPDATE {ctx.table_sql} SET {', '.join(sets)} where {where}")


async def update_one(
    obj: Any,
    executor: Executor,
    schema: SchemaDescriptor | None = None,
) -> None:
    """Write every non-key column of ``obj`` to its row.

    Succeeds without touching the executor when there is nothing to update.
    """
    statement = compile_update_one(obj, executor.syntax, schema)
    if statement is None:
        logger.debug("update_skipped", reason="no non-key columns")
        return
    logger.debug("statement_executing", kind="update_one", dialect=statement.dialect)
    await executor.execute(statement.sql, list(statement.args))

