"""SELECT assembly and execution.

``SelectBuilder`` accumulates predicates, EXISTS sub-queries, ordering and
paging, then compiles them in the fixed order head → where → tail.  The
same WHERE logic backs both the row fetch and the ``COUNT(*)`` head, and a
paged count wraps the paged fetch, so a count always matches the fetch.

Example::

    query = (
        select(PRODUCTS)
        .where(lambda p: p.name.like("%chair%"))
        .where(lambda p: p.price.lt(100))
        .order_by_desc(lambda p: p.price)
        .limit(10)
    )
    statement = query.compile("postgres")
    # SELECT t1."product_id", t1."name", ... FROM "products" t1
    #   WHERE ( t1."name" like $1 AND t1."price" < $2 )
    #   ORDER BY t1."price" DESC LIMIT 10
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Union

from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.clauses import Clause, ExistsClause
from brickorm.compile.context import CompilationContext
from brickorm.compile.helpers import OrderBy, build_tail, build_where, join_sql_parts
from brickorm.compile.registry import WriterFactory
from brickorm.errors import CompilationError
from brickorm.executor import Executor
from brickorm.logs import get_logger
from brickorm.schema.descriptor import SchemaDescriptor, schema_of
from brickorm.schema.fields import BasicField, SchemaFields

if TYPE_CHECKING:
    from brickorm.compile.context import StatementState
    from brickorm.query.update import UpdateBuilder

logger = get_logger(__name__)

#: A clause, or a callable building one from the schema's field handles.
ClauseArg = Union[Clause, Callable[[SchemaFields], Clause]]

#: A column name, a field handle, or a callable returning a field handle.
ColumnArg = Union[str, BasicField, Callable[[SchemaFields], BasicField]]


def resolve_column(schema: SchemaDescriptor, ref: ColumnArg) -> str:
    """Return the column name ``ref`` designates on ``schema``.

    Raises:
        MissingColumnError: If the column is not declared on ``schema``.
        CompilationError: If a field handle belongs to another table.
    """
    if callable(ref) and not isinstance(ref, BasicField):
        ref = ref(schema.fields)
    if isinstance(ref, BasicField):
        _check_table(schema, ref.table, ref.name)
        return schema.column(ref.name).name
    return schema.column_for_field(ref).name


def resolve_clause(schema: SchemaDescriptor, arg: ClauseArg) -> Clause:
    """Return the clause ``arg`` designates, checked against ``schema``.

    Raises:
        MissingColumnError: If the clause's column is not declared on ``schema``.
        CompilationError: If the clause was built for another table.
    """
    clause = arg if isinstance(arg, Clause) else arg(schema.fields)
    if not isinstance(clause, Clause):
        raise CompilationError(
            f"Expected a clause, got {type(clause).__name__}.", clause="WHERE"
        )
    if clause.column is not None:
        _check_table(schema, clause.table, clause.column)
        schema.column(clause.column)
    return clause


def _check_table(schema: SchemaDescriptor, table: str | None, column: str) -> None:
    if table is not None and table != schema.table_name:
        raise CompilationError(
            f"Column '{table}.{column}' does not belong to table '{schema.table_name}'.",
            clause="WHERE",
        )


class SelectBuilder:
    """Builds and runs a ``SELECT`` against one table.

    Builder methods mutate the instance and return it, so calls chain.
    Compiling never changes the builder: compiling twice yields the same
    SQL and arguments.

    Args:
        model: A :class:`SchemaDescriptor` or a model carrying ``__schema__``.
    """

    def __init__(self, model: Any) -> None:
        self._schema = schema_of(model)
        self._wheres: list[Clause] = []
        self._exist_ins: list[Clause] = []
        self._order_by: list[OrderBy] = []
        self._limit: int | None = None
        self._offset: int | None = None

    # ------------------------------------------------------------------
    # Read-only state (also consumed by EXISTS / WHERE-IN sub-queries)
    # ------------------------------------------------------------------

    @property
    def schema(self) -> SchemaDescriptor:
        return self._schema

    @property
    def wheres(self) -> Sequence[Clause]:
        return tuple(self._wheres)

    @property
    def exist_ins(self) -> Sequence[Clause]:
        return tuple(self._exist_ins)

    @property
    def order_by(self) -> Sequence[OrderBy]:
        return tuple(self._order_by)

    @property
    def limit_value(self) -> int | None:
        return self._limit

    @property
    def offset_value(self) -> int | None:
        return self._offset

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def where(self, clause: ClauseArg) -> SelectBuilder:
        """Add a predicate; all predicates are combined with ``AND``.

        Args:
            clause: A clause, or a callable receiving the field handles::

                query.where(lambda p: p.name.equal("chair"))
        """
        self._wheres.append(resolve_clause(self._schema, clause))
        return self

    def exists(
        self,
        inner: SelectBuilder | Any,
        column: ColumnArg,
        inner_column: ColumnArg,
    ) -> SelectBuilder:
        """Keep rows for which ``inner`` has a row with ``inner_column = column``.

        Args:
            inner: A :class:`SelectBuilder` filtering the related table, or a
                model / descriptor (no extra filtering).
            column: Column of this table.
            inner_column: Column of the related table.
        """
        return self._add_exists(inner, column, inner_column, negated=False)

    def not_exists(
        self,
        inner: SelectBuilder | Any,
        column: ColumnArg,
        inner_column: ColumnArg,
    ) -> SelectBuilder:
        """Keep rows for which ``inner`` has no row with ``inner_column = column``."""
        return self._add_exists(inner, column, inner_column, negated=True)

    def _add_exists(
        self,
        inner: SelectBuilder | Any,
        column: ColumnArg,
        inner_column: ColumnArg,
        *,
        negated: bool,
    ) -> SelectBuilder:
        if not isinstance(inner, SelectBuilder):
            inner = SelectBuilder(inner)
        self._exist_ins.append(
            ExistsClause(
                column=resolve_column(self._schema, column),
                inner=inner,
                inner_column=resolve_column(inner.schema, inner_column),
                negated=negated,
            )
        )
        return self

    # ------------------------------------------------------------------
    # Ordering and paging
    # ------------------------------------------------------------------

    def order_by_asc(self, column: ColumnArg) -> SelectBuilder:
        self._order_by.append(OrderBy(resolve_column(self._schema, column), "ASC"))
        return self

    def order_by_desc(self, column: ColumnArg) -> SelectBuilder:
        self._order_by.append(OrderBy(resolve_column(self._schema, column), "DESC"))
        return self

    def limit(self, value: int) -> SelectBuilder:
        self._limit = _non_negative(value, "LIMIT")
        return self

    def offset(self, value: int) -> SelectBuilder:
        self._offset = _non_negative(value, "OFFSET")
        return self

    # ------------------------------------------------------------------
    # Bulk update entry points
    # ------------------------------------------------------------------

    def set(self, column: ColumnArg, value: Any) -> UpdateBuilder:
        """Start a bulk ``UPDATE`` of the rows this query selects."""
        from brickorm.query.update import UpdateBuilder

        return UpdateBuilder(self).set(column, value)

    def set_col(self, clause: ClauseArg) -> UpdateBuilder:
        from brickorm.query.update import UpdateBuilder

        return UpdateBuilder(self).set_col(clause)

    def set_null(self, column: ColumnArg) -> UpdateBuilder:
        from brickorm.query.update import UpdateBuilder

        return UpdateBuilder(self).set_null(column)

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def compile(self, dialect: str | DialectWriter | None = None) -> CompiledStatement:
        """Compile the row-fetching ``SELECT``.

        Args:
            dialect: Dialect tag or writer; ``None`` uses the
                ``default_dialect`` setting.
        """
        ctx = CompilationContext(WriterFactory.create(dialect), self._schema)
        return self._compile(ctx, self._build_head_select)

    def compile_count(self, dialect: str | DialectWriter | None = None) -> CompiledStatement:
        """Compile ``SELECT COUNT(*)`` over the rows :meth:`compile` would fetch.

        Without paging the count shares the fetch's WHERE and drops ORDER BY.
        With a limit or offset the paged fetch is wrapped as a derived table
        so the paging applies to the filtered rows, not to the aggregate::

            SELECT COUNT(*) FROM ( SELECT t1."product_id" FROM "products" t1
              WHERE ... ORDER BY ... LIMIT 2 ) t2
        """
        ctx = CompilationContext(WriterFactory.create(dialect), self._schema)
        if self._limit is None and self._offset is None:
            return self._compile(ctx, self._build_head_count, order_by=())
        state = ctx.new_state()
        alias = state.aliases.next()
        inner = self._assemble(state, ctx, self._build_head_key, self._order_by, alias)
        outer_alias = state.aliases.next()
        return state.finish(
            f"SELECT {ctx.writer.count_star()} FROM ( {inner} ) {outer_alias}"
        )

    def to_sql(self, dialect: str | DialectWriter | None = None) -> str:
        """Return the SQL that :meth:`run` would execute."""
        return self.compile(dialect).sql

    def _compile(
        self,
        ctx: CompilationContext,
        build_head: Callable[[CompilationContext, str], str],
        order_by: Sequence[OrderBy] | None = None,
    ) -> CompiledStatement:
        state = ctx.new_state()
        alias = state.aliases.next()
        if order_by is None:
            order_by = self._order_by
        return state.finish(self._assemble(state, ctx, build_head, order_by, alias))

    def _assemble(
        self,
        state: StatementState,
        ctx: CompilationContext,
        build_head: Callable[[CompilationContext, str], str],
        order_by: Sequence[OrderBy],
        alias: str,
    ) -> str:
        return join_sql_parts(
            [
                build_head(ctx, alias),
                build_where(state, alias, self._wheres, self._exist_ins),
                build_tail(ctx.writer, alias, order_by, self._limit, self._offset),
            ]
        )

    @staticmethod
    def _build_head_select(ctx: CompilationContext, alias: str) -> str:
        cols = ", ".join(ctx.writer.write_column(alias, c.name) for c in ctx.schema.columns)
        return f"SELECT {cols} FROM {ctx.table_sql} {alias}"

    @staticmethod
    def _build_head_count(ctx: CompilationContext, alias: str) -> str:
        return f"SELECT {ctx.writer.count_star()} FROM {ctx.table_sql} {alias}"

    @staticmethod
    def _build_head_key(ctx: CompilationContext, alias: str) -> str:
        # Keyless tables project their first column.
        keys = ctx.schema.primary_key_columns or ctx.schema.columns[:1]
        return f"SELECT {ctx.writer.write_column(alias, keys[0].name)} FROM {ctx.table_sql} {alias}"

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run(self, executor: Executor) -> list[Sequence[Any]]:
        """Execute the query and return the rows exactly as the executor yields them."""
        statement = self.compile(executor.syntax)
        logger.debug("statement_executing", kind="select", table=self._schema.table_name)
        rows = await executor.fetch_rows(statement.sql, list(statement.args))
        return list(rows)

    async def count(self, executor: Executor) -> int:
        """Execute ``SELECT COUNT(*)`` for this query."""
        statement = self.compile_count(executor.syntax)
        logger.debug("statement_executing", kind="count", table=self._schema.table_name)
        rows = await executor.fetch_rows(statement.sql, list(statement.args))
        return int(rows[0][0]) if rows else 0


def select(model: Any) -> SelectBuilder:
    """Start a query over every row of ``model``'s table."""
    return SelectBuilder(model)


def _non_negative(value: int, clause: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CompilationError(f"{clause} must be a non-negative integer, got {value!r}.", clause=clause)
    return value
