"""Clause model: predicates and assignments that render and bind in one step.

Every clause is a small frozen dataclass with a single ``render`` method.
``render`` writes the SQL fragment and binds the clause's values through the
shared :class:`~brickorm.compile.context.StatementState` at the same time,
so the n-th placeholder in the statement always belongs to the n-th
argument.

Clause variants
---------------
* :class:`ColumnValueClause`: ``col <op> ?`` / ``col IS [NOT] NULL``
* :class:`SetColumnValue`: ``col=?`` (UPDATE SET list)
* :class:`SetColumnNull`: ``col=NULL`` (UPDATE SET list)
* :class:`ManualClause`: ``col`` followed by a hand-written fragment
* :class:`ExistsClause`: ``[NOT] EXISTS ( SELECT ... )`` against another table
* :class:`WhereIn`: ``pk IN ( SELECT pk ... LIMIT n )`` (limited bulk UPDATE)
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from brickorm.compile.helpers import (
    OrderBy,
    build_tail,
    build_where,
    column_sql,
    join_sql_parts,
    render_predicates,
)
from brickorm.errors import CompilationError, UnsupportedOperationError
from brickorm.schema.values import is_null

if TYPE_CHECKING:
    from brickorm.compile.context import StatementState
    from brickorm.schema.descriptor import SchemaDescriptor

#: A bind marker, or the ``??`` escape for a literal question mark.
_MARKER = re.compile(r"\?\??")


class ClauseOp(str, Enum):
    """Operator text for column/value predicates."""

    EQ = "="
    NE = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    LIKE = "like"
    ILIKE = "ilike"
    NOT_LIKE = "not like"
    NOT_ILIKE = "not ilike"


class Clause(ABC):
    """A predicate or assignment compiled into one SQL fragment."""

    #: Column the clause is bound to; ``None`` for table-level clauses.
    column: str | None
    #: Dotted name of the table the clause was built for; ``None`` when unknown.
    table: str | None = None

    @abstractmethod
    def render(self, state: StatementState, alias: str | None) -> str | None:
        """Write the fragment and bind its values.

        Args:
            state: Per-statement placeholder / argument accumulator.
            alias: Table alias qualifying column references, or ``None``
                for bare column names.

        Returns:
            The SQL fragment, or ``None`` if the clause writes nothing.
        """


@dataclass(frozen=True)
class ColumnValueClause(Clause):
    """Compares a column with a value.

    A ``None`` / ``UNSET`` value switches the clause to ``IS NULL`` (or
    ``IS NOT NULL`` when ``not_clause`` is set) and binds nothing.  The check
    happens on every render, for every operator.

    Attributes:
        column: Column name.
        op: Comparison operator.
        value: Value to bind.
        not_clause: Negation flag; selects ``IS NOT NULL`` for null values.
        table: Owning table, set by field handles.
    """

    column: str
    op: ClauseOp
    value: Any
    not_clause: bool = False
    table: str | None = field(default=None, compare=False)

    @property
    def null_clause(self) -> bool:
        return is_null(self.value)

    def render(self, state: StatementState, alias: str | None) -> str | None:
        col = column_sql(state.writer, alias, self.column)
        if self.null_clause:
            return f"{col} IS NOT NULL" if self.not_clause else f"{col} IS NULL"
        op = state.writer.like_operator(self.op.value)
        return f"{col} {op} {state.bind(self.value)}"

    def as_assignment(self) -> SetColumnValue | SetColumnNull:
        """Convert an equality clause into the matching SET-list entry.

        Raises:
            CompilationError: For any operator other than ``=``.
        """
        if self.op is not ClauseOp.EQ:
            raise CompilationError(
                f"Only '=' clauses can be used as assignments, got '{self.op.value}'.",
                clause="SET",
            )
        if self.null_clause:
            return SetColumnNull(column=self.column, table=self.table)
        return SetColumnValue(column=self.column, value=self.value, table=self.table)


@dataclass(frozen=True)
class SetColumnValue(Clause):
    """``col=?`` inside an UPDATE SET list."""

    column: str
    value: Any
    table: str | None = field(default=None, compare=False)

    def render(self, state: StatementState, alias: str | None) -> str | None:
        col = column_sql(state.writer, alias, self.column)
        return f"{col}={state.bind(self.value)}"


@dataclass(frozen=True)
class SetColumnNull(Clause):
    """``col=NULL`` inside an UPDATE SET list; binds nothing."""

    column: str
    table: str | None = field(default=None, compare=False)

    def render(self, state: StatementState, alias: str | None) -> str | None:
        return f"{column_sql(state.writer, alias, self.column)}=NULL"


@dataclass(frozen=True)
class ManualClause(Clause):
    """A column followed by a hand-written fragment.

    Each ``?`` in ``sql`` is replaced with the next placeholder and bound to
    the matching entry of ``values``.  ``??`` writes a literal ``?``, e.g.
    the Postgres jsonb operator ``" ?? 'sku'"``.
    """

    column: str
    sql: str
    values: tuple[Any, ...] = ()
    table: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        markers = sum(1 for m in _MARKER.finditer(self.sql) if m.group() == "?")
        if markers != len(self.values):
            raise CompilationError(
                f"Manual clause on '{self.column}' has {markers} '?' marker(s) "
                f"but {len(self.values)} value(s).",
                clause="WHERE",
            )

    def render(self, state: StatementState, alias: str | None) -> str | None:
        out = [column_sql(state.writer, alias, self.column)]
        values = iter(self.values)
        pos = 0
        for m in _MARKER.finditer(self.sql):
            out.append(self.sql[pos:m.start()])
            out.append("?" if m.group() == "??" else state.bind(next(values)))
            pos = m.end()
        out.append(self.sql[pos:])
        return "".join(out)


# ---------------------------------------------------------------------------
# Sub-query clauses
# ---------------------------------------------------------------------------


class QuerySource(Protocol):
    """The read-only view of a select query that sub-query clauses need."""

    @property
    def schema(self) -> SchemaDescriptor: ...

    @property
    def wheres(self) -> Sequence[Clause]: ...

    @property
    def exist_ins(self) -> Sequence[Clause]: ...

    @property
    def order_by(self) -> Sequence[OrderBy]: ...

    @property
    def limit_value(self) -> int | None: ...

    @property
    def offset_value(self) -> int | None: ...


@dataclass(frozen=True)
class ExistsClause(Clause):
    """``[NOT] EXISTS`` against another table, correlated on one column pair.

    The sub-query takes a fresh alias from the statement's allocator, so it
    never collides with the outer table even when both are the same table.
    Ordering and paging of the inner query are ignored.

    Attributes:
        column: Column of the outer table.
        inner: The query filtering the related table.
        inner_column: Column of the related table matched against ``column``.
        negated: Emit ``NOT EXISTS``.
    """

    column: str
    inner: QuerySource = field(compare=False)
    inner_column: str
    negated: bool = False

    def render(self, state: StatementState, alias: str | None) -> str | None:
        writer = state.writer
        inner_alias = state.aliases.next()
        inner_col = writer.write_column(inner_alias, self.inner_column)
        outer_col = column_sql(writer, alias, self.column)

        conditions = [f"{inner_col} = {outer_col}"]
        conditions.extend(render_predicates(state, inner_alias, self.inner.wheres))
        conditions.extend(render_predicates(state, inner_alias, self.inner.exist_ins))

        table_sql = writer.quote_table(self.inner.schema.identifier)
        keyword = "NOT EXISTS" if self.negated else "EXISTS"
        return (
            f"{keyword} ( SELECT {inner_col} FROM {table_sql} {inner_alias} "
            f"WHERE {' AND '.join(conditions)} )"
        )


@dataclass(frozen=True)
class WhereIn(Clause):
    """Re-selects the filtered, limited rows by primary key.

    Renders ``<outer pk> IN ( SELECT <pk> FROM <table> <alias> WHERE ...
    ORDER BY ... LIMIT n )``.  Used for bulk updates that carry a limit,
    because UPDATE statements cannot be limited directly on most backends.

    Raises (on render):
        NoPrimaryKeyError: If the table has no primary key.
        UnsupportedOperationError: If the dialect forbids ``LIMIT`` in the
            sub-query.
    """

    query: QuerySource = field(compare=False)
    column: str | None = None

    def render(self, state: StatementState, alias: str | None) -> str | None:
        writer = state.writer
        schema = self.query.schema
        pk = schema.unique_identifier.name

        if not writer.supports_limit_in_subquery:
            raise UnsupportedOperationError(
                writer.dialect_name, "LIMIT inside an IN sub-query (limited bulk update)"
            )

        inner_alias = state.aliases.next()
        inner_pk = writer.write_column(inner_alias, pk)
        sub_sql = join_sql_parts(
            [
                f"SELECT {inner_pk} FROM {writer.quote_table(schema.identifier)} {inner_alias}",
                build_where(state, inner_alias, self.query.wheres, self.query.exist_ins),
                build_tail(
                    writer,
                    inner_alias,
                    self.query.order_by,
                    self.query.limit_value,
                    self.query.offset_value,
                ),
            ]
        )
        return f"{column_sql(writer, alias, pk)} IN ( {sub_sql} )"
