"""Typed column handles that create clauses.

Each column of a :class:`~brickorm.schema.descriptor.SchemaDescriptor` is
exposed as a field handle whose class depends on the column's type tag:

* :class:`TextField` – equality plus the LIKE family.
* :class:`NumericField` – equality plus ordering comparisons (numbers,
  dates and timestamps).
* :class:`BasicField` – equality only.

Non-null values are validated against the column's declared type with a
pydantic ``TypeAdapter`` when the clause is created, and the validated value
is what gets bound.  ``None`` and ``UNSET`` turn any comparison into
``IS NULL`` / ``IS NOT NULL``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal
from functools import lru_cache
from typing import TYPE_CHECKING, Any
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from brickorm.compile.clauses import (
    ClauseOp,
    ColumnValueClause,
    ManualClause,
    SetColumnNull,
    SetColumnValue,
)
from brickorm.errors import ValueTypeError
from brickorm.schema.values import is_null

if TYPE_CHECKING:
    from brickorm.schema.descriptor import Column, SchemaDescriptor

# ---------------------------------------------------------------------------
# Type tags
# ---------------------------------------------------------------------------

#: Python type each known type tag binds as.
TYPE_TAGS: dict[str, Any] = {
    "int": int,
    "integer": int,
    "smallint": int,
    "bigint": int,
    "serial": int,
    "bigserial": int,
    "float": float,
    "real": float,
    "double": float,
    "double precision": float,
    "decimal": Decimal,
    "numeric": Decimal,
    "money": Decimal,
    "text": str,
    "string": str,
    "varchar": str,
    "nvarchar": str,
    "char": str,
    "nchar": str,
    "bool": bool,
    "boolean": bool,
    "bit": bool,
    "bytes": bytes,
    "blob": bytes,
    "bytea": bytes,
    "varbinary": bytes,
    "date": date,
    "datetime": datetime,
    "datetime2": datetime,
    "timestamp": datetime,
    "timestamptz": datetime,
    "time": time,
    "uuid": UUID,
    "uniqueidentifier": UUID,
    "json": Any,
    "jsonb": Any,
}

_ORDERED_TYPES = (int, float, Decimal, date, datetime, time)
_TEXT_TYPES = (str,)

_SIZE_SUFFIX = re.compile(r"\s*\(.*\)\s*$")


def normalize_type_tag(tag: str) -> str:
    """Lower-case ``tag`` and drop any size suffix (``VARCHAR(255)`` → ``varchar``)."""
    return _SIZE_SUFFIX.sub("", tag).strip().lower()


def python_type_for(tag: str) -> Any:
    """Return the Python type bound for ``tag``; unknown tags map to ``Any``."""
    return TYPE_TAGS.get(normalize_type_tag(tag), Any)


@lru_cache(maxsize=None)
def _adapter(tag: str) -> TypeAdapter:
    return TypeAdapter(python_type_for(tag))


def validate_value(column: Column, value: Any) -> Any:
    """Validate ``value`` against the declared type of ``column``.

    ``None`` and ``UNSET`` pass through untouched.

    Returns:
        The validated (possibly coerced) value.

    Raises:
        ValueTypeError: If the value does not fit the column type.
    """
    if is_null(value):
        return value
    if python_type_for(column.type) is Any:
        return value
    try:
        return _adapter(normalize_type_tag(column.type)).validate_python(value)
    except PydanticValidationError as exc:
        raise ValueTypeError(column.name, column.type, value) from exc


# ---------------------------------------------------------------------------
# Field handles
# ---------------------------------------------------------------------------


class BasicField:
    """Handle for a column that only supports equality checks.

    Args:
        column: The column this handle creates clauses for.
        table: Dotted name of the owning table, recorded on every clause.
    """

    def __init__(self, column: Column, table: str | None = None) -> None:
        self.column = column
        self.table = table

    @property
    def name(self) -> str:
        return self.column.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.column.name!r})"

    def _clause(self, op: ClauseOp, value: Any, *, negated: bool = False) -> ColumnValueClause:
        return ColumnValueClause(
            column=self.column.name,
            op=op,
            value=validate_value(self.column, value),
            not_clause=negated,
            table=self.table,
        )

    def equal(self, value: Any) -> ColumnValueClause:
        """``col = value``, or ``col IS NULL`` for ``None`` / ``UNSET``."""
        return self._clause(ClauseOp.EQ, value)

    def not_equal(self, value: Any) -> ColumnValueClause:
        """``col != value``, or ``col IS NOT NULL`` for ``None`` / ``UNSET``."""
        return self._clause(ClauseOp.NE, value, negated=True)

    def manual(self, sql: str, *values: Any) -> ManualClause:
        """A hand-written fragment appended to the column.

        Every ``?`` in ``sql`` becomes a placeholder bound to the next value::

            fields.price.manual(" BETWEEN ? AND ?", 10, 20)

        Write ``??`` for a literal ``?``.
        """
        return ManualClause(
            column=self.column.name, sql=sql, values=tuple(values), table=self.table
        )

    # Assignments (bulk UPDATE SET list)

    def assign(self, value: Any) -> SetColumnValue:
        if is_null(value) and not self.column.nullable:
            raise ValueTypeError(self.column.name, self.column.type, value)
        return SetColumnValue(
            column=self.column.name,
            value=validate_value(self.column, value),
            table=self.table,
        )

    def assign_null(self) -> SetColumnNull:
        if not self.column.nullable:
            raise ValueTypeError(self.column.name, self.column.type, None)
        return SetColumnNull(column=self.column.name, table=self.table)


class NumericField(BasicField):
    """Handle for numbers, dates and timestamps: adds ordering comparisons."""

    def gt(self, value: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.GT, value)

    def gte(self, value: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.GTE, value)

    def lt(self, value: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.LT, value)

    def lte(self, value: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.LTE, value)


class TextField(BasicField):
    """Handle for text columns: adds the LIKE family."""

    def like(self, pattern: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.LIKE, pattern)

    def not_like(self, pattern: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.NOT_LIKE, pattern, negated=True)

    def ilike(self, pattern: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.ILIKE, pattern)

    def not_ilike(self, pattern: Any) -> ColumnValueClause:
        return self._clause(ClauseOp.NOT_ILIKE, pattern, negated=True)


def field_for(column: Column, table: str | None = None) -> BasicField:
    """Return the handle class matching the column's type tag."""
    py_type = python_type_for(column.type)
    if py_type is bool:
        return BasicField(column, table)
    if isinstance(py_type, type) and issubclass(py_type, _ORDERED_TYPES):
        return NumericField(column, table)
    if isinstance(py_type, type) and issubclass(py_type, _TEXT_TYPES):
        return TextField(column, table)
    return BasicField(column, table)


class SchemaFields:
    """Attribute access to the field handles of one schema.

    Handles are addressed by model attribute name (``Column.field``) or by
    column name; anything else raises
    :class:`~brickorm.errors.MissingColumnError`.
    """

    def __init__(self, schema: SchemaDescriptor) -> None:
        self._schema = schema

    def __getattr__(self, name: str) -> BasicField:
        if name.startswith("__"):
            raise AttributeError(name)
        return field_for(self._schema.column_for_field(name), self._schema.table_name)

    def __getitem__(self, name: str) -> BasicField:
        return field_for(self._schema.column_for_field(name), self._schema.table_name)

    def __dir__(self) -> list[str]:
        return [c.field_name for c in self._schema.columns]
