"""Utilities for building a SchemaDescriptor from external sources.

SQLAlchemy converter
--------------------
:func:`schema_from_sqlalchemy` turns a declared SQLAlchemy ``Table`` (or a
declarative model class) into a
:class:`~brickorm.schema.descriptor.SchemaDescriptor`.  Nothing is reflected:
the table definition already in memory is the only input, so no engine or
connection is needed.

Install the optional dependency before using this module::

    pip install "brickorm[sqlalchemy]"

Example::

    from sqlalchemy import Column, Integer, MetaData, Table, Text
    from brickorm.schema.converters import schema_from_sqlalchemy

    products = Table(
        "products",
        MetaData(),
        Column("product_id", Integer, primary_key=True),
        Column("name", Text, nullable=False),
    )
    PRODUCTS = schema_from_sqlalchemy(products)
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from brickorm.errors import CompilationError
from brickorm.schema.descriptor import Column, SchemaDescriptor

if TYPE_CHECKING:
    from sqlalchemy import MetaData, Table

# Checked in order: ``datetime`` is a subclass of ``date`` and ``bool`` of ``int``.
_PYTHON_TYPE_TAGS: list[tuple[type, str]] = [
    (bool, "bool"),
    (int, "int"),
    (float, "float"),
    (Decimal, "decimal"),
    (str, "text"),
    (bytes, "bytes"),
    (datetime, "datetime"),
    (date, "date"),
    (time, "time"),
    (uuid.UUID, "uuid"),
    (dict, "json"),
    (list, "json"),
]


def schema_from_sqlalchemy(target: Any) -> SchemaDescriptor:
    """Build a :class:`SchemaDescriptor` from a declared SQLAlchemy table.

    Args:
        target: A :class:`sqlalchemy.Table`, or a declarative model class
            (its ``__table__`` is used and mapped attribute names become
            :attr:`Column.field`).

    Returns:
        A descriptor with the table's schema-qualified identifier, its columns
        in declaration order and its primary-key columns.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
        CompilationError: If ``target`` is neither a table nor a mapped class.
    """
    try:
        from sqlalchemy import Table as _Table
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for schema_from_sqlalchemy(). "
            'Install it with: pip install "brickorm[sqlalchemy]"'
        ) from exc

    if isinstance(target, _Table):
        return _table_to_descriptor(target, {})

    table = getattr(target, "__table__", None)
    if not isinstance(table, _Table):
        name = getattr(target, "__name__", type(target).__name__)
        raise CompilationError(f"'{name}' is not a SQLAlchemy Table or mapped class.")
    return _table_to_descriptor(table, _mapped_field_names(target))


def schemas_from_metadata(
    metadata: MetaData,
    *,
    include_tables: list[str] | None = None,
) -> dict[str, SchemaDescriptor]:
    """Convert every table declared on ``metadata``.

    Args:
        metadata: The :class:`~sqlalchemy.schema.MetaData` holding the tables.
        include_tables: Optional allowlist of table names.

    Returns:
        Descriptors keyed by dotted table identifier.
    """
    descriptors: dict[str, SchemaDescriptor] = {}
    for table in metadata.sorted_tables:
        if include_tables is not None and table.name not in include_tables:
            continue
        descriptor = _table_to_descriptor(table, {})
        descriptors[descriptor.table_name] = descriptor
    return descriptors


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _table_to_descriptor(table: Table, field_names: dict[str, str]) -> SchemaDescriptor:
    identifier = (table.schema, table.name) if table.schema else (table.name,)
    columns = [
        Column(
            name=col.name,
            type=_type_tag(col.type),
            # An unset nullable flag (None) is treated as nullable.
            nullable=col.nullable is not False,
            field=field_names.get(col.name),
        )
        for col in table.columns
    ]
    return SchemaDescriptor(
        identifier=identifier,
        columns=columns,
        primary_keys=[col.name for col in table.primary_key.columns],
    )


def _mapped_field_names(model: Any) -> dict[str, str]:
    """Map column name → attribute name for a declarative class."""
    from sqlalchemy import inspect as sa_inspect

    names: dict[str, str] = {}
    for prop in sa_inspect(model).column_attrs:
        for col in prop.columns:
            if col.name != prop.key:
                names[col.name] = prop.key
    return names


def _type_tag(sa_type: Any) -> str:
    """Return the brickORM type tag for a SQLAlchemy column type.

    Falls back to the type's SQL rendering (e.g. ``'VARCHAR(20)'``) when
    SQLAlchemy cannot name a Python type for it.
    """
    try:
        py_type = sa_type.python_type
    except NotImplementedError:
        return str(sa_type).lower()
    for candidate, tag in _PYTHON_TYPE_TAGS:
        if issubclass(py_type, candidate):
            return tag
    return str(sa_type).lower()
