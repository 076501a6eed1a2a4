"""brickORM – type-safe, multi-dialect SQL statement compilation.

Describe a query with typed column handles; get back parameterized SQL and
its ordered bind arguments for Postgres, MySQL, SQL Server or SQLite.

Public API
----------
``select``
    Start a :class:`SelectBuilder` (filter, EXISTS, order, page, count, or
    turn into a bulk :class:`UpdateBuilder` with ``set`` / ``set_col`` /
    ``set_null``).

``update_one`` / ``delete_one`` / ``insert_one``
    Single-row statements targeted by primary key; ``compile_*`` variants
    return the :class:`CompiledStatement` without executing it.

Re-exported types
-----------------
``Column``, ``SchemaDescriptor``, ``CompiledStatement``, ``Executor``,
``UNSET``, the clause types, the settings, and all error classes.

Extensibility
-------------
New dialect writers can be registered via::

    from brickorm.compile.registry import WriterFactory

    @WriterFactory.register("cockroach")
    class CockroachWriter(PostgresWriter):
        ...

After registration every assembler accepts ``dialect="cockroach"``.
"""

from __future__ import annotations

from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.clauses import (
    Clause,
    ClauseOp,
    ColumnValueClause,
    ExistsClause,
    ManualClause,
    SetColumnNull,
    SetColumnValue,
    WhereIn,
)
from brickorm.compile.mssql import MssqlWriter
from brickorm.compile.mysql import MySQLWriter
from brickorm.compile.postgres import PostgresWriter
from brickorm.compile.registry import WriterFactory
from brickorm.compile.sqlite import SQLiteWriter
from brickorm.errors import (
    BrickORMError,
    CompilationError,
    MissingColumnError,
    NoPrimaryKeyError,
    ParamLimitExceededError,
    UnsupportedOperationError,
    ValueTypeError,
)
from brickorm.executor import Executor
from brickorm.logs import configure_logging, get_logger
from brickorm.query.delete import compile_delete_one, delete_one
from brickorm.query.insert import compile_insert_one, insert_one
from brickorm.query.select import SelectBuilder, select
from brickorm.query.update import UpdateBuilder, compile_update_one, update_one
from brickorm.schema.converters import schema_from_sqlalchemy
from brickorm.schema.descriptor import Column, SchemaDescriptor, SchemaProvider, schema_of
from brickorm.schema.fields import BasicField, NumericField, TextField
from brickorm.schema.values import UNSET
from brickorm.settings import BrickORMSettings, get_settings

# ---------------------------------------------------------------------------
# Register built-in writers with WriterFactory
# ---------------------------------------------------------------------------

WriterFactory.register_class("postgres", PostgresWriter)
WriterFactory.register_class("mysql", MySQLWriter)
WriterFactory.register_class("mssql", MssqlWriter)
WriterFactory.register_class("sqlite", SQLiteWriter)

__all__ = [
    # Queries
    "select",
    "SelectBuilder",
    "UpdateBuilder",
    "update_one",
    "compile_update_one",
    "delete_one",
    "compile_delete_one",
    "insert_one",
    "compile_insert_one",
    # Schema
    "Column",
    "SchemaDescriptor",
    "SchemaProvider",
    "schema_of",
    "schema_from_sqlalchemy",
    "UNSET",
    "BasicField",
    "NumericField",
    "TextField",
    # Clauses
    "Clause",
    "ClauseOp",
    "ColumnValueClause",
    "SetColumnValue",
    "SetColumnNull",
    "ManualClause",
    "ExistsClause",
    "WhereIn",
    # Compilation
    "CompiledStatement",
    "DialectWriter",
    "WriterFactory",
    "PostgresWriter",
    "MySQLWriter",
    "MssqlWriter",
    "SQLiteWriter",
    # Execution
    "Executor",
    # Configuration and logging
    "BrickORMSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Errors
    "BrickORMError",
    "NoPrimaryKeyError",
    "MissingColumnError",
    "UnsupportedOperationError",
    "ParamLimitExceededError",
    "ValueTypeError",
    "CompilationError",
]
