"""brickORM compilation layer: clauses → dialect-correct parameterized SQL."""
from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.mssql import MssqlWriter
from brickorm.compile.mysql import MySQLWriter
from brickorm.compile.postgres import PostgresWriter
from brickorm.compile.registry import WriterFactory
from brickorm.compile.sqlite import SQLiteWriter

__all__ = [
    "CompiledStatement",
    "DialectWriter",
    "WriterFactory",
    "MssqlWriter",
    "MySQLWriter",
    "PostgresWriter",
    "SQLiteWriter",
]
