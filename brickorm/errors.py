"""Custom exception hierarchy for brickORM.

All public errors inherit from :class:`BrickORMError` so callers can catch the
base class for any brickORM-specific failure.  Errors raised by an executor
(driver or network failures) are never wrapped and do not appear here.
"""
from __future__ import annotations

from typing import Any


class BrickORMError(Exception):
    """Base exception for all brickORM errors."""


class NoPrimaryKeyError(BrickORMError):
    """Raised when a row-targeted statement is built for a table without a primary key.

    Args:
        table: Dotted table identifier.
        operation: The statement being built (``'update'``, ``'delete'``, ...).
    """

    def __init__(self, table: str, operation: str | None = None) -> None:
        action = f" for {operation}" if operation else ""
        super().__init__(f"Table '{table}' has no primary key{action}.")
        self.table = table
        self.operation = operation


class MissingColumnError(BrickORMError):
    """Raised when a clause or bind references a column the schema does not declare.

    Args:
        column: The column (or field) name that was looked up.
        table: Dotted table identifier of the schema searched.
        available: Column names the schema does declare.
    """

    def __init__(
        self,
        column: str,
        table: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        where = f" on table '{table}'" if table else ""
        super().__init__(f"Column '{column}' does not exist{where}.")
        self.column = column
        self.table = table
        self.available: list[str] = available or []


class UnsupportedOperationError(BrickORMError):
    """Raised when a dialect is asked for a feature it does not implement.

    Args:
        dialect: The dialect tag (e.g. ``'mysql'``).
        operation: Short description of the requested feature.
    """

    def __init__(self, dialect: str, operation: str) -> None:
        super().__init__(f"Dialect '{dialect}' does not support {operation}.")
        self.dialect = dialect
        self.operation = operation


class ParamLimitExceededError(BrickORMError):
    """Raised when a statement binds more arguments than the dialect accepts.

    This is advisory: the statement is not truncated.  Callers are expected
    to split their input into chunks of at most ``max_params`` values.

    Args:
        count: Number of arguments the statement binds.
        max_params: The dialect ceiling.
        dialect: The dialect tag.
    """

    def __init__(self, count: int, max_params: int, dialect: str) -> None:
        super().__init__(
            f"Statement binds {count} parameters; dialect '{dialect}' allows at most {max_params}."
        )
        self.count = count
        self.max_params = max_params
        self.dialect = dialect

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured description suitable for chunking decisions."""
        return {
            "error": "PARAM_LIMIT_EXCEEDED",
            "message": str(self),
            "details": {
                "count": self.count,
                "max_params": self.max_params,
                "dialect": self.dialect,
            },
        }


class ValueTypeError(BrickORMError):
    """Raised when a value does not match the declared type of its column.

    Args:
        column: Column name the value was bound to.
        expected: The column's declared type tag.
        value: The rejected value.
    """

    def __init__(self, column: str, expected: str, value: Any) -> None:
        super().__init__(
            f"Value {value!r} is not valid for column '{column}' of type '{expected}'."
        )
        self.column = column
        self.expected = expected
        self.value = value


class CompilationError(BrickORMError):
    """Raised when SQL compilation fails for an unexpected reason.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause
