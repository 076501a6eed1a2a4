"""Writer abstractions: CompiledStatement and the DialectWriter ABC.

The Template Method pattern (GoF) is used:
- ``DialectWriter`` defines the formatting hooks every statement assembler
  relies on and the shared helpers built on top of them.
- ``PostgresWriter``, ``MySQLWriter``, ``MssqlWriter`` and ``SQLiteWriter``
  override the dialect-specific steps (placeholder style, identifier
  quoting, parameter ceiling, paging and INSERT row-return syntax).
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from brickorm.errors import UnsupportedOperationError

if TYPE_CHECKING:
    from brickorm.schema.descriptor import Column


@dataclass(frozen=True)
class CompiledStatement:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with positional placeholders.
        args: Bound values; ``args[n]`` belongs to the ``n+1``-th placeholder.
        dialect: The dialect tag the statement was written for.
    """

    sql: str
    args: tuple[Any, ...]
    dialect: str

    @property
    def arg_count(self) -> int:
        return len(self.args)


class DialectWriter(ABC):
    """Abstract base for dialect-specific SQL writers.

    Writers are stateless; every statement-scoped counter lives in
    :class:`~brickorm.compile.params.NextParam` and
    :class:`~brickorm.compile.alias.TableAlias`.
    """

    #: Regex matching one placeholder token in compiled SQL.
    placeholder_pattern: re.Pattern[str]

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect tag (``'postgres'``, ``'mysql'``, ...)."""

    @property
    @abstractmethod
    def max_params(self) -> int:
        """Return the maximum number of bound parameters per statement."""

    @abstractmethod
    def param_placeholder(self, index: int) -> str:
        """Return the placeholder token for the ``index``-th parameter (1-based).

        Args:
            index: Position of the parameter in the statement, starting at 1.

        Returns:
            Dialect-specific placeholder string.
        """

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Return a properly-quoted SQL identifier.

        Args:
            name: Unquoted identifier (table, schema or column name).

        Returns:
            Quoted identifier.
        """

    # ------------------------------------------------------------------
    # Hooks with a portable default
    # ------------------------------------------------------------------

    #: False when the backend rejects ``LIMIT`` inside an ``IN (SELECT ...)``.
    supports_limit_in_subquery: bool = True

    #: True when paging requires an ``ORDER BY`` clause to be present.
    requires_order_for_offset: bool = False

    def like_operator(self, op: str) -> str:
        """Return the SQL keyword for a LIKE-family operator.

        ``ilike`` is passed through unchanged; its meaning is whatever the
        backend gives it.
        """
        return op

    def limit_skip(self, limit: int | None, offset: int | None) -> str | None:
        """Return the paging fragment for ``limit`` / ``offset``, or ``None``."""
        parts: list[str] = []
        if limit is not None:
            parts.append(f"LIMIT {limit}")
        if offset is not None:
            parts.append(f"OFFSET {offset}")
        return " ".join(parts) if parts else None

    def write_insert(
        self,
        table_sql: str,
        colargs: Sequence[tuple[str, str]],
        columns: Sequence[Column],
    ) -> str:
        """Return an ``INSERT`` that hands the written row back to the caller.

        Args:
            table_sql: Quoted table identifier.
            colargs: ``(quoted column, placeholder)`` pairs in bind order.
            columns: Every column of the table, used for explicit row-return lists.

        Raises:
            UnsupportedOperationError: When the dialect has no row-return syntax.
        """
        raise UnsupportedOperationError(self.dialect_name, "INSERT with row return")

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def quote_table(self, identifier: Sequence[str]) -> str:
        """Quote each path segment of a table identifier and join with ``.``."""
        return ".".join(self.quote_identifier(part) for part in identifier)

    def write_column(self, alias: str, column: str) -> str:
        """Return ``<alias>.<quoted column>``."""
        return f"{alias}.{self.quote_identifier(column)}"

    def count_star(self) -> str:
        return "COUNT(*)"

    def count_placeholders(self, sql: str) -> int:
        """Return the number of placeholder tokens in ``sql``."""
        return len(self.placeholder_pattern.findall(sql))
