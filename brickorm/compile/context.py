"""Compilation context value objects.

``CompilationContext`` packages the static ``(writer, schema)`` pair every
assembler needs.  ``StatementState`` holds the mutable, per-statement pieces
(placeholder sequencer, alias allocator, bound arguments) and is created
fresh for each compile call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from brickorm.compile.alias import TableAlias
from brickorm.compile.base import CompiledStatement, DialectWriter
from brickorm.compile.params import NextParam
from brickorm.errors import ParamLimitExceededError
from brickorm.logs import get_logger
from brickorm.schema.descriptor import SchemaDescriptor
from brickorm.schema.values import to_bind
from brickorm.settings import get_settings

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single compilation run.

    Attributes:
        writer: Dialect-specific SQL writer instance.
        schema: Descriptor of the table the statement targets.
    """

    writer: DialectWriter
    schema: SchemaDescriptor

    @property
    def table_sql(self) -> str:
        return self.writer.quote_table(self.schema.identifier)

    def new_state(self) -> StatementState:
        return StatementState(writer=self.writer)


@dataclass
class StatementState:
    """Accumulates placeholders and bound values during one compilation.

    A single instance is threaded through the head, WHERE (including every
    nested EXISTS / WHERE-IN sub-query) and tail of a statement, so tokens
    are issued and values appended in exactly the order the SQL is written.
    """

    writer: DialectWriter
    params: NextParam = field(init=False)
    aliases: TableAlias = field(default_factory=TableAlias)
    args: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.params = NextParam(self.writer)

    def bind(self, value: Any) -> str:
        """Append ``value`` to the arguments and return its placeholder."""
        self.args.append(to_bind(value))
        return self.params.next()

    def finish(self, sql: str) -> CompiledStatement:
        """Freeze the accumulated state into a :class:`CompiledStatement`.

        Raises:
            ParamLimitExceededError: If the statement binds more values than
                the dialect allows and ``enforce_param_limit`` is on.
        """
        settings = get_settings()
        count = len(self.args)
        max_params = self.params.max_params()
        if count > max_params:
            if settings.enforce_param_limit:
                raise ParamLimitExceededError(count, max_params, self.writer.dialect_name)
            logger.warning(
                "param_limit_exceeded",
                dialect=self.writer.dialect_name,
                count=count,
                max_params=max_params,
            )
        if settings.log_sql:
            logger.debug(
                "statement_compiled",
                dialect=self.writer.dialect_name,
                sql=sql,
                arg_count=count,
            )
        return CompiledStatement(sql=sql, args=tuple(self.args), dialect=self.writer.dialect_name)
