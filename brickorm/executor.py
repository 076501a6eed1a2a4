"""The contract compiled statements are executed through.

brickORM never opens connections.  Anything that can run positional-parameter
SQL asynchronously satisfies :class:`Executor`: a driver wrapper, a pool
wrapper, or a test double.  Driver and network errors raised by an executor
propagate to the caller unchanged.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Executor(Protocol):
    """Runs compiled SQL against a live backend.

    Attributes:
        syntax: Dialect tag the executor speaks (``'postgres'``, ``'sqlite'``, ...).
            Statements are compiled for this dialect before being handed over.
    """

    syntax: str

    async def fetch_rows(self, sql: str, args: Sequence[Any]) -> Sequence[Sequence[Any]]:
        """Run a row-returning statement and return every row."""
        ...

    async def execute(self, sql: str, args: Sequence[Any]) -> int | None:
        """Run a statement and return the affected-row count, if known."""
        ...
