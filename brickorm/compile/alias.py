"""Per-statement table alias allocation."""
from __future__ import annotations


class TableAlias:
    """Allocates unique table aliases (``t1``, ``t2``, ...) within one statement.

    The outer table always takes the first alias.  Every EXISTS sub-query
    takes a fresh one, so a nested reference to the same table never
    shadows the outer alias.
    """

    prefix = "t"

    def __init__(self) -> None:
        self._i = 1

    def peek(self) -> str:
        """Return the next alias without consuming it."""
        return f"{self.prefix}{self._i}"

    def next(self) -> str:
        """Consume and return the next alias."""
        alias = self.peek()
        self._i += 1
        return alias

    @property
    def allocated(self) -> int:
        return self._i - 1
