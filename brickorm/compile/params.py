"""Per-statement placeholder sequencing."""
from __future__ import annotations

from brickorm.compile.base import DialectWriter


class NextParam:
    """Hands out placeholder tokens for one statement, in order.

    A fresh instance is created for every compilation so numbering restarts
    at 1.  The counter is plain owned state; an instance must not be shared
    between statements or threads.

    Example::

        params = NextParam(PostgresWriter())
        params.next()   # '$1'
        params.next()   # '$2'
        params.count    # 2
    """

    def __init__(self, writer: DialectWriter) -> None:
        self._writer = writer
        self._i = 1

    def next(self) -> str:
        """Return the next placeholder token and advance."""
        token = self._writer.param_placeholder(self._i)
        self._i += 1
        return token

    @property
    def count(self) -> int:
        """Number of placeholders issued so far."""
        return self._i - 1

    def max_params(self) -> int:
        return self._writer.max_params

    def remaining(self) -> int:
        """Placeholders still available before the dialect ceiling."""
        return self.max_params() - self.count
