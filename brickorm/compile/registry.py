"""Dialect writer registry (Open/Closed Principle).

``WriterFactory``
    Central registry for :class:`~brickorm.compile.base.DialectWriter`
    implementations.  Register a new writer once; every statement assembler
    looks it up by dialect tag.

Usage::

    from brickorm.compile.registry import WriterFactory

    @WriterFactory.register("cockroach")
    class CockroachWriter(PostgresWriter):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from brickorm.compile.base import DialectWriter
from brickorm.errors import UnsupportedOperationError


class WriterFactory:
    """Registry mapping dialect tags to :class:`DialectWriter` classes.

    Writers are stateless, so :meth:`create` caches one instance per tag.

    Example::

        @WriterFactory.register("cockroach")
        class CockroachWriter(PostgresWriter):
            ...

        writer = WriterFactory.create("cockroach")
    """

    _writers: ClassVar[dict[str, type[DialectWriter]]] = {}
    _instances: ClassVar[dict[str, DialectWriter]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[DialectWriter]], type[DialectWriter]]:
        """Decorator that registers a writer class under ``name``.

        Args:
            name: The dialect tag (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the writer class.
        """

        def decorator(writer_cls: type[DialectWriter]) -> type[DialectWriter]:
            cls.register_class(name, writer_cls)
            return writer_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, writer_cls: type[DialectWriter]) -> None:
        """Register a writer class without using the decorator form.

        Args:
            name: The dialect tag.
            writer_cls: The :class:`DialectWriter` subclass to register.
        """
        cls._writers[name] = writer_cls
        cls._instances.pop(name, None)

    @classmethod
    def create(cls, name: str | DialectWriter | None = None) -> DialectWriter:
        """Return the writer registered for ``name``.

        Args:
            name: The dialect tag, an already-built writer (returned as-is),
                or ``None`` for the ``default_dialect`` setting.

        Returns:
            A :class:`DialectWriter` instance.

        Raises:
            UnsupportedOperationError: If no writer is registered for ``name``.
        """
        if isinstance(name, DialectWriter):
            return name
        if name is None:
            from brickorm.settings import get_settings

            name = get_settings().default_dialect

        writer = cls._instances.get(name)
        if writer is not None:
            return writer

        writer_cls = cls._writers.get(name)
        if writer_cls is None:
            registered = sorted(cls._writers)
            raise UnsupportedOperationError(
                name, f"statement writing (registered dialects: {registered})"
            )
        writer = cls._instances[name] = writer_cls()
        return writer

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect tags."""
        return sorted(cls._writers)
