"""Value-binding markers.

``None`` is an explicit SQL NULL.  :data:`UNSET` marks "no value was
provided".  Predicates treat both the same way (``IS NULL``); inserts skip
``UNSET`` columns so the database default applies.
"""

from __future__ import annotations

from typing import Any, Final


class _Unset:
    """Singleton type of :data:`UNSET`."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict) -> _Unset:
        return self


#: Marker for "no value provided".
UNSET: Final = _Unset()


def is_null(value: Any) -> bool:
    """True when ``value`` is ``None`` or :data:`UNSET`."""
    return value is None or value is UNSET


def to_bind(value: Any) -> Any:
    """Return the value to hand to the driver (``UNSET`` becomes ``None``)."""
    return None if value is UNSET else value
