"""Pydantic models describing the table a statement targets.

A :class:`SchemaDescriptor` is created once per model (by hand, from a
SQLAlchemy table via :mod:`brickorm.schema.converters`, or by any other
Schema Provider) and shared read-only by every query built for that model.
No database connection is needed to create one.

Example::

    PRODUCTS = SchemaDescriptor(
        identifier="public.products",
        columns=[
            Column(name="product_id", type="int", nullable=False, field="id"),
            Column(name="name", type="text", nullable=False),
            Column(name="description", type="text"),
        ],
        primary_keys=["product_id"],
    )
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from brickorm.errors import CompilationError, MissingColumnError, NoPrimaryKeyError
from brickorm.schema.values import UNSET

if TYPE_CHECKING:
    from brickorm.schema.fields import SchemaFields


class Column(BaseModel):
    """Metadata for a single column.

    Attributes:
        name: Column name in the database.
        type: Value type tag (e.g. ``'int'``, ``'text'``, ``'timestamp'``).
        nullable: Whether the column can be NULL.
        field: Attribute name on model objects; defaults to ``name``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: str
    nullable: bool = True
    field: str | None = None

    @property
    def field_name(self) -> str:
        return self.field or self.name

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Column):
            return self.name == other.name
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)


class SchemaDescriptor(BaseModel):
    """Static description of one table.

    Attributes:
        identifier: Path segments of the table name, e.g.
            ``("public", "products")``.  A dotted string is split on ``.``.
        columns: Every column of the table, in declaration order.
        primary_keys: Names of the primary-key columns (may be empty).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    identifier: tuple[str, ...]
    columns: tuple[Column, ...]
    primary_keys: tuple[str, ...] = ()

    @field_validator("identifier", mode="before")
    @classmethod
    def _split_identifier(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(value.split("."))
        return value

    @model_validator(mode="after")
    def _check_primary_keys(self) -> SchemaDescriptor:
        names = set(self.column_names)
        unknown = [pk for pk in self.primary_keys if pk not in names]
        if unknown:
            raise ValueError(
                f"Primary key column(s) {unknown} are not declared on '{self.table_name}'."
            )
        return self

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def table_name(self) -> str:
        """The dotted table identifier (e.g. ``'public.products'``)."""
        return ".".join(self.identifier)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> Column:
        """Return the column called ``name``.

        Raises:
            MissingColumnError: If the table declares no such column.
        """
        for col in self.columns:
            if col.name == name:
                return col
        raise MissingColumnError(name, self.table_name, self.column_names)

    def column_for_field(self, field: str) -> Column:
        """Return the column whose model attribute is ``field``.

        Falls back to a lookup by column name.

        Raises:
            MissingColumnError: If neither matches.
        """
        for col in self.columns:
            if col.field_name == field:
                return col
        return self.column(field)

    @property
    def primary_key_columns(self) -> list[Column]:
        return [self.column(pk) for pk in self.primary_keys]

    @property
    def non_key_columns(self) -> list[Column]:
        pks = set(self.primary_keys)
        return [c for c in self.columns if c.name not in pks]

    @property
    def unique_identifier(self) -> Column:
        """The column used to single out rows (the first primary key).

        Raises:
            NoPrimaryKeyError: If the table has no primary key.
        """
        if not self.primary_keys:
            raise NoPrimaryKeyError(self.table_name)
        return self.column(self.primary_keys[0])

    @property
    def fields(self) -> SchemaFields:
        """Typed column handles, addressed by model attribute name.

        Example::

            PRODUCTS.fields.name.like("%chair%")
        """
        from brickorm.schema.fields import SchemaFields

        return SchemaFields(self)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def bind(self, obj: Any, column: str) -> Any:
        """Read the value for ``column`` from a model object.

        Attribute access is tried first, then item access for mappings.
        A missing attribute yields :data:`~brickorm.schema.values.UNSET`.

        Raises:
            MissingColumnError: If ``column`` is not declared on this table.
        """
        col = self.column(column)
        if isinstance(obj, Mapping):
            return obj.get(col.field_name, UNSET)
        return getattr(obj, col.field_name, UNSET)


@runtime_checkable
class SchemaProvider(Protocol):
    """Anything that carries its table description as ``__schema__``."""

    __schema__: ClassVar[SchemaDescriptor]


def schema_of(target: Any) -> SchemaDescriptor:
    """Resolve the :class:`SchemaDescriptor` for ``target``.

    Args:
        target: A descriptor, or a model class / instance with ``__schema__``.

    Raises:
        CompilationError: If no descriptor can be found.
    """
    if isinstance(target, SchemaDescriptor):
        return target
    schema = getattr(target, "__schema__", None)
    if isinstance(schema, SchemaDescriptor):
        return schema
    name = getattr(target, "__name__", type(target).__name__)
    raise CompilationError(f"'{name}' does not provide a SchemaDescriptor via __schema__.")
