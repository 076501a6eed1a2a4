"""Unit tests for brickorm.schema.converters.schema_from_sqlalchemy."""

from __future__ import annotations

import pytest
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from brickorm import select
from brickorm.errors import CompilationError
from brickorm.schema.converters import schema_from_sqlalchemy, schemas_from_metadata

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _catalog() -> MetaData:
    """Two declared tables, one schema-qualified, with a variety of column types."""
    metadata = MetaData()
    Table(
        "products",
        metadata,
        Column("product_id", Integer, primary_key=True),
        Column("name", String(80), nullable=False),
        Column("description", Text),
        Column("price", Float, nullable=False),
        Column("cost", Numeric(10, 2)),
        Column("active", Boolean, nullable=False),
        Column("released", Date),
        Column("updated_at", DateTime),
        Column("thumbnail", LargeBinary),
        Column("attributes", JSON),
    )
    Table(
        "orders",
        metadata,
        Column("order_id", Integer, primary_key=True),
        Column("product_id", Integer, ForeignKey("products.product_id")),
        schema="sales",
    )
    return metadata


class _Base(DeclarativeBase):
    pass


class _Customer(_Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column("customer_id", primary_key=True)
    email: Mapped[str] = mapped_column(String(120))
    nickname: Mapped[str | None] = mapped_column(String(40))


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def test_table_columns_and_types():
    descriptor = schema_from_sqlalchemy(_catalog().tables["products"])
    assert descriptor.identifier == ("products",)
    assert [(c.name, c.type) for c in descriptor.columns] == [
        ("product_id", "int"),
        ("name", "text"),
        ("description", "text"),
        ("price", "float"),
        ("cost", "decimal"),
        ("active", "bool"),
        ("released", "date"),
        ("updated_at", "datetime"),
        ("thumbnail", "bytes"),
        ("attributes", "json"),
    ]


def test_primary_key_and_nullability():
    descriptor = schema_from_sqlalchemy(_catalog().tables["products"])
    assert descriptor.primary_keys == ("product_id",)
    nullable = {c.name: c.nullable for c in descriptor.columns}
    assert nullable["product_id"] is False
    assert nullable["name"] is False
    assert nullable["description"] is True


def test_schema_qualified_table():
    descriptor = schema_from_sqlalchemy(_catalog().tables["sales.orders"])
    assert descriptor.identifier == ("sales", "orders")
    assert descriptor.table_name == "sales.orders"


def test_converted_schema_compiles():
    descriptor = schema_from_sqlalchemy(_catalog().tables["sales.orders"])
    sql = select(descriptor).where(lambda o: o.product_id.equal(3)).to_sql("postgres")
    assert sql == (
        'SELECT t1."order_id", t1."product_id" FROM "sales"."orders" t1'
        ' WHERE ( t1."product_id" = $1 )'
    )


def test_schemas_from_metadata():
    descriptors = schemas_from_metadata(_catalog())
    assert sorted(descriptors) == ["products", "sales.orders"]


def test_schemas_from_metadata_allowlist():
    descriptors = schemas_from_metadata(_catalog(), include_tables=["orders"])
    assert list(descriptors) == ["sales.orders"]


# ---------------------------------------------------------------------------
# Mapped classes
# ---------------------------------------------------------------------------


def test_mapped_class_uses_attribute_names_as_fields():
    descriptor = schema_from_sqlalchemy(_Customer)
    assert descriptor.identifier == ("customers",)
    assert descriptor.primary_keys == ("customer_id",)
    by_name = {c.name: c for c in descriptor.columns}
    assert by_name["customer_id"].field == "id"
    assert by_name["email"].field is None
    assert by_name["nickname"].nullable is True
    assert descriptor.fields.id.name == "customer_id"


def test_non_table_target_rejected():
    with pytest.raises(CompilationError):
        schema_from_sqlalchemy(object())
