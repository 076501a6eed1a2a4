"""Test fixtures: sample schema descriptors, model classes and SQLite DDL."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from brickorm.schema.descriptor import Column, SchemaDescriptor
from brickorm.schema.values import UNSET

PRODUCTS = SchemaDescriptor(
    identifier="products",
    columns=[
        Column(name="product_id", type="int", nullable=False, field="id"),
        Column(name="name", type="text", nullable=False),
        Column(name="description", type="text"),
        Column(name="price", type="float", nullable=False),
        Column(name="active", type="bool", nullable=False),
        Column(name="category_id", type="int"),
    ],
    primary_keys=["product_id"],
)

REVIEWS = SchemaDescriptor(
    identifier="reviews",
    columns=[
        Column(name="review_id", type="int", nullable=False),
        Column(name="product_id", type="int", nullable=False),
        Column(name="rating", type="int", nullable=False),
        Column(name="body", type="text"),
    ],
    primary_keys=["review_id"],
)

#: A table without a primary key.
AUDIT_LOG = SchemaDescriptor(
    identifier="audit_log",
    columns=[
        Column(name="event", type="text", nullable=False),
        Column(name="logged_at", type="text"),
    ],
)

#: A table whose only column is its primary key.
TAGS = SchemaDescriptor(
    identifier="tags",
    columns=[Column(name="tag_id", type="int", nullable=False)],
    primary_keys=["tag_id"],
)

#: A schema-qualified table.
ORDERS = SchemaDescriptor(
    identifier="sales.orders",
    columns=[
        Column(name="order_id", type="int", nullable=False),
        Column(name="total", type="decimal"),
    ],
    primary_keys=["order_id"],
)

PRODUCT_COLUMNS = ["product_id", "name", "description", "price", "active", "category_id"]


@dataclass
class Product:
    __schema__: ClassVar[SchemaDescriptor] = PRODUCTS

    id: Any = UNSET
    name: Any = UNSET
    description: Any = UNSET
    price: Any = UNSET
    active: Any = UNSET
    category_id: Any = UNSET


@dataclass
class Review:
    __schema__: ClassVar[SchemaDescriptor] = REVIEWS

    review_id: Any = UNSET
    product_id: Any = UNSET
    rating: Any = UNSET
    body: Any = UNSET


@dataclass
class AuditEntry:
    __schema__: ClassVar[SchemaDescriptor] = AUDIT_LOG

    event: Any = UNSET
    logged_at: Any = UNSET


@dataclass
class Tag:
    __schema__: ClassVar[SchemaDescriptor] = TAGS

    tag_id: Any = UNSET


@dataclass
class Order:
    __schema__: ClassVar[SchemaDescriptor] = ORDERS

    order_id: Any = UNSET
    total: Any = UNSET


SQLITE_DDL = """
CREATE TABLE products (
    product_id  INTEGER PRIMARY KEY,
    name        TEXT    NOT NULL,
    description TEXT,
    price       REAL    NOT NULL,
    active      INTEGER NOT NULL,
    category_id INTEGER
);
CREATE TABLE reviews (
    review_id  INTEGER PRIMARY KEY,
    product_id INTEGER NOT NULL,
    rating     INTEGER NOT NULL,
    body       TEXT
);
"""

SEED_PRODUCTS = [
    (1, "Oak chair", "Solid oak", 120.0, 1, 10),
    (2, "Pine chair", None, 45.0, 1, 10),
    (3, "Glass desk", "Tempered glass", 310.0, 1, 20),
    (4, "Steel desk", None, 260.0, 0, 20),
    (5, "Bean bag", "Soft", 60.0, 1, None),
]

SEED_REVIEWS = [
    (1, 1, 5, "Sturdy"),
    (2, 1, 4, None),
    (3, 2, 2, "Wobbly"),
    (4, 3, 5, None),
    (5, 5, 1, "Flat"),
]


class RecordingExecutor:
    """Executor double that records every call and returns canned results."""

    def __init__(
        self,
        syntax: str = "postgres",
        rows: Sequence[Sequence[Any]] | None = None,
        rowcount: int | None = 1,
    ) -> None:
        self.syntax = syntax
        self.rows = list(rows or [])
        self.rowcount = rowcount
        self.fetch_calls: list[tuple[str, list[Any]]] = []
        self.execute_calls: list[tuple[str, list[Any]]] = []

    async def fetch_rows(self, sql: str, args: Sequence[Any]) -> Sequence[Sequence[Any]]:
        self.fetch_calls.append((sql, list(args)))
        return self.rows

    async def execute(self, sql: str, args: Sequence[Any]) -> int | None:
        self.execute_calls.append((sql, list(args)))
        return self.rowcount
