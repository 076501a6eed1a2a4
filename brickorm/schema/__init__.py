"""brickORM schema models: Column, SchemaDescriptor and value markers."""
from brickorm.schema.descriptor import Column, SchemaDescriptor, SchemaProvider, schema_of
from brickorm.schema.values import UNSET, is_null

__all__ = [
    "Column",
    "SchemaDescriptor",
    "SchemaProvider",
    "schema_of",
    "UNSET",
    "is_null",
]
