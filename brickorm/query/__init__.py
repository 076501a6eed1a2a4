"""brickORM statement assemblers: select, bulk and single-row update, delete, insert."""
from brickorm.query.delete import compile_delete_one, delete_one
from brickorm.query.insert import compile_insert_one, insert_one
from brickorm.query.select import SelectBuilder, select
from brickorm.query.update import UpdateBuilder, compile_update_one, update_one

__all__ = [
    "SelectBuilder",
    "UpdateBuilder",
    "select",
    "compile_update_one",
    "update_one",
    "compile_delete_one",
    "delete_one",
    "compile_insert_one",
    "insert_one",
]
