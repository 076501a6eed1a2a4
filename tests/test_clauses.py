"""Unit tests for the clause model and the typed field handles."""

from __future__ import annotations

import pytest

from brickorm.compile.clauses import (
    ClauseOp,
    ColumnValueClause,
    ManualClause,
    SetColumnNull,
    SetColumnValue,
)
from brickorm.compile.context import StatementState
from brickorm.compile.mssql import MssqlWriter
from brickorm.compile.postgres import PostgresWriter
from brickorm.errors import CompilationError, MissingColumnError, ValueTypeError
from brickorm.schema.fields import BasicField, NumericField, TextField
from brickorm.schema.values import UNSET
from tests.fixtures import PRODUCTS


def _state() -> StatementState:
    return StatementState(writer=PostgresWriter())


# ---------------------------------------------------------------------------
# Null substitution
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("op", list(ClauseOp))
@pytest.mark.parametrize("null", [None, UNSET])
def test_null_value_renders_is_null_for_every_operator(op: ClauseOp, null):
    state = _state()
    sql = ColumnValueClause("description", op, null).render(state, "t1")
    assert sql == 't1."description" IS NULL'
    assert state.args == []
    assert state.params.count == 0


@pytest.mark.parametrize("op", list(ClauseOp))
def test_negated_null_renders_is_not_null(op: ClauseOp):
    state = _state()
    sql = ColumnValueClause("description", op, None, not_clause=True).render(state, "t1")
    assert sql == 't1."description" IS NOT NULL'
    assert state.args == []


def test_null_check_runs_on_every_render():
    clause = ColumnValueClause("description", ClauseOp.LIKE, None)
    assert clause.null_clause
    first, second = _state(), _state()
    assert clause.render(first, "t1") == clause.render(second, "t1")


def test_value_binds_one_placeholder():
    state = _state()
    sql = ColumnValueClause("price", ClauseOp.GT, 10).render(state, "t1")
    assert sql == 't1."price" > $1'
    assert state.args == [10]


def test_operator_text():
    state = _state()
    rendered = [
        ColumnValueClause("name", op, "x").render(state, "t1")
        for op in (ClauseOp.NE, ClauseOp.NOT_LIKE, ClauseOp.ILIKE, ClauseOp.NOT_ILIKE)
    ]
    assert rendered == [
        't1."name" != $1',
        't1."name" not like $2',
        't1."name" ilike $3',
        't1."name" not ilike $4',
    ]
    assert state.args == ["x", "x", "x", "x"]


def test_bare_column_without_alias():
    state = _state()
    assert ColumnValueClause("name", ClauseOp.EQ, "x").render(state, None) == '"name" = $1'


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


def test_set_column_value():
    state = _state()
    assert SetColumnValue("price", 9.5).render(state, None) == '"price"=$1'
    assert state.args == [9.5]


def test_set_column_null_binds_nothing():
    state = _state()
    assert SetColumnNull("description").render(state, None) == '"description"=NULL'
    assert state.args == []


def test_unset_bound_as_none():
    state = _state()
    SetColumnValue("category_id", UNSET).render(state, None)
    assert state.args == [None]


def test_equality_clause_as_assignment():
    assert ColumnValueClause("name", ClauseOp.EQ, "x").as_assignment() == SetColumnValue("name", "x")
    assert ColumnValueClause("name", ClauseOp.EQ, None).as_assignment() == SetColumnNull("name")


def test_non_equality_clause_is_not_an_assignment():
    with pytest.raises(CompilationError):
        ColumnValueClause("price", ClauseOp.GT, 1).as_assignment()


# ---------------------------------------------------------------------------
# Manual clauses
# ---------------------------------------------------------------------------


def test_manual_clause_replaces_markers_in_order():
    state = StatementState(writer=MssqlWriter())
    clause = ManualClause("price", " BETWEEN ? AND ?", (10, 20))
    assert clause.render(state, "t1") == "t1.[price] BETWEEN @p1 AND @p2"
    assert state.args == [10, 20]


def test_manual_clause_without_markers():
    state = _state()
    assert ManualClause("description", " IS NOT NULL").render(state, "t1") == (
        't1."description" IS NOT NULL'
    )
    assert state.args == []


def test_manual_clause_marker_mismatch():
    with pytest.raises(CompilationError):
        ManualClause("price", " BETWEEN ? AND ?", (10,))


def test_manual_clause_double_marker_writes_literal():
    state = _state()
    clause = ManualClause("attributes", " ?? 'sku' AND name = ?", ("desk",))
    assert clause.render(state, "t1") == "t1.\"attributes\" ? 'sku' AND name = $1"
    assert state.args == ["desk"]


def test_manual_clause_literal_marker_needs_no_value():
    state = _state()
    assert ManualClause("name", " = 'a??b'").render(state, None) == "\"name\" = 'a?b'"
    assert state.args == []


# ---------------------------------------------------------------------------
# Field handles
# ---------------------------------------------------------------------------


def test_field_handle_classes():
    fields = PRODUCTS.fields
    assert isinstance(fields.name, TextField)
    assert isinstance(fields.price, NumericField)
    assert isinstance(fields.id, NumericField)
    assert type(fields.active) is BasicField


def test_field_addressed_by_model_attribute_or_column_name():
    assert PRODUCTS.fields.id.name == "product_id"
    assert PRODUCTS.fields["product_id"].name == "product_id"


def test_unknown_field_raises_missing_column():
    with pytest.raises(MissingColumnError) as exc_info:
        PRODUCTS.fields.colour
    assert exc_info.value.column == "colour"
    assert exc_info.value.table == "products"


def test_equality_only_fields_have_no_ordering():
    assert not hasattr(PRODUCTS.fields.active, "gt")
    assert not hasattr(PRODUCTS.fields.price, "like")


def test_not_equal_sets_negation_flag():
    clause = PRODUCTS.fields.name.not_equal("x")
    assert clause.op is ClauseOp.NE
    assert clause.not_clause


def test_value_is_validated_against_column_type():
    with pytest.raises(ValueTypeError) as exc_info:
        PRODUCTS.fields.price.gt("cheap")
    assert exc_info.value.column == "price"
    assert exc_info.value.expected == "float"

    with pytest.raises(ValueTypeError):
        PRODUCTS.fields.name.equal(5)


def test_validated_value_is_coerced():
    clause = PRODUCTS.fields.price.lt("10.5")
    assert clause.value == 10.5
    assert isinstance(clause.value, float)


def test_null_passes_validation():
    assert PRODUCTS.fields.price.equal(None).null_clause


def test_manual_from_field():
    clause = PRODUCTS.fields.price.manual(" BETWEEN ? AND ?", 1, 2)
    assert clause == ManualClause("price", " BETWEEN ? AND ?", (1, 2))


def test_assign_null_to_non_nullable_column():
    with pytest.raises(ValueTypeError):
        PRODUCTS.fields.name.assign_null()
    with pytest.raises(ValueTypeError):
        PRODUCTS.fields.name.assign(None)
    assert PRODUCTS.fields.description.assign_null() == SetColumnNull("description")
