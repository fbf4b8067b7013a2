from __future__ import annotations

import pytest

from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.pipeline.sort import SortDirection, SortState, sort_records

ASC = SortDirection.ASC
DESC = SortDirection.DESC


def _names(records):
    return [r.get("name") for r in records]


def test_initial_state_has_no_active_column():
    state = SortState()
    assert state.active_key is None
    assert state.direction is ASC


def test_no_active_column_is_identity(products, product_columns):
    result = sort_records(products, product_columns, SortState())
    assert result == products
    assert result is not products


def test_toggle_transitions():
    name = Column("name", "Name", sortable=True)
    qty = Column("qty", "Qty", sortable=True)
    sku = Column("sku", "SKU")

    state = SortState().toggled(name)
    assert state == SortState("name", ASC)
    state = state.toggled(name)
    assert state == SortState("name", DESC)
    state = state.toggled(qty)
    assert state == SortState("qty", ASC)
    assert state.toggled(sku) is state
    assert state.toggled(None) is state


def test_text_sorts_case_insensitively(products, product_columns):
    result = sort_records(products, product_columns, SortState("name", ASC))
    assert _names(result) == ["anchor plate", "Bolt M6", "Cable tie", "Drill bit"]


def test_numbers_sort_numerically():
    columns = ColumnSchema([Column("qty", "Qty", sortable=True)])
    records = [{"qty": 100}, {"qty": 9}, {"qty": 25.5}]

    assert [r["qty"] for r in sort_records(records, columns, SortState("qty", ASC))] == [9, 25.5, 100]
    assert [r["qty"] for r in sort_records(records, columns, SortState("qty", DESC))] == [100, 25.5, 9]


@pytest.mark.parametrize("direction", [ASC, DESC])
def test_missing_values_sort_last_in_both_directions(direction):
    columns = ColumnSchema([Column("qty", "Qty", sortable=True)])
    records = [{"id": 1}, {"id": 2, "qty": 3}, {"id": 3, "qty": None}, {"id": 4, "qty": 1}, {"id": 5, "qty": ""}]

    result = sort_records(records, columns, SortState("qty", direction))

    assert [r["id"] for r in result][-3:] == [1, 3, 5]


@pytest.mark.parametrize("direction", [ASC, DESC])
def test_ties_keep_input_order(direction):
    columns = ColumnSchema([Column("status", "Status", sortable=True)])
    records = [
        {"id": 1, "status": "open"},
        {"id": 2, "status": "Closed"},
        {"id": 3, "status": "OPEN"},
        {"id": 4, "status": "closed"},
        {"id": 5, "status": "open"},
    ]

    result = sort_records(records, columns, SortState("status", direction))
    ids = [r["id"] for r in result]

    opens = [i for i in ids if i in (1, 3, 5)]
    closeds = [i for i in ids if i in (2, 4)]
    assert opens == [1, 3, 5]
    assert closeds == [2, 4]


def test_descending_reverses_non_tied_elements(products, product_columns):
    asc = sort_records(products, product_columns, SortState("cost_price", ASC))
    desc = sort_records(products, product_columns, SortState("cost_price", DESC))

    present_asc = [r["id"] for r in asc if "cost_price" in r]
    present_desc = [r["id"] for r in desc if "cost_price" in r]
    assert present_desc == list(reversed(present_asc))
    assert asc[-1]["id"] == desc[-1]["id"] == 14


def test_mixed_numbers_and_text_rank_numbers_first():
    columns = ColumnSchema([Column("code", "Code", sortable=True)])
    records = [{"code": "B-2"}, {"code": 10}, {"code": "a-1"}, {"code": 2}]

    result = sort_records(records, columns, SortState("code", ASC))
    assert [r["code"] for r in result] == [2, 10, "a-1", "B-2"]


def test_input_is_never_mutated(products, product_columns):
    snapshot = list(products)
    sort_records(products, product_columns, SortState("name", DESC))
    assert products == snapshot


def test_unknown_or_unsortable_active_column_is_identity(products, product_columns):
    assert sort_records(products, product_columns, SortState("nope", ASC)) == products
    assert sort_records(products, product_columns, SortState("sku", DESC)) == products
