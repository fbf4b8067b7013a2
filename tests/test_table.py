from __future__ import annotations

import logging

import pytest

from opsdesk_table.exceptions import SchemaError, TableStateError
from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.pipeline.sort import SortDirection, SortState
from opsdesk_table.settings import Settings
from opsdesk_table.table import TableController, TableStatus, render_table


@pytest.fixture
def stock_records() -> list[dict]:
    return [
        {"name": "Beta", "qty": 5},
        {"name": "Alpha", "qty": None},
        {"name": "Gamma", "qty": 5},
    ]


@pytest.fixture
def stock_columns() -> ColumnSchema:
    return ColumnSchema(
        [
            Column("name", "Name", sortable=True),
            Column("qty", "Qty", sortable=True),
            Column("sku", "SKU", sortable=False),
        ]
    )


def _names(table):
    return [record["name"] for record in table.records]


# -- scenarios --------------------------------------------------------------


def test_sort_by_quantity_keeps_ties_and_puts_missing_last(stock_records, stock_columns):
    table = TableController(stock_columns)
    table.render(stock_records)

    derived = table.click_header("qty")

    assert table.sort_state == SortState("qty", SortDirection.ASC)
    assert _names(derived) == ["Beta", "Gamma", "Alpha"]


def test_search_al_matches_only_alpha(stock_records, stock_columns):
    table = TableController(stock_columns)
    table.render(stock_records)

    derived = table.input_search("al")

    assert _names(derived) == ["Alpha"]
    assert derived.total_count == 3
    assert derived.match_count == 1


def test_clicking_unsortable_header_leaves_sort_state(stock_records, stock_columns):
    table = TableController(stock_columns)
    table.render(stock_records)
    table.click_header("name")
    before = table.sort_state

    assert table.click_header("sku") is None
    assert table.sort_state == before
    assert table.sort_state.active_key == "name"


def test_double_toggle_flips_direction_and_keeps_equal_names_in_order(stock_columns):
    records = [{"name": "B", "n": 1}, {"name": "A", "n": 2}, {"name": "B", "n": 3}]
    table = TableController(stock_columns)
    table.render(records)

    first = table.click_header("name")
    second = table.click_header("name")
    third = table.click_header("name")

    assert [(r["name"], r["n"]) for r in first.records] == [("A", 2), ("B", 1), ("B", 3)]
    assert [(r["name"], r["n"]) for r in second.records] == [("B", 1), ("B", 3), ("A", 2)]
    assert [(r["name"], r["n"]) for r in third.records] == [("A", 2), ("B", 1), ("B", 3)]


# -- controller behavior ------------------------------------------------------


def test_default_render_is_unsorted_and_unfiltered(products, product_columns):
    table = TableController(product_columns)

    derived = table.render(products)

    assert derived.records == products
    assert derived.sort == SortState()
    assert derived.search_term == ""
    assert table.status is TableStatus.IDLE
    assert len(derived) == len(products)


def test_rendering_twice_yields_identical_rows(products, product_columns):
    table = TableController(product_columns, identity_field="id")
    table.render(products)
    table.input_search("e")
    table.click_header("name")

    first = table.render(products)
    second = table.render(products)

    assert first.records == second.records
    assert [row.key for row in first] == [row.key for row in second]
    assert [[c.content for c in row.cells] for row in first] == [[c.content for c in row.cells] for row in second]


def test_records_are_never_mutated(products, product_columns):
    snapshot = [dict(record) for record in products]
    table = TableController(product_columns)
    table.render(products)
    table.click_header("cost_price")
    table.click_header("cost_price")
    table.input_search("bolt")

    assert products == snapshot


def test_interactions_before_first_render_only_change_state(stock_columns):
    table = TableController(stock_columns)

    assert table.click_header("name") is None
    assert table.input_search("x") is None
    assert table.sort_state.active_key == "name"
    assert table.search_term == "x"


def test_uncontrolled_table_rejects_supplied_search_term(stock_records, stock_columns):
    table = TableController(stock_columns)

    with pytest.raises(TableStateError):
        table.render(stock_records, search_term="al")


def test_controlled_search_forwards_input_and_uses_supplied_term(stock_records, stock_columns):
    changes: list[str] = []
    table = TableController.controlled(stock_columns, changes.append)

    assert table.controlled_search
    assert _names(table.render(stock_records, search_term="gam")) == ["Gamma"]

    assert table.input_search("bet") is None
    assert changes == ["bet"]
    assert table.search_term == "gam"

    assert _names(table.render(stock_records, search_term=changes[-1])) == ["Beta"]
    assert _names(table.render(stock_records)) == ["Beta", "Alpha", "Gamma"]


def test_controlled_header_click_reuses_last_supplied_term(stock_records, stock_columns):
    table = TableController.controlled(stock_columns)
    table.render(stock_records, search_term="a")

    derived = table.click_header("name")

    assert derived.search_term == "a"
    assert _names(derived) == ["Alpha", "Beta", "Gamma"]


def test_row_click_reaches_host_callback(stock_records, stock_columns):
    opened = []
    table = TableController(stock_columns, on_row_click=opened.append)

    derived = table.render(stock_records)
    derived.rows[1].click()

    assert opened == [stock_records[1]]


def test_duplicate_keys_fail_construction():
    with pytest.raises(SchemaError):
        TableController([Column("name", "Name"), Column("name", "Name 2")])


def test_set_columns_clears_sort_on_removed_column(stock_records, stock_columns):
    table = TableController(stock_columns)
    table.render(stock_records)
    table.click_header("qty")

    table.set_columns([Column("name", "Name", sortable=True)])

    assert table.sort_state == SortState()
    assert _names(table.render(stock_records)) == ["Beta", "Alpha", "Gamma"]


def test_set_columns_keeps_sort_on_surviving_column(stock_records, stock_columns):
    table = TableController(stock_columns)
    table.click_header("name")

    table.set_columns(ColumnSchema(stock_columns).extend(Column("actions", "Actions")))

    assert table.sort_state.active_key == "name"


def test_settings_control_empty_and_failure_text(stock_columns):
    def boom(value):
        raise ValueError(value)

    columns = ColumnSchema(stock_columns).extend(Column("price", "Price", render=boom))
    table = TableController(columns, settings=Settings(empty_text="-", cell_error_text="?"))

    (row,) = table.render([{"name": "Solo"}]).rows

    assert row.cell("qty").content == "-"
    assert row.cell("price").content == "?"


def test_rendered_columns_can_be_excluded_from_search(product_columns, products):
    table = TableController(product_columns, include_rendered_in_search=False)
    table.render(products)

    assert table.input_search("Fasteners").records == []


def test_derivation_is_logged_at_debug(stock_records, stock_columns, caplog):
    table = TableController(stock_columns)
    with caplog.at_level(logging.DEBUG, logger="opsdesk_table"):
        table.render(stock_records)
        table.click_header("name")

    events = [getattr(r, "event", None) for r in caplog.records]
    assert "table.table.derived" not in events
    assert "table.derived" in events
    assert "table.sort.changed" in events


def test_render_table_one_shot(stock_records, stock_columns):
    clicked = []
    derived = render_table(
        stock_records,
        stock_columns,
        "a",
        clicked.append,
        sort=SortState("name", SortDirection.DESC),
    )

    assert _names(derived) == ["Gamma", "Beta", "Alpha"]
    derived.rows[0].click()
    assert clicked == [stock_records[2]]
