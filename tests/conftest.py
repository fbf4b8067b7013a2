from __future__ import annotations

import os

import pytest

from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.renderers import currency, fallback, stock_status
from opsdesk_table.settings import Settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's .env / settings.toml / env vars out of the tests."""

    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("OPSDESK_TABLE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def products() -> list[dict]:
    return [
        {"id": 11, "name": "Bolt M6", "sku": "BLT-006", "category_name": "Fasteners", "quantity": 120, "cost_price": 2.5},
        {"id": 12, "name": "anchor plate", "sku": "ANC-100", "category_name": None, "quantity": 0, "cost_price": 1250},
        {"id": 13, "name": "Cable tie", "sku": "CBL-020", "category_name": "Electrical", "quantity": 7, "cost_price": 0.35},
        {"id": 14, "name": "Drill bit", "sku": "DRL-008", "quantity": 40},
    ]


@pytest.fixture
def product_columns() -> ColumnSchema:
    return ColumnSchema(
        [
            Column("name", "Name", sortable=True),
            Column("sku", "SKU"),
            Column("category_name", "Category", sortable=True, render=fallback("Uncategorized")),
            Column("quantity", "Stock", sortable=True),
            Column("status", "Status", render=stock_status()),
            Column("cost_price", "Cost Price", sortable=True, render=currency("₱")),
        ]
    )

