"""Plain-text layout of a derived table for terminal output."""

from __future__ import annotations

from typing import Any, Iterable

from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.table import DerivedTable

_ARROWS = {"asc": " ^", "desc": " v"}


def infer_columns(records: Iterable[dict[str, Any]]) -> ColumnSchema:
    """Every key of the first record becomes a sortable column."""

    first = next(iter(records), None)
    if not first:
        return ColumnSchema(())
    return ColumnSchema(
        Column(key=key, label=key.replace("_", " ").title(), sortable=True)
        for key in first
        if isinstance(key, str) and key.strip()
    )


def _clip(text: str, width: int) -> str:
    text = " ".join(text.split())
    return text if len(text) <= width else text[: width - 1] + "…"


def format_table(table: DerivedTable, *, max_width: int = 40) -> str:
    headers = [_clip(h.label + _ARROWS.get(h.direction or "", ""), max_width) for h in table.headers]
    body = [[_clip(cell.text, max_width) for cell in row.cells] for row in table.rows]

    widths = [len(h) for h in headers]
    for cells in body:
        for idx, text in enumerate(cells):
            widths[idx] = max(widths[idx], len(text))

    def line(cells: list[str]) -> str:
        return "  ".join(text.ljust(widths[idx]) for idx, text in enumerate(cells)).rstrip()

    out = [line(headers), "  ".join("-" * w for w in widths)]
    out.extend(line(cells) for cells in body)
    out.append(f"{table.match_count} of {table.total_count} records")
    return "\n".join(out)


__all__ = ["format_table", "infer_columns"]
