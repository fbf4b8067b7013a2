"""Cell and row rendering for a derived row set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from opsdesk_table.common.events import EventLogger
from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.pipeline.extract import display_text, extract_value, is_empty
from opsdesk_table.pipeline.sort import SortState

RowCallback = Callable[[Any], None]
RowKey = Any

POSITION_KEY = "#"


@dataclass
class ClickEvent:
    """A click travelling from a cell's content up to its row."""

    origin: str | None = None
    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


@dataclass(frozen=True)
class RenderedCell:
    key: str
    content: Any
    raw: Any
    failed: bool = False

    @property
    def text(self) -> str:
        return str(self.content) if self.content is not None else ""


@dataclass(frozen=True)
class HeaderCell:
    key: str
    label: str
    sortable: bool
    direction: str | None = None


@dataclass(frozen=True)
class RenderedRow:
    key: RowKey
    index: int
    record: Any
    cells: tuple[RenderedCell, ...]
    on_activate: RowCallback | None = field(default=None, repr=False, compare=False)

    @property
    def interactive(self) -> bool:
        return self.on_activate is not None

    def cell(self, key: str) -> RenderedCell | None:
        for cell in self.cells:
            if cell.key == key:
                return cell
        return None

    def click(self, origin: str | None = None) -> bool:
        """Dispatch a click; return whether the row callback fired.

        A click from a cell first reaches that cell's content (when it has a
        ``handle_click(event)``), which may stop it from reaching the row.
        """

        event = ClickEvent(origin=origin)
        if origin is not None:
            cell = self.cell(origin)
            handler = getattr(cell.content, "handle_click", None) if cell is not None else None
            if callable(handler):
                handler(event)
        if event.propagation_stopped or self.on_activate is None:
            return False
        self.on_activate(self.record)
        return True


def row_key(record: Any, index: int, identity_field: str | None) -> RowKey:
    """Identity value when one is designated and present, else the position.

    Without an identity field every key is the plain position. With one, a
    record lacking its identity gets ``("#", index)`` so the fallback can never
    equal another record's identity value. Positional keys re-identify rows
    after a re-sort; no identity is guessed.
    """

    if not identity_field:
        return index
    value = extract_value(record, identity_field)
    if is_empty(value):
        return (POSITION_KEY, index)
    return value


def render_cell(
    column: Column,
    record: Any,
    *,
    empty_text: str = "",
    failure_text: str = "",
    events: EventLogger | None = None,
    row_index: int | None = None,
) -> RenderedCell:
    raw = extract_value(record, column.key)
    if not column.has_render:
        return RenderedCell(key=column.key, content=display_text(raw, empty_text=empty_text), raw=raw)

    try:
        content = column.call_render(raw, record)
    except Exception as exc:  # noqa: BLE001 - one bad record must not blank the table
        if events is not None:
            events.emit(
                "cell.render_failed",
                message=f"Render for column '{column.key}' failed: {exc}",
                level=logging.WARNING,
                exc_info=exc,
                column=column.key,
                row_index=row_index,
                error=type(exc).__name__,
            )
        return RenderedCell(key=column.key, content=failure_text, raw=raw, failed=True)
    return RenderedCell(key=column.key, content=content, raw=raw)


def render_rows(
    records: Sequence[Any],
    columns: ColumnSchema,
    *,
    identity_field: str | None = None,
    on_row_click: RowCallback | None = None,
    empty_text: str = "",
    failure_text: str = "",
    events: EventLogger | None = None,
) -> tuple[RenderedRow, ...]:
    rows: list[RenderedRow] = []
    for index, record in enumerate(records):
        cells = tuple(
            render_cell(
                column,
                record,
                empty_text=empty_text,
                failure_text=failure_text,
                events=events,
                row_index=index,
            )
            for column in columns
        )
        rows.append(
            RenderedRow(
                key=row_key(record, index, identity_field),
                index=index,
                record=record,
                cells=cells,
                on_activate=on_row_click,
            )
        )
    return tuple(rows)


def render_headers(columns: ColumnSchema, sort: SortState) -> tuple[HeaderCell, ...]:
    return tuple(
        HeaderCell(
            key=col.key,
            label=col.label,
            sortable=col.sortable,
            direction=sort.direction.value if col.sortable and col.key == sort.active_key else None,
        )
        for col in columns
    )


__all__ = [
    "ClickEvent",
    "HeaderCell",
    "POSITION_KEY",
    "RenderedCell",
    "RenderedRow",
    "RowCallback",
    "render_cell",
    "render_headers",
    "render_rows",
    "row_key",
]
