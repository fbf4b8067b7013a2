"""Single-column, stable, type-aware sorting."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Sequence

from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.pipeline.extract import extract_value, is_empty, is_number


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class SortState:
    """Active sort column and direction; no column is active initially."""

    active_key: str | None = None
    direction: SortDirection = SortDirection.ASC

    @property
    def is_active(self) -> bool:
        return self.active_key is not None

    def toggled(self, column: Column | None) -> "SortState":
        """State after clicking ``column``'s header."""

        if column is None or not column.sortable:
            return self
        if column.key == self.active_key:
            return replace(self, direction=self.direction.flipped())
        return SortState(active_key=column.key, direction=SortDirection.ASC)


# Numbers sort before text; anything else sorts after both by its text.
_RANK_NUMBER = 0
_RANK_TEXT = 1
_RANK_OTHER = 2


def sort_key(value: Any) -> tuple[int, Any]:
    """Comparison key for a non-empty value."""

    if is_number(value):
        return (_RANK_NUMBER, value)
    if isinstance(value, str):
        return (_RANK_TEXT, value.casefold())
    return (_RANK_OTHER, str(value).casefold())


def sort_records(records: Sequence[Any], columns: ColumnSchema, state: SortState) -> list[Any]:
    """Return ``records`` ordered by ``state``; the input is never mutated.

    Empty values go last in input order for both directions, so a blank never
    jumps to the top of a descending sort.
    """

    column = columns.get(state.active_key)
    if column is None or not column.sortable:
        return list(records)

    present: list[tuple[tuple[int, Any], Any]] = []
    empty: list[Any] = []
    for record in records:
        value = extract_value(record, column.key)
        if is_empty(value):
            empty.append(record)
        else:
            present.append((sort_key(value), record))

    # sorted() is stable for reverse=True as well, so ties keep input order.
    ordered = sorted(present, key=lambda pair: pair[0], reverse=state.direction is SortDirection.DESC)
    return [record for _, record in ordered] + empty


class SortEngine:
    """Sort bound to a column schema."""

    def __init__(self, columns: ColumnSchema) -> None:
        self.columns = columns

    def apply(self, records: Sequence[Any], state: SortState) -> list[Any]:
        return sort_records(records, self.columns, state)


__all__ = [
    "SortDirection",
    "SortEngine",
    "SortState",
    "sort_key",
    "sort_records",
]
