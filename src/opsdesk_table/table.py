"""Table controller: owns sort state and threads records through the pipeline.

Records flow search -> sort -> render on every ``render()`` call; nothing is
cached between calls. Search text is either owned by the table (uncontrolled)
or supplied by the host page on every render (controlled). The mode is fixed
when the table is built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Protocol, Sequence

from opsdesk_table.common.events import EventLogger, table_events
from opsdesk_table.exceptions import TableStateError
from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.pipeline.render import (
    HeaderCell,
    RenderedRow,
    RowCallback,
    render_headers,
    render_rows,
)
from opsdesk_table.pipeline.search import SearchFilter
from opsdesk_table.pipeline.sort import SortEngine, SortState
from opsdesk_table.settings import Settings

SearchChange = Callable[[str], None]


class TableStatus(str, Enum):
    IDLE = "idle"
    RECOMPUTING = "recomputing"


class SearchSource(Protocol):
    """Where a table reads its search term from."""

    controlled: bool

    def resolve(self, supplied: str | None) -> str: ...

    def input(self, term: str) -> bool:
        """Handle user input; return True when the table should re-derive now."""
        ...


class OwnedSearch:
    """Uncontrolled search: the table keeps the term typed into its own box."""

    controlled = False

    def __init__(self, initial: str = "") -> None:
        self.term = initial

    def resolve(self, supplied: str | None) -> str:
        if supplied is not None:
            raise TableStateError(
                "This table owns its search term; build it with TableController.controlled() "
                "to pass search_term on render"
            )
        return self.term

    def input(self, term: str) -> bool:
        self.term = term
        return True


class SuppliedSearch:
    """Controlled search: the host page owns the term and passes it on every render."""

    controlled = True

    def __init__(self, on_change: SearchChange | None = None) -> None:
        self.on_change = on_change

    def resolve(self, supplied: str | None) -> str:
        return supplied or ""

    def input(self, term: str) -> bool:
        if self.on_change is not None:
            self.on_change(term)
        return False


@dataclass(frozen=True)
class DerivedTable:
    """Searched, sorted and rendered rows ready for display."""

    headers: tuple[HeaderCell, ...]
    rows: tuple[RenderedRow, ...]
    total_count: int
    search_term: str
    sort: SortState

    @property
    def match_count(self) -> int:
        return len(self.rows)

    @property
    def records(self) -> list[Any]:
        return [row.record for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[RenderedRow]:
        return iter(self.rows)


class TableController:
    def __init__(
        self,
        columns: ColumnSchema | Iterable[Column],
        *,
        search: SearchSource | None = None,
        identity_field: str | None = None,
        on_row_click: RowCallback | None = None,
        search_keys: Iterable[str] | None = None,
        include_rendered_in_search: bool | None = None,
        sort: SortState | None = None,
        settings: Settings | None = None,
        events: EventLogger | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.events = events or table_events()
        self.identity_field = identity_field
        self.on_row_click = on_row_click
        self._search = search or OwnedSearch()
        self._search_keys = tuple(search_keys) if search_keys is not None else None
        self._include_rendered = (
            self.settings.include_rendered_in_search
            if include_rendered_in_search is None
            else include_rendered_in_search
        )
        self._sort = sort or SortState()
        self._records: Sequence[Any] | None = None
        self._last_term: str | None = None
        self.status = TableStatus.IDLE
        self._bind_columns(columns)

    @classmethod
    def controlled(
        cls,
        columns: ColumnSchema | Iterable[Column],
        on_search_change: SearchChange | None = None,
        **kwargs: Any,
    ) -> "TableController":
        return cls(columns, search=SuppliedSearch(on_search_change), **kwargs)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def columns(self) -> ColumnSchema:
        return self._columns

    @property
    def controlled_search(self) -> bool:
        return self._search.controlled

    @property
    def sort_state(self) -> SortState:
        return self._sort

    @property
    def search_term(self) -> str | None:
        """The owned term, or the term of the last controlled render."""

        if isinstance(self._search, OwnedSearch):
            return self._search.term
        return self._last_term

    def _bind_columns(self, columns: ColumnSchema | Iterable[Column]) -> None:
        schema = ColumnSchema.coerce(columns)
        self._columns = schema
        self._filter = SearchFilter(schema, self._search_keys, include_rendered=self._include_rendered)
        self._sorter = SortEngine(schema)
        self.events.emit(
            "schema.validated",
            level=logging.DEBUG,
            columns=list(schema.keys()),
            search_keys=list(self._filter.keys),
        )

    def set_columns(self, columns: ColumnSchema | Iterable[Column]) -> None:
        """Replace the schema; an active sort on a dropped column is cleared."""

        self._bind_columns(columns)
        active = self._columns.get(self._sort.active_key)
        if self._sort.is_active and (active is None or not active.sortable):
            self._sort = SortState()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def render(self, records: Sequence[Any], search_term: str | None = None) -> DerivedTable:
        term = self._search.resolve(search_term)
        self._records = records
        self._last_term = term
        return self._derive(records, term)

    def _derive(self, records: Sequence[Any], term: str) -> DerivedTable:
        self.status = TableStatus.RECOMPUTING
        try:
            filtered = self._filter.apply(records, term)
            ordered = self._sorter.apply(filtered, self._sort)
            rows = render_rows(
                ordered,
                self._columns,
                identity_field=self.identity_field,
                on_row_click=self.on_row_click,
                empty_text=self.settings.empty_text,
                failure_text=self.settings.cell_error_text,
                events=self.events,
            )
        finally:
            self.status = TableStatus.IDLE

        self.events.emit(
            "table.derived",
            level=logging.DEBUG,
            total=len(records),
            matched=len(rows),
            search=term,
            sort_key=self._sort.active_key,
            sort_direction=self._sort.direction.value,
        )
        return DerivedTable(
            headers=render_headers(self._columns, self._sort),
            rows=rows,
            total_count=len(records),
            search_term=term,
            sort=self._sort,
        )

    def _rederive(self) -> DerivedTable | None:
        if self._records is None:
            return None
        return self._derive(self._records, self._last_term or "")

    # ------------------------------------------------------------------
    # User interaction
    # ------------------------------------------------------------------

    def click_header(self, key: str) -> DerivedTable | None:
        """Header click: only touches sort state. Returns the re-derived table."""

        before = self._sort
        self._sort = before.toggled(self._columns.get(key))
        if self._sort == before:
            return None
        self.events.emit(
            "sort.changed",
            level=logging.DEBUG,
            key=self._sort.active_key,
            direction=self._sort.direction.value,
        )
        return self._rederive()

    def input_search(self, term: str) -> DerivedTable | None:
        """Search box input.

        Uncontrolled tables store the term and re-derive. Controlled tables
        forward it to the host and return ``None``; the host re-renders with
        the new term.
        """

        if not self._search.input(term):
            return None
        self._last_term = term
        self.events.emit("search.changed", level=logging.DEBUG, term=term)
        return self._rederive()


def render_table(
    records: Sequence[Any],
    columns: ColumnSchema | Iterable[Column],
    search_term: str | None = None,
    on_row_click: RowCallback | None = None,
    *,
    sort: SortState | None = None,
    identity_field: str | None = None,
    search_keys: Iterable[str] | None = None,
    settings: Settings | None = None,
) -> DerivedTable:
    """One-shot render with a caller-supplied search term and sort state."""

    table = TableController.controlled(
        columns,
        identity_field=identity_field,
        on_row_click=on_row_click,
        search_keys=search_keys,
        sort=sort,
        settings=settings,
    )
    return table.render(records, search_term)


__all__ = [
    "DerivedTable",
    "OwnedSearch",
    "SearchSource",
    "SuppliedSearch",
    "TableController",
    "TableStatus",
    "render_table",
]
