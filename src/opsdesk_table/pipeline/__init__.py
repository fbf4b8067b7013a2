"""Search, sort and render stages of the table pipeline."""

from opsdesk_table.pipeline.extract import MISSING, display_text, extract_value, is_empty
from opsdesk_table.pipeline.render import ClickEvent, HeaderCell, RenderedCell, RenderedRow
from opsdesk_table.pipeline.search import SearchFilter, filter_records, resolve_search_keys
from opsdesk_table.pipeline.sort import SortDirection, SortEngine, SortState, sort_records

__all__ = [
    "MISSING",
    "ClickEvent",
    "HeaderCell",
    "RenderedCell",
    "RenderedRow",
    "SearchFilter",
    "SortDirection",
    "SortEngine",
    "SortState",
    "display_text",
    "extract_value",
    "filter_records",
    "is_empty",
    "resolve_search_keys",
    "sort_records",
]
