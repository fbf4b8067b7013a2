"""Free-text search over the raw values of a record's searchable fields."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from opsdesk_table.models.columns import ColumnSchema
from opsdesk_table.pipeline.extract import extract_value, search_text


def normalize_term(term: str | None) -> str | None:
    """Return the case-folded term, or ``None`` when the search is a no-op."""

    if term is None:
        return None
    stripped = str(term).strip()
    if not stripped:
        return None
    return stripped.casefold()


def resolve_search_keys(
    columns: ColumnSchema,
    search_keys: Iterable[str] | None = None,
    *,
    include_rendered: bool = True,
) -> tuple[str, ...]:
    """Fields matched against the search term.

    An explicit ``search_keys`` list wins and may name fields that are not
    displayed as columns. Otherwise every column key is searchable, minus
    columns with a custom render when ``include_rendered`` is off.
    """

    if search_keys is not None:
        return tuple(dict.fromkeys(key for key in search_keys if key))
    return tuple(col.key for col in columns if include_rendered or not col.has_render)


def matches(record: Any, term: str, keys: Sequence[str]) -> bool:
    """``term`` must already be normalized."""

    for key in keys:
        text = search_text(extract_value(record, key))
        if text is not None and term in text.casefold():
            return True
    return False


def filter_records(records: Sequence[Any], term: str | None, keys: Sequence[str]) -> list[Any]:
    normalized = normalize_term(term)
    if normalized is None:
        return list(records)
    return [record for record in records if matches(record, normalized, keys)]


class SearchFilter:
    """Search bound to a resolved set of keys."""

    def __init__(
        self,
        columns: ColumnSchema,
        search_keys: Iterable[str] | None = None,
        *,
        include_rendered: bool = True,
    ) -> None:
        self.keys = resolve_search_keys(columns, search_keys, include_rendered=include_rendered)

    def apply(self, records: Sequence[Any], term: str | None) -> list[Any]:
        return filter_records(records, term, self.keys)


__all__ = [
    "SearchFilter",
    "filter_records",
    "matches",
    "normalize_term",
    "resolve_search_keys",
]
