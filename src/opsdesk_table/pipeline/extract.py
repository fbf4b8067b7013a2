"""Tolerant value extraction and text coercion for record fields.

Records come from heterogeneous API payloads and may omit optional fields, so
reading a field never raises: an absent field yields :data:`MISSING`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Final

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel type for a field that is absent from a record."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "<MISSING>"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def extract_value(record: Any, key: str) -> Any:
    """Return ``record[key]`` (mappings) or ``record.key`` (objects), else ``MISSING``.

    ``key`` is looked up literally; ``"customer.name"`` is a field name, not a path.
    """

    if isinstance(record, Mapping):
        try:
            return record.get(key, MISSING)
        except TypeError:
            return MISSING
    if record is None or not isinstance(key, str) or not key:
        return MISSING
    try:
        return getattr(record, key, MISSING)
    except Exception:  # noqa: BLE001 - a raising property reads as an absent field
        logger.debug("Attribute %r raised on %s; treated as missing", key, type(record).__name__, exc_info=True)
        return MISSING


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_empty(value: Any) -> bool:
    """Missing, ``None``, NaN and blank strings are all empty for display and sorting."""

    if value is MISSING or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def number_text(value: int | float | Decimal) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def display_text(value: Any, *, empty_text: str = "") -> str:
    """Coerce a raw value to cell text."""

    if value is MISSING or value is None:
        return empty_text
    if is_number(value):
        if is_empty(value):
            return empty_text
        return number_text(value)
    return str(value)


def search_text(value: Any) -> str | None:
    """Text used for matching, or ``None`` when the value is not a searchable primitive."""

    if isinstance(value, str):
        return value
    if is_number(value) and not is_empty(value):
        return number_text(value)
    return None


__all__ = [
    "MISSING",
    "display_text",
    "extract_value",
    "is_empty",
    "is_number",
    "number_text",
    "search_text",
]
