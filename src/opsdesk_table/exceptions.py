"""Table engine error hierarchy."""

from __future__ import annotations


class TableEngineError(Exception):
    """Base class for opsdesk_table exceptions."""


class SchemaError(TableEngineError):
    """Raised when a column schema or table manifest is invalid."""


class TableStateError(TableEngineError):
    """Raised when a table is driven in a way its search mode does not allow."""


class RecordSourceError(TableEngineError):
    """Raised when records cannot be loaded from a file or fetched over HTTP."""


__all__ = [
    "TableEngineError",
    "SchemaError",
    "TableStateError",
    "RecordSourceError",
]
