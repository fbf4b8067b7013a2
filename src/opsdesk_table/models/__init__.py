"""Column models shared across the table pipeline."""

from opsdesk_table.models.columns import Column, ColumnSchema, RenderFn

__all__ = ["Column", "ColumnSchema", "RenderFn"]
