"""Pydantic models for declarative table manifests.

A manifest declares one list page's columns in JSON, e.g.::

    {
      "identity_field": "id",
      "columns": [
        {"key": "name", "label": "Name", "sortable": true},
        {"key": "category_name", "label": "Category", "renderer": "fallback",
         "options": {"text": "Uncategorized"}},
        {"key": "cost_price", "label": "Cost Price", "sortable": true,
         "renderer": "currency", "options": {"symbol": "₱"}}
      ]
    }
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from opsdesk_table.exceptions import SchemaError
from opsdesk_table.models.columns import Column, ColumnSchema
from opsdesk_table.renderers import RENDERERS


class ColumnConfig(BaseModel):
    """One declared column."""

    key: str = Field(min_length=1)
    label: str | None = None
    sortable: bool = False
    renderer: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("key")
    @classmethod
    def _key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("column key must not be blank")
        return v

    @field_validator("renderer")
    @classmethod
    def _known_renderer(cls, v: str | None) -> str | None:
        if v is not None and v not in RENDERERS:
            raise ValueError(f"unknown renderer '{v}' (known: {', '.join(sorted(RENDERERS))})")
        return v

    def display_label(self) -> str:
        return self.label if self.label is not None else self.key.replace("_", " ").title()

    def to_column(self) -> Column:
        render = None
        if self.renderer is not None:
            try:
                render = RENDERERS[self.renderer](**self.options)
            except TypeError as exc:
                raise SchemaError(f"Invalid options for renderer '{self.renderer}' on column '{self.key}': {exc}") from exc
        return Column(key=self.key, label=self.display_label(), sortable=self.sortable, render=render)


class TableManifest(BaseModel):
    """Top-level manifest model."""

    columns: list[ColumnConfig] = Field(min_length=1)
    identity_field: str | None = None
    search_fields: list[str] | None = None
    include_rendered_in_search: bool = True

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _unique_keys(self) -> "TableManifest":
        counts = Counter(col.key for col in self.columns)
        duplicates = [key for key, count in counts.items() if count > 1]
        if duplicates:
            raise ValueError(f"duplicate column key(s): {', '.join(duplicates)}")
        return self

    def to_schema(self) -> ColumnSchema:
        return ColumnSchema(col.to_column() for col in self.columns)


def parse_manifest(payload: Any) -> TableManifest:
    try:
        return TableManifest.model_validate(payload)
    except ValidationError as exc:
        raise SchemaError(f"Invalid table manifest: {exc}") from exc


def load_manifest(path: Path) -> TableManifest:
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SchemaError(f"Could not read table manifest {path}: {exc}") from exc
    return parse_manifest(payload)


__all__ = ["ColumnConfig", "TableManifest", "load_manifest", "parse_manifest"]
