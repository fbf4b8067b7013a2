"""Declarative table manifests."""

from opsdesk_table.schemas.manifest import ColumnConfig, TableManifest, load_manifest, parse_manifest

__all__ = ["ColumnConfig", "TableManifest", "load_manifest", "parse_manifest"]
