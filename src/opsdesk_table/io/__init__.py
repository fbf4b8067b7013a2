"""Record sources for the preview CLI and host pages."""

from opsdesk_table.io.records import fetch_records, load_records

__all__ = ["fetch_records", "load_records"]
