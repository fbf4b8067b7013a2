"""Public API for :mod:`opsdesk_table`."""

from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING
import tomllib

if TYPE_CHECKING:
    from opsdesk_table.models.columns import Column, ColumnSchema
    from opsdesk_table.pipeline.extract import MISSING
    from opsdesk_table.pipeline.sort import SortDirection, SortState
    from opsdesk_table.settings import Settings
    from opsdesk_table.table import DerivedTable, TableController, render_table


def _pyproject_version() -> str | None:
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        parsed = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        version = parsed.get("project", {}).get("version")
        if isinstance(version, str) and version:
            return version
    except (FileNotFoundError, OSError, tomllib.TOMLDecodeError):
        return None
    return None


def _resolve_version() -> str:
    # Prefer the local pyproject when running from a source checkout/editable install.
    version = _pyproject_version()
    if version is not None:
        return version

    try:
        return metadata.version("opsdesk-table")
    except metadata.PackageNotFoundError:  # pragma: no cover
        return "unknown"


__version__ = _resolve_version()

_EXPORTS = {
    "Column": ("opsdesk_table.models.columns", "Column"),
    "ColumnSchema": ("opsdesk_table.models.columns", "ColumnSchema"),
    "DerivedTable": ("opsdesk_table.table", "DerivedTable"),
    "MISSING": ("opsdesk_table.pipeline.extract", "MISSING"),
    "Settings": ("opsdesk_table.settings", "Settings"),
    "SortDirection": ("opsdesk_table.pipeline.sort", "SortDirection"),
    "SortState": ("opsdesk_table.pipeline.sort", "SortState"),
    "TableController": ("opsdesk_table.table", "TableController"),
    "render_table": ("opsdesk_table.table", "render_table"),
}


def __getattr__(name: str):
    target = _EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = __import__(module_name, fromlist=[attr_name])
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_EXPORTS.keys()))


__all__ = [
    "Column",
    "ColumnSchema",
    "DerivedTable",
    "MISSING",
    "Settings",
    "SortDirection",
    "SortState",
    "TableController",
    "__version__",
    "render_table",
]
