"""Shared helpers/options for the opsdesk-table CLI."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import typer
from typer import BadParameter

from opsdesk_table.settings import Settings


class LogFormat(str, Enum):
    """Supported log output formats."""

    text = "text"
    ndjson = "ndjson"


def resolve_log_level(log_level: Optional[str], default_level: int) -> int:
    """Resolve a string log level to a logging level constant."""
    if not log_level:
        return default_level

    resolved = logging.getLevelNamesMapping().get(str(log_level).upper())
    if isinstance(resolved, int):
        return resolved

    raise BadParameter(f"Invalid log level: {log_level}", param_hint="log_level")


def resolve_logging(
    *,
    log_format: Optional[LogFormat],
    log_level: Optional[str],
    settings: Settings,
) -> tuple[str, int]:
    """Effective log format/level: CLI options win over settings."""
    effective_format = log_format.value if log_format else settings.log_format
    return effective_format, resolve_log_level(log_level, settings.log_level)


LOG_FORMAT_OPTION = typer.Option(
    None,
    "--log-format",
    case_sensitive=False,
    help="Log output format.",
)

LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    case_sensitive=False,
    help="Log level (debug, info, warning, error, critical).",
)


__all__ = [
    "LogFormat",
    "LOG_FORMAT_OPTION",
    "LOG_LEVEL_OPTION",
    "resolve_log_level",
    "resolve_logging",
]
