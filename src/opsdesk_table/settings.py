"""Settings for opsdesk_table using pydantic-settings.

Loaded from (in precedence order):
init kwargs > env vars > .env file > settings.toml > defaults.
"""
from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _toml_settings_source() -> dict[str, Any]:
    """Load settings from ``settings.toml`` if present.

    Accepts either top-level keys or a nested ``[opsdesk_table]`` table.
    """

    path = Path("settings.toml")
    if not path.exists():
        return {}

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}

    nested = data.get("opsdesk_table")
    if isinstance(nested, dict):
        return nested
    return data


class Settings(BaseSettings):
    """Runtime settings for tables and the preview CLI.

    Callers can override via init kwargs, environment variables
    (``OPSDESK_TABLE_*``), a ``.env`` file, or an optional ``settings.toml``.
    """

    model_config = SettingsConfigDict(
        env_prefix="OPSDESK_TABLE_",
        env_file=".env",
        extra="ignore",
    )

    # Cell display
    empty_text: str = Field(
        default="",
        description="Text shown for cells whose value is missing or None.",
    )
    cell_error_text: str = Field(
        default="",
        description="Text shown in place of a cell whose render function raised.",
    )

    # Search behavior
    include_rendered_in_search: bool = Field(
        default=True,
        description=(
            "Whether columns with a custom render function contribute their raw value "
            "to the default searchable field set."
        ),
    )

    # Record sources
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for fetching records over HTTP.",
    )

    # Logging
    log_format: Literal["text", "ndjson"] = Field(default="text")
    log_level: int = Field(default=logging.INFO)

    @field_validator("log_level", mode="before")
    @classmethod
    def _coerce_level_name(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip().isdigit():
            resolved = logging.getLevelNamesMapping().get(v.strip().upper())
            if resolved is None:
                raise ValueError(f"unknown log level: {v}")
            return resolved
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):  # type: ignore[override]
        toml_source = lambda: _toml_settings_source()
        # Precedence: init > env vars > .env > TOML > defaults
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            toml_source,
            file_secret_settings,
        )


__all__ = ["Settings"]
