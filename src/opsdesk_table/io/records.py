"""Load records from JSON/CSV/XLSX files or fetch them from the console API."""

from __future__ import annotations

import csv
import json
import logging
import re
from contextlib import suppress
from decimal import Decimal
from pathlib import Path
from typing import Any

import httpx
import openpyxl

from opsdesk_table.common.events import EventLogger
from opsdesk_table.exceptions import RecordSourceError

events = EventLogger(logging.getLogger(__name__), namespace="records")

SUPPORTED_SUFFIXES = (".json", ".csv", ".xlsx", ".xlsm")


def _records_from_payload(payload: Any, *, source: str) -> list[dict[str, Any]]:
    """Accept a JSON array of objects, or an object wrapping one under ``items``."""

    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        payload = payload["items"]
    if not isinstance(payload, list):
        raise RecordSourceError(f"{source}: expected a JSON array of records, got {type(payload).__name__}")
    bad = [idx for idx, item in enumerate(payload) if not isinstance(item, dict)]
    if bad:
        raise RecordSourceError(f"{source}: record(s) at index {', '.join(map(str, bad[:5]))} are not objects")
    return payload


def _load_json(path: Path) -> list[dict[str, Any]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8-sig"))
    except json.JSONDecodeError as exc:
        raise RecordSourceError(f"{path}: invalid JSON: {exc}") from exc
    return _records_from_payload(payload, source=str(path))


_CSV_INT = re.compile(r"-?(?:0|[1-9]\d*)")
_CSV_DECIMAL = re.compile(r"-?(?:0|[1-9]\d*)\.\d+")


def _csv_value(text: str | None) -> Any:
    """Plain integers and decimals become numbers; codes like ``007`` stay text."""

    if text is None:
        return None
    stripped = text.strip()
    if _CSV_INT.fullmatch(stripped):
        return int(stripped)
    if _CSV_DECIMAL.fullmatch(stripped):
        return Decimal(stripped)
    return text


def _load_csv(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        return [
            {key: _csv_value(value) for key, value in row.items() if key is not None}
            for row in reader
            if any((value or "").strip() for value in row.values() if isinstance(value, str))
        ]


def _header_name(value: Any, index: int) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return f"col_{index + 1}"
    return str(value).strip()


def _load_workbook(path: Path) -> list[dict[str, Any]]:
    workbook = openpyxl.load_workbook(filename=path, read_only=True, data_only=True)
    try:
        visible = [ws for ws in workbook.worksheets if getattr(ws, "sheet_state", "visible") == "visible"]
        if not visible:
            return []
        rows = visible[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        names = [_header_name(value, idx) for idx, value in enumerate(header)]
        records: list[dict[str, Any]] = []
        for row in rows:
            if all(value is None or (isinstance(value, str) and not value.strip()) for value in row):
                continue
            records.append({name: (row[idx] if idx < len(row) else None) for idx, name in enumerate(names)})
        return records
    finally:
        with suppress(Exception):
            workbook.close()


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read records from a ``.json``, ``.csv`` or ``.xlsx``/``.xlsm`` file."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise RecordSourceError(
            f"Unsupported record file '{path.name}' (supported: {', '.join(SUPPORTED_SUFFIXES)})"
        )
    if not path.is_file():
        raise RecordSourceError(f"Record file not found: {path}")

    try:
        if suffix == ".json":
            records = _load_json(path)
        elif suffix == ".csv":
            records = _load_csv(path)
        else:
            records = _load_workbook(path)
    except RecordSourceError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise RecordSourceError(f"Could not read records from {path}: {exc}") from exc
    except Exception as exc:  # openpyxl raises a variety of zip/xml errors
        raise RecordSourceError(f"Could not read workbook {path}: {exc}") from exc

    events.emit(
        "loaded",
        message=f"Loaded {len(records)} record(s) from {path.name}",
        source=str(path),
        count=len(records),
    )
    return records


def _fetch_with_client(client: httpx.Client, url: str) -> list[dict[str, Any]]:
    response = client.get(url, headers={"Accept": "application/json"})
    if response.status_code >= 400:
        raise RecordSourceError(f"GET {url} failed with HTTP {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise RecordSourceError(f"GET {url} did not return JSON") from exc
    return _records_from_payload(payload, source=url)


def fetch_records(url: str, *, client: httpx.Client | None = None, timeout: float = 10.0) -> list[dict[str, Any]]:
    """GET a JSON array of records, e.g. ``{API_URL}/products``."""

    try:
        if client is not None:
            records = _fetch_with_client(client, url)
        else:
            with httpx.Client(follow_redirects=True, timeout=timeout) as local_client:
                records = _fetch_with_client(local_client, url)
    except httpx.HTTPError as exc:
        raise RecordSourceError(f"GET {url} failed: {exc}") from exc

    events.emit(
        "loaded",
        message=f"Fetched {len(records)} record(s) from {url}",
        source=url,
        count=len(records),
    )
    return records


__all__ = ["SUPPORTED_SUFFIXES", "fetch_records", "load_records"]
