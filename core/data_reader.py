"""Read and validate local technical analysis snapshot files."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
import re
from typing import Any, Iterable

import pandas as pd

from config.settings import SNAPSHOT_DATA_DIR

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9&._-]{0,31}$")


def normalize_symbol(raw_symbol: str | None) -> str | None:
    """Uppercase and validate a ticker symbol; None when it is unusable as a file name."""
    symbol = (raw_symbol or "").strip().upper()
    if not _SYMBOL_PATTERN.match(symbol):
        return None
    return symbol


def _unwrap(document: Any) -> list[Any]:
    """Accept a bare record list or the backend `{"status", "data"}` envelope."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        status = document.get("status")
        if status is not None and status != "success":
            raise ValueError(document.get("message") or f"Snapshot document status is {status!r}")
        records = document.get("data")
        if isinstance(records, list):
            return records
    raise ValueError("Snapshot document must be a list of records or a success envelope")


def sort_snapshots(records: Iterable[Any]) -> list[dict[str, Any]]:
    """
    Drop records without a parseable date, keep the last record per date
    and return them most-recent-first. Records themselves are not copied.
    """
    candidates = [record for record in records if isinstance(record, dict)]
    if not candidates:
        return []

    frame = pd.DataFrame(
        {
            "position": range(len(candidates)),
            "date": pd.to_datetime(
                pd.Series([record.get("date") for record in candidates], dtype="object"),
                errors="coerce",
                format="ISO8601",
                utc=True,
            ),
        }
    )
    frame = frame.dropna(subset=["date"])
    frame["day"] = frame["date"].dt.strftime("%Y-%m-%d")
    frame = frame.drop_duplicates(subset=["day"], keep="last")
    frame = frame.sort_values(["date", "position"], ascending=[False, False])
    return [candidates[position] for position in frame["position"]]


def snapshot_fingerprint(snapshots: list[dict[str, Any]]) -> str:
    """Content signature of the ordered records; any changed value changes it."""
    if not snapshots:
        return "empty"
    encoded = json.dumps(snapshots, sort_keys=True, default=str).encode("utf-8")
    return f"{len(snapshots)}|{hashlib.sha256(encoded).hexdigest()}"


def available_symbols(data_dir: str | Path | None = None) -> list[str]:
    base_dir = Path(data_dir) if data_dir is not None else Path(SNAPSHOT_DATA_DIR)
    if not base_dir.exists():
        return []
    symbols = (normalize_symbol(path.stem) for path in base_dir.glob("*.json"))
    return sorted(symbol for symbol in symbols if symbol)


def read_snapshots(symbol: str, data_dir: str | Path | None = None) -> list[dict[str, Any]]:
    """
    Read one symbol's snapshot file and return records most-recent-first.

    Raises:
        FileNotFoundError: When the file does not exist.
        ValueError: When the symbol or the document is malformed.
    """
    normalized = normalize_symbol(symbol)
    if normalized is None:
        raise ValueError(f"Invalid symbol: {symbol!r}")

    base_dir = Path(data_dir) if data_dir is not None else Path(SNAPSHOT_DATA_DIR)
    json_path = base_dir / f"{normalized}.json"
    if not json_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {json_path}")

    try:
        document = json.loads(json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Snapshot file is not valid JSON: {json_path}") from exc

    return sort_snapshots(_unwrap(document))
