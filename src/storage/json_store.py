"""Flat JSON files backing the trackers.

Each tracker owns a cache file holding its last observed product set. All
trackers share one status document (``trackers.json``) keyed by tracker id,
which the dashboard polls.
"""
from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import ValidationError

from src.models import CacheRecord, TrackerStatusRecord

# Serialises read-modify-write of the shared status file within one process.
# Separate processes can still race on it.
_status_lock = threading.Lock()


class StorageError(Exception):
    """A JSON file exists but cannot be read back."""


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path}: {e}") from e


def _write_json(path: Path, data: Any, indent: Optional[int] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=indent)
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def load_cache(path: Path) -> Optional[CacheRecord]:
    """Return the previous run's record, or None on a first run."""
    if not path.exists():
        return None
    data = _read_json(path)
    try:
        return CacheRecord.model_validate(data)
    except ValidationError as e:
        raise StorageError(f"Malformed cache record in {path}: {e}") from e


def save_cache(path: Path, record: CacheRecord) -> None:
    _write_json(path, record.model_dump(mode="json", by_alias=True))
    logger.debug(f"Cache written to {path}")


def load_statuses(path: Path) -> Dict[str, Any]:
    """Load the shared status document. A missing file is an empty document."""
    if not path.exists():
        return {}
    data = _read_json(path)
    if not isinstance(data, dict):
        raise StorageError(f"Expected a JSON object in {path}")
    return data


def update_status(path: Path, tracker_id: str, record: TrackerStatusRecord) -> None:
    """Replace one tracker's entry in the shared status document.

    Entries belonging to other trackers are written back untouched.
    """
    with _status_lock:
        statuses = load_statuses(path)
        statuses[tracker_id] = record.model_dump(mode="json")
        _write_json(path, statuses, indent=2)
    logger.debug(f"Status for {tracker_id} written to {path}")
