"""
Persistent target store for unattended runs.

This module manages a JSON file (default: targets.json) holding monitoring
targets together with a "checked" flag:

    {
      "targets": [
        {
          "id": "t1",
          "facility": "...",
          "room": "...",
          "date": "2026-11-03",
          "time_slots": ["9:00"],
          "checked": false
        }
      ]
    }

Once availability is found for a record it is flagged (checked = true,
found_slots, found_at, updated_at) and skipped on later runs.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional

from slotwatch.config import ConfigError, parse_target
from slotwatch.model import Target

logger = logging.getLogger(__name__)


def _load_records(path: Path) -> list[dict[str, Any]]:
    """
    Return the raw target records, or [] if the file is missing or invalid.
    """
    if not path.exists():
        return []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Cannot read target store %s: %s", path, e)
        return []

    records = data.get("targets") if isinstance(data, dict) else None
    if not isinstance(records, list):
        return []
    return [r for r in records if isinstance(r, dict)]


def _save_records(path: Path, records: list[dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {"targets": records}
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def load_pending_targets(path: str | Path) -> List[Target]:
    """
    Load all targets that have not been flagged as found yet.

    Broken records are skipped with a warning instead of failing the run.
    """
    targets: List[Target] = []
    for i, record in enumerate(_load_records(Path(path))):
        if record.get("checked") is True:
            continue
        if record.get("id") is None:
            logger.warning("Skipping target store record %d without id", i)
            continue
        try:
            targets.append(parse_target(record, i))
        except ConfigError as e:
            logger.warning("Skipping invalid target store record: %s", e)
    return targets


def mark_as_found(
    path: str | Path,
    target_id: str,
    found_slots: Iterable[str],
    now: Optional[datetime] = None,
) -> bool:
    """
    Flag one record as found. Returns False if no record has this id.
    """
    store_path = Path(path)
    records = _load_records(store_path)
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    slots = list(found_slots)

    updated = False
    for record in records:
        if str(record.get("id")) != str(target_id):
            continue
        record["checked"] = True
        record["found_slots"] = list(slots)
        record["found_at"] = stamp
        record["updated_at"] = stamp
        updated = True

    if updated:
        _save_records(store_path, records)
    return updated
