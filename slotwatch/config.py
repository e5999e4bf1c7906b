"""
Configuration loading.

config.json example:

    {
      "targets": [
        {
          "facility": "富山県総合体育センター",
          "room": "大アリーナ全面",
          "date": "2026-11-03",
          "time_slots": ["9:00", "10:00", "13:00"]
        }
      ],
      "screenshot_dir": "./screenshots",
      "delay_seconds": 1.0
    }

Environment variables (all optional):
- SLOTWATCH_BASE_URL       top page of the reservation site
- SLOTWATCH_CHROMIUM_PATH  browser binary for managed runtimes
- SLOTWATCH_CDP_URL        attach to a running browser instead of launching one
- SLOTWATCH_LOG_LEVEL      logging level name (default INFO)
- SLOTWATCH_STORE          target store used by "slotwatch pending"
"""

from __future__ import annotations

import json
import os
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional

from slotwatch.model import Config, Target


DEFAULT_BASE_URL = "https://k4.p-kashikan.jp/toyama-pref/"
DEFAULT_SCREENSHOT_DIR = "screenshots"
DEFAULT_DELAY_SECONDS = 1.0
DEFAULT_STORE = "targets.json"


class ConfigError(ValueError):
    """Raised when the config file is missing or malformed."""


def base_url(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return env.get("SLOTWATCH_BASE_URL", "").strip() or DEFAULT_BASE_URL


def log_level(env: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return (env.get("SLOTWATCH_LOG_LEVEL", "").strip() or "INFO").upper()


def default_store_path(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    return Path(env.get("SLOTWATCH_STORE", "").strip() or DEFAULT_STORE)


def parse_target(raw: Any, index: int = 0) -> Target:
    """
    Build a Target from one JSON object. Raises ConfigError on bad fields.
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"targets[{index}] must be an object")

    values = {}
    for key in ("facility", "room", "date"):
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigError(f"targets[{index}].{key} is required")
        values[key] = value.strip()

    try:
        date.fromisoformat(values["date"])
    except ValueError:
        raise ConfigError(f"targets[{index}].date must be YYYY-MM-DD: {values['date']!r}") from None

    times = raw.get("time_slots")
    if not isinstance(times, list) or not times:
        raise ConfigError(f"targets[{index}].time_slots must be a non-empty list")

    target_id = raw.get("id")
    return Target(
        facility=values["facility"],
        room=values["room"],
        date=values["date"],
        time_slots=tuple(str(t).strip() for t in times if str(t).strip()),
        target_id=str(target_id) if target_id is not None else None,
    )


def load_config(path: str | Path, cwd: Optional[Path] = None) -> Config:
    """
    Load and validate config.json.

    Unlike the target store, a broken config is an error: there is nothing
    sensible to monitor without it.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config root must be an object")

    raw_targets = data.get("targets")
    if not isinstance(raw_targets, list):
        raise ConfigError("'targets' must be a list")

    targets = [parse_target(t, i) for i, t in enumerate(raw_targets)]

    # relative screenshot dirs are resolved against the working directory
    screenshot_dir = Path(str(data.get("screenshot_dir") or DEFAULT_SCREENSHOT_DIR))
    if not screenshot_dir.is_absolute():
        screenshot_dir = (cwd or Path.cwd()) / screenshot_dir

    try:
        delay = float(data.get("delay_seconds", DEFAULT_DELAY_SECONDS))
    except (TypeError, ValueError):
        raise ConfigError("'delay_seconds' must be a number") from None

    return Config(targets=targets, screenshot_dir=screenshot_dir, delay_seconds=max(0.0, delay))
