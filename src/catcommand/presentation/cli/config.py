"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

_DEFAULT_TICK_INTERVAL = 1.0
_DEFAULT_LOG_LINES = 10


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "CatCommand"
        return Path.home() / "CatCommand"
    return Path.home() / ".config" / "cat_command"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def default_config() -> Dict[str, Any]:
    return {"tick_interval_seconds": _DEFAULT_TICK_INTERVAL, "log_lines": _DEFAULT_LOG_LINES}


def _normalize_tick_interval(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _DEFAULT_TICK_INTERVAL
    return max(0.0, float(value))


def _normalize_log_lines(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return _DEFAULT_LOG_LINES
    return max(1, value)


def _normalize(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "tick_interval_seconds": _normalize_tick_interval(raw.get("tick_interval_seconds")),
        "log_lines": _normalize_log_lines(raw.get("log_lines")),
    }


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return _normalize(raw)

