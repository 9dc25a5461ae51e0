"""Load settings and env configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobmate.log import get_logger

log = get_logger(__name__)

load_dotenv()

CONFIG_DIR: Path = Path(__file__).resolve().parent.parent / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
REPORTS_DIR: Path = Path(__file__).resolve().parent.parent / "reports"
DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"

DEFAULT_SETTINGS: dict[str, Any] = {
    "matching": {
        "max_distance_km": 50,
        "reputation_min_jobs": 10,
        "min_score": 20,
        "top_matches": 3,
    },
    "assistant": {
        "default_proactivity": 2,
        "relevance_limits": {1: 2, 2: 4, 3: 6},
        "memory_log_limit": 50,
    },
    "pricing": {
        "default_hours": 40,
    },
    "llm": {
        "model": "llama-3.3-70b-versatile",
    },
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Built-in defaults overlaid with config/settings.yaml when present."""
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    path = path or SETTINGS_PATH
    if not path.exists():
        return settings

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
        return settings

    # YAML keys for the proactivity limits arrive as ints already; normalize
    # quoted keys ("1": 2) as well.
    limits = (data.get("assistant") or {}).get("relevance_limits")
    if isinstance(limits, dict):
        data["assistant"]["relevance_limits"] = {int(k): int(v) for k, v in limits.items()}

    return _merge(settings, data)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def ensure_dirs() -> None:
    for d in (REPORTS_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
