from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .errors import ConfigError

CONFIG_ENV_VAR = "TODO_MCP_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "name": "TodoApp MCP Server",
        "version": "0.1.0",
        "log_level": "INFO",
    },
    "clock": {
        "timezone": "Asia/Tokyo",
    },
    "security": {
        "auth": {"mode": "none"},
    },
}


def load_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"TodoApp MCP server config not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if value is None and isinstance(merged.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Build the effective server config.

    Precedence (lowest to highest): built-in defaults, YAML file (explicit
    ``path`` or ``$TODO_MCP_CONFIG``), ``TODO_MCP_LOG_LEVEL`` and
    ``TODO_MCP_TIMEZONE`` environment variables.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
        path = Path(env_path) if env_path else None
    if path is not None:
        config = _merge(config, load_config(path))

    log_level = os.getenv("TODO_MCP_LOG_LEVEL", "").strip()
    if log_level:
        config["server"]["log_level"] = log_level
    tz_name = os.getenv("TODO_MCP_TIMEZONE", "").strip()
    if tz_name:
        config["clock"]["timezone"] = tz_name

    return config


def get_timezone(config: Dict[str, Any]) -> ZoneInfo:
    clock_cfg = config.get("clock", {}) or {}
    tz_name = str(clock_cfg.get("timezone", DEFAULT_CONFIG["clock"]["timezone"]))
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone '{tz_name}'") from exc
