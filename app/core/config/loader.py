from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_CONFIG_CACHE: dict[str, dict[str, Any]] = {}
_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"


def config_path(name: str) -> Path:
    return _CONFIG_DIR / f"{name}.yaml"


def get_config(name: str) -> dict[str, Any]:
    """Load repo-level config/<name>.yaml and cache it."""
    cached = _CONFIG_CACHE.get(name)
    if cached is not None:
        return cached

    path = config_path(name)
    if not path.exists():
        raise RuntimeError(
            f"Config not found at '{path}'. Expected file: config/{name}.yaml"
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid config '{path}': expected a top-level mapping.")

    _CONFIG_CACHE[name] = parsed
    return parsed


def get_config_value(name: str, path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'resume.projects.per_hit'."""
    if not path:
        return default

    current: Any = get_config(name)
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def get_scoring_value(path: str, default: Any = None) -> Any:
    return get_config_value("scoring", path, default)


def get_policy_value(path: str, default: Any = None) -> Any:
    return get_config_value("career_policy", path, default)
