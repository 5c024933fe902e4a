"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Layer merging (user -> project -> explicit file -> environment)
- Conversion from dict to the typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from refactorizer.config.paths import get_config_paths
from refactorizer.config.schema import Config, LoggingConfig, StoreConfig

_log = logging.getLogger("refactorizer.config")

_cached_config: Config | None = None

_KNOWN_SECTIONS = {"logging", "store"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning an empty dict if missing or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        if data is not None:
            _log.warning("Ignoring %s: top level is not a mapping", path)
        return {}
    return data


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge config layers, later layers winning.

    Nested mappings merge key by key, lists and scalars are replaced, and a
    ``None`` value never overrides what an earlier layer set.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _merge_two(merged, layer)
    return merged


def _merge_two(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = _merge_two(current, value)
        else:
            result[key] = value
    return result


def env_overrides() -> dict[str, Any]:
    """Build a config layer from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("REFACTORIZER_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    history_limit = os.environ.get("REFACTORIZER_HISTORY_LIMIT")
    if history_limit:
        try:
            overrides.setdefault("store", {})["history_limit"] = int(history_limit)
        except ValueError:
            _log.warning("Ignoring non-integer REFACTORIZER_HISTORY_LIMIT=%r", history_limit)

    return overrides


def _int_setting(section: dict[str, Any], key: str, default: int | None) -> int | None:
    value = section.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        _log.warning("Ignoring non-integer %s=%r, using %r", key, value, default)
        return default


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged dict to the typed Config dataclass."""
    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=_int_setting(log_data, "verbose", None),
        file=log_data.get("file"),
    )

    store_data = data.get("store") or {}
    store = StoreConfig(
        history_limit=max(0, _int_setting(store_data, "history_limit", 100) or 0),
        log_transitions=bool(store_data.get("log_transitions", True)),
    )

    extra = {k: v for k, v in data.items() if k not in _KNOWN_SECTIONS}

    return Config(logging=logging_config, store=store, extra=extra)


def load_config(
    project_root: str | Path | None = None,
    config_file: str | Path | None = None,
    reload: bool = False,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit config file
    3. Project config (<project_root>/.refactorizer/config.yaml)
    4. User config

    Only the global config (no project root, no explicit file) is cached.
    """
    global _cached_config

    is_global = project_root is None and config_file is None
    if is_global and _cached_config is not None and not reload:
        return _cached_config

    layers: list[dict[str, Any]] = []
    for path in get_config_paths(project_root, config_file):
        data = load_yaml_file(path)
        if data:
            _log.debug("Loaded config from %s", path)
            layers.append(data)

    layers.append(env_overrides())

    config = dict_to_config(merge_layers(*layers))

    if is_global:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it on first use."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads."""
    global _cached_config
    _cached_config = None
