# foldkeep/config/loader.py
"""
Layered settings loading for foldkeep.

This module implements the settings merge strategy:
    1. Package defaults (foldkeep/config/defaults.yaml) - always loaded
    2. Project overrides ("persistence" object in .js-folds/config.json)

The result is a validated FoldSettings where every value is guaranteed to
exist.

Usage:
    from foldkeep.config.loader import load_settings, parse_config_document

    config = parse_config_document(text)   # {} for an empty document
    settings = load_settings(config)
    settings.record_id_length
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from foldkeep.config.schema import FoldSettings
from foldkeep.core.exceptions import ConfigError
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import CONFIG

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

# Keys a project may override from config.json. The file names cannot be
# overridden there since they are needed to find config.json itself.
OVERRIDABLE_KEYS = frozenset({"record_id_length", "indent"})


# =============================================================================
# Deep Merge
# =============================================================================


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Values from `override` take precedence over `base`.
    Nested dicts are merged recursively.
    Lists are replaced entirely (not merged).

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


# =============================================================================
# Loading Functions
# =============================================================================


def load_defaults(path: Path = DEFAULTS_PATH) -> dict[str, Any]:
    """
    Load package defaults.

    Raises:
        ConfigError: If the defaults file is missing or not a mapping
    """
    if not path.exists():
        raise ConfigError(f"Package defaults not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in package defaults: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError("Package defaults must be a mapping")

    return raw.get("persistence", {}) or {}


def parse_config_document(text: Optional[str]) -> dict[str, Any]:
    """
    Parse the freeform config.json document.

    Empty or missing text is an empty config.

    Raises:
        ConfigError: If the text is not a JSON object
    """
    if text is None or not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"config.json is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("config.json root must be an object")

    return data


def _project_overrides(config: dict[str, Any]) -> dict[str, Any]:
    section = config.get("persistence")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError("config.json 'persistence' must be an object")

    ignored = sorted(set(section) - OVERRIDABLE_KEYS)
    if ignored:
        logger.debug(f"{CONFIG} Ignoring non-overridable keys: {', '.join(ignored)}")

    return {k: v for k, v in section.items() if k in OVERRIDABLE_KEYS}


def load_settings(config: Optional[dict[str, Any]] = None) -> FoldSettings:
    """
    Load settings: package defaults merged with project overrides.

    Args:
        config: Parsed config.json contents, or None for defaults only

    Raises:
        ConfigError: If overrides are malformed or fail validation
    """
    merged = load_defaults()
    if config:
        merged = deep_merge(merged, _project_overrides(config))

    try:
        settings = FoldSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid persistence settings: {e}") from e

    logger.debug(f"{CONFIG} Loaded settings: {settings.model_dump()}")
    return settings


__all__ = [
    "OVERRIDABLE_KEYS",
    "deep_merge",
    "load_defaults",
    "parse_config_document",
    "load_settings",
]
