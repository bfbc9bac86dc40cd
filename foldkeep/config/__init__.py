# foldkeep/config/__init__.py
from foldkeep.config.loader import (
    OVERRIDABLE_KEYS,
    deep_merge,
    load_defaults,
    load_settings,
    parse_config_document,
)
from foldkeep.config.schema import FoldSettings

__all__ = [
    "FoldSettings",
    "OVERRIDABLE_KEYS",
    "deep_merge",
    "load_defaults",
    "load_settings",
    "parse_config_document",
]
