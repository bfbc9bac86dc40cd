# foldkeep/config/schema.py
"""
Settings schema for foldkeep.

Defines the Pydantic model validated from defaults.yaml merged with
config.json overrides.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from foldkeep.core.paths import DEFAULT_CONFIG_FILE, DEFAULT_DIRECTORY, DEFAULT_MAPPING_FILE


class FoldSettings(BaseModel):
    """Persistence settings for one session."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    directory: str = Field(default=DEFAULT_DIRECTORY, description="Persistence directory name")
    config_file: str = Field(default=DEFAULT_CONFIG_FILE, description="Config document name")
    mapping_file: str = Field(default=DEFAULT_MAPPING_FILE, description="Identity mapping name")
    record_id_length: int = Field(default=8, ge=4, le=32, description="Generated record id length")
    indent: Optional[int] = Field(default=None, ge=0, le=8, description="JSON indent, None for compact")


__all__ = ["FoldSettings"]
