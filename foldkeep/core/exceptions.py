# foldkeep/core/exceptions.py
"""
All exceptions for foldkeep.

Hierarchy:
    FoldKeepError
    ├── SetupError - Persistence directory missing (session scope)
    ├── IdentityLoadError - Mapping document unreadable/malformed (session scope)
    ├── MalformedRecordError - One fold record unreadable/malformed (record scope)
    ├── WriteError - A flush write failed (record scope)
    └── ConfigError - Settings or config.json invalid

Session-scoped errors stop initialization. Record-scoped errors degrade a
single document and never escalate.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class FoldKeepError(Exception):
    """Base error for foldkeep."""

    scope = "session"


# =============================================================================
# Session Errors
# =============================================================================


class SetupError(FoldKeepError):
    """Persistence directory is missing or no project root is available."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (path: {path})"
        super().__init__(message)


class IdentityLoadError(FoldKeepError):
    """The identity mapping document could not be read or parsed."""

    pass


# =============================================================================
# Record Errors
# =============================================================================


class MalformedRecordError(FoldKeepError):
    """A fold record document is not a valid encoded range array."""

    scope = "record"

    def __init__(self, message: str, record_id: Optional[str] = None):
        self.record_id = record_id
        if record_id:
            message = f"{message} (record: {record_id})"
        super().__init__(message)


class WriteError(FoldKeepError):
    """Writing a persisted document failed."""

    scope = "record"

    def __init__(self, message: str, document: Optional[str] = None):
        self.document = document
        if document:
            message = f"{message} (document: {document})"
        super().__init__(message)


# =============================================================================
# Config Errors
# =============================================================================


class ConfigError(FoldKeepError):
    """Configuration error."""

    pass


__all__ = [
    "FoldKeepError",
    # Session
    "SetupError",
    "IdentityLoadError",
    # Record
    "MalformedRecordError",
    "WriteError",
    # Config
    "ConfigError",
]
