# foldkeep/core/__init__.py
"""
Core contracts for foldkeep.

- ranges: Point / FoldRange data model
- host: Protocols for the editor collaborator
- paths: Persistence directory layout
- exceptions: Error hierarchy
"""

from foldkeep.core.exceptions import (
    ConfigError,
    FoldKeepError,
    IdentityLoadError,
    MalformedRecordError,
    SetupError,
    WriteError,
)
from foldkeep.core.host import EditorBuffer, LoggingNotifier, Notifier, Workspace
from foldkeep.core.paths import FoldPaths
from foldkeep.core.ranges import FoldRange, Point

__all__ = [
    "Point",
    "FoldRange",
    "EditorBuffer",
    "Workspace",
    "Notifier",
    "LoggingNotifier",
    "FoldPaths",
    "FoldKeepError",
    "SetupError",
    "IdentityLoadError",
    "MalformedRecordError",
    "WriteError",
    "ConfigError",
]
