"""
foldkeep - Persistent code-folding state for editor sessions.

foldkeep remembers which regions of a file were collapsed when an editor
session ends and re-collapses them the next time the file is opened.

Public API:
    Core Types:
        - Point: (row, column) position in a buffer
        - FoldRange: Start/end pair of Points

    Persistence:
        - PersistenceCoordinator: Load/apply/capture/flush lifecycle
        - FoldSession: In-memory state for one activation
        - RangeCodec, IdentityRegistry, FoldRecordStore, CaptureEngine

Architecture:
    foldkeep/
    ├── core/          # Data model, paths, host protocols, errors
    ├── config/        # Package defaults + config.json overrides
    ├── logging/       # Logger setup and subsystem tags
    ├── storage/       # Async UTF-8 document I/O
    ├── persistence/   # Codec, registry, store, capture, coordinator
    └── cli/           # foldkeep init / show / doctor

Examples:
    >>> from foldkeep import PersistenceCoordinator
    >>> coordinator = PersistenceCoordinator(workspace)
    >>> await coordinator.initialize("/path/to/project")
    >>> await coordinator.on_session_end()
"""

from __future__ import annotations

from foldkeep.core.exceptions import (
    ConfigError,
    FoldKeepError,
    IdentityLoadError,
    MalformedRecordError,
    SetupError,
    WriteError,
)
from foldkeep.core.ranges import FoldRange, Point
from foldkeep.persistence.capture import CaptureEngine
from foldkeep.persistence.codec import RangeCodec
from foldkeep.persistence.coordinator import CoordinatorState, PersistenceCoordinator
from foldkeep.persistence.records import FoldRecordStore
from foldkeep.persistence.registry import IdentityRegistry
from foldkeep.persistence.session import FlushResult, FoldSession

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core types
    "Point",
    "FoldRange",
    # Persistence
    "RangeCodec",
    "IdentityRegistry",
    "FoldRecordStore",
    "CaptureEngine",
    "PersistenceCoordinator",
    "CoordinatorState",
    "FoldSession",
    "FlushResult",
    # Errors
    "FoldKeepError",
    "SetupError",
    "IdentityLoadError",
    "MalformedRecordError",
    "WriteError",
    "ConfigError",
]
