# foldkeep/persistence/__init__.py
"""
Fold-state persistence engine.

Components (leaves first):
- codec: FoldRange sequences <-> JSON text
- registry: file identity -> record id
- records: record id -> fold ranges
- capture: live buffers <-> record store
- session: one activation's state, bulk load and flush
- coordinator: lifecycle state machine wired to the host
"""

from foldkeep.persistence.capture import CaptureEngine, dedupe
from foldkeep.persistence.codec import RangeCodec
from foldkeep.persistence.coordinator import CoordinatorState, PersistenceCoordinator
from foldkeep.persistence.records import FoldRecordStore
from foldkeep.persistence.registry import IdentityRegistry, generate_record_id
from foldkeep.persistence.session import FlushResult, FoldSession, open_session

__all__ = [
    "RangeCodec",
    "IdentityRegistry",
    "generate_record_id",
    "FoldRecordStore",
    "CaptureEngine",
    "dedupe",
    "FoldSession",
    "FlushResult",
    "open_session",
    "PersistenceCoordinator",
    "CoordinatorState",
]
