# foldkeep/persistence/records.py
"""
FoldRecordStore - per-record-id fold ranges.

Each record id owns one document (<record_id>.json). The store keeps the
decoded ranges in memory and tracks which records still need writing:
records set since their last write, and records that never reached disk.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Set

from foldkeep.core.ranges import FoldRange
from foldkeep.persistence.codec import RangeCodec


class FoldRecordStore:
    """
    In-memory fold records for one session.

    Usage:
        store = FoldRecordStore(codec)
        store.load("ab12cd34", text)      # text may be None

        store.set("ab12cd34", ranges)
        text = store.serialize("ab12cd34")
    """

    def __init__(self, codec: Optional[RangeCodec] = None) -> None:
        self._codec = codec or RangeCodec()
        self._records: Dict[str, List[FoldRange]] = {}
        self._dirty: Set[str] = set()
        self._persisted: Set[str] = set()
        self._versions: Dict[str, int] = {}

    def load(self, record_id: str, raw_text: Optional[str]) -> List[FoldRange]:
        """
        Load one record from its document text.

        None means the document does not exist: the record is empty and
        still pending its first write.

        Raises:
            MalformedRecordError: If the text does not decode
        """
        if raw_text is None:
            self._records[record_id] = []
            return []

        ranges = self._codec.decode(raw_text, record_id=record_id)
        self._records[record_id] = ranges
        self._persisted.add(record_id)
        self._dirty.discard(record_id)
        return list(ranges)

    def degrade(self, record_id: str) -> None:
        """
        Treat an unloadable record as empty.

        The document on disk is left alone until a capture replaces it.
        """
        self._records[record_id] = []
        self._persisted.add(record_id)
        self._dirty.discard(record_id)

    def get(self, record_id: str) -> List[FoldRange]:
        return list(self._records.get(record_id, []))

    def set(self, record_id: str, ranges: Sequence[FoldRange]) -> None:
        """Replace a record's ranges wholesale."""
        self._records[record_id] = list(ranges)
        self._versions[record_id] = self._versions.get(record_id, 0) + 1
        self._dirty.add(record_id)

    def serialize(self, record_id: str) -> str:
        return self._codec.encode(self.get(record_id))

    def pending(self, record_ids: Iterable[str]) -> List[str]:
        """Record ids among `record_ids` that need writing, in the given order."""
        return [
            rid
            for rid in dict.fromkeys(record_ids)
            if rid in self._dirty or rid not in self._persisted
        ]

    def version(self, record_id: str) -> int:
        """Counter bumped by every set(); snapshot it before writing."""
        return self._versions.get(record_id, 0)

    def mark_persisted(self, record_id: str, version: Optional[int] = None) -> None:
        """
        Record that `record_id` reached disk.

        With `version`, the record stays pending if it was set again after
        that version was serialized.
        """
        self._persisted.add(record_id)
        if version is None or version == self.version(record_id):
            self._dirty.discard(record_id)

    def record_ids(self) -> List[str]:
        return list(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["FoldRecordStore"]
