# foldkeep/persistence/capture.py
"""
CaptureEngine - live fold state in and out of editor buffers.

capture: buffers -> (dedupe) -> FoldRecordStore
apply:   FoldRecordStore ranges -> buffer fold primitive
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from pydantic import ValidationError

from foldkeep.core.host import EditorBuffer
from foldkeep.core.ranges import FoldRange
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import CAPTURE
from foldkeep.persistence.records import FoldRecordStore
from foldkeep.persistence.registry import IdentityRegistry

logger = get_logger(__name__)


def dedupe(ranges: Iterable[FoldRange]) -> List[FoldRange]:
    """
    Drop exact duplicates, keeping first-occurrence order.

    Only identical ranges collapse; nested or overlapping ranges are kept.
    """
    seen = set()
    unique: List[FoldRange] = []
    for fold in ranges:
        if fold in seen:
            continue
        seen.add(fold)
        unique.append(fold)
    return unique


class CaptureEngine:
    """Moves fold state between open buffers and the record store."""

    def __init__(self, registry: IdentityRegistry, store: FoldRecordStore) -> None:
        self._registry = registry
        self._store = store

    def read_buffer(self, buffer: EditorBuffer) -> List[FoldRange]:
        """
        Deduplicated folded ranges currently shown in `buffer`.

        Ranges the host reports with negative or reversed coordinates are
        skipped with a warning.
        """
        folds: List[FoldRange] = []
        for start, end in buffer.folded_ranges():
            try:
                folds.append(FoldRange.from_pairs(start, end))
            except ValidationError as e:
                logger.warning(
                    f"{CAPTURE} Skipping invalid fold {start}-{end} on "
                    f"{buffer.get_path()}: {e.errors()[0]['msg']}"
                )
        return dedupe(folds)

    def capture(self, buffers: Iterable[EditorBuffer]) -> Dict[str, List[FoldRange]]:
        """
        Record the live folds of every buffer that has a path.

        Assigns record ids to paths seen for the first time. Each captured
        record replaces whatever the store held for it.

        Returns:
            Record id -> captured ranges
        """
        captured: Dict[str, List[FoldRange]] = {}
        for buffer in buffers:
            identity = buffer.get_path()
            if not identity:
                continue

            record_id = self._registry.ensure(identity)
            ranges = self.read_buffer(buffer)
            self._store.set(record_id, ranges)
            captured[record_id] = ranges

        logger.debug(f"{CAPTURE} Captured {len(captured)} buffer(s)")
        return captured

    def apply(self, buffer: EditorBuffer, ranges: Sequence[FoldRange]) -> int:
        """
        Fold each range on `buffer`, in order.

        Returns:
            Number of ranges handed to the buffer
        """
        for fold in ranges:
            start, end = fold.as_pairs()
            buffer.fold_range(start, end)
        return len(ranges)

    def restore(self, buffer: EditorBuffer) -> int:
        """Apply the stored folds for `buffer`'s path, if it has any."""
        identity = buffer.get_path()
        if not identity:
            return 0

        record_id = self._registry.resolve(identity)
        if record_id is None:
            return 0

        applied = self.apply(buffer, self._store.get(record_id))
        if applied:
            logger.debug(f"{CAPTURE} Restored {applied} fold(s) on {identity}")
        return applied


__all__ = ["CaptureEngine", "dedupe"]
