# foldkeep/persistence/codec.py
"""
RangeCodec - FoldRange sequences to and from JSON text.

Wire format (one record document):
    [
      {"start": {"row": 0, "column": 0}, "end": {"row": 4, "column": 1}},
      ...
    ]

Decoding validates every element; anything that is not an array of
well-formed ranges raises MalformedRecordError.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from foldkeep.core.exceptions import MalformedRecordError
from foldkeep.core.ranges import FoldRange

_RANGE_LIST = TypeAdapter(List[FoldRange])


class RangeCodec:
    """
    Encodes and decodes fold record documents.

    Pure: no I/O, no state beyond the output indent.
    """

    def __init__(self, indent: Optional[int] = None) -> None:
        self._indent = indent

    def encode(self, ranges: Sequence[FoldRange]) -> str:
        """Encode ranges as a JSON array. Empty input gives "[]"."""
        payload = [r.model_dump(mode="json") for r in ranges]
        if self._indent is None:
            return json.dumps(payload, separators=(",", ":"))
        return json.dumps(payload, indent=self._indent)

    def decode(self, text: str, record_id: Optional[str] = None) -> List[FoldRange]:
        """
        Decode a JSON array of ranges, preserving order.

        Raises:
            MalformedRecordError: If the text is not a valid range array
        """
        try:
            return _RANGE_LIST.validate_json(text)
        except ValidationError as e:
            raise MalformedRecordError(
                f"Invalid fold record: {e.error_count()} error(s), first: {e.errors()[0]['msg']}",
                record_id=record_id,
            ) from e


__all__ = ["RangeCodec"]
