# foldkeep/core/ranges.py
"""
Fold ranges - Core data model for foldkeep.

A fold is a collapsed region of a text buffer. It is stored as a pair of
(row, column) positions. Both models are frozen so they can be hashed and
compared by value, which is what capture-time deduplication relies on.

This module provides:
- Point: A (row, column) buffer position
- FoldRange: The canonical Pydantic model for one folded region
- PointPair: The plain tuple form the host editor speaks
"""

from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_validator

PointPair = Tuple[int, int]


class Point(BaseModel):
    """A zero-based (row, column) position in a buffer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    row: StrictInt = Field(..., ge=0, description="Zero-based row")
    column: StrictInt = Field(..., ge=0, description="Zero-based column")

    def as_pair(self) -> PointPair:
        return (self.row, self.column)

    def __lt__(self, other: "Point") -> bool:
        return self.as_pair() < other.as_pair()

    def __le__(self, other: "Point") -> bool:
        return self.as_pair() <= other.as_pair()


class FoldRange(BaseModel):
    """
    One folded region of a buffer.

    Invariant: start <= end in document order (row first, then column).
    Two ranges are equal iff all four coordinates match.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: Point = Field(..., description="Start of the folded region")
    end: Point = Field(..., description="End of the folded region")

    @model_validator(mode="after")
    def check_order(self) -> "FoldRange":
        if self.end < self.start:
            raise ValueError(
                f"fold start {self.start.as_pair()} is after end {self.end.as_pair()}"
            )
        return self

    @classmethod
    def from_pairs(cls, start: PointPair, end: PointPair) -> "FoldRange":
        """Build a FoldRange from two (row, column) tuples."""
        return cls(
            start=Point(row=start[0], column=start[1]),
            end=Point(row=end[0], column=end[1]),
        )

    def as_pairs(self) -> Tuple[PointPair, PointPair]:
        """Return ((start_row, start_col), (end_row, end_col))."""
        return (self.start.as_pair(), self.end.as_pair())

    def __str__(self) -> str:
        return (
            f"({self.start.row},{self.start.column})-"
            f"({self.end.row},{self.end.column})"
        )


__all__ = ["Point", "FoldRange", "PointPair"]
