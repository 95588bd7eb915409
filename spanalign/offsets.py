"""Character-offset ranges over a document's original text.

An `OffsetRange` is the half-open interval ``[start, end)``. Every annotation,
system span and parse node in spanalign is located by one of these, so the
three predicates defined here (equality, enclosure and overlap) are the
vocabulary the matcher, the indexes and the reconciler are written in.

Ranges are frozen Pydantic models: they hash by value and can be used as
dictionary keys.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class OffsetRange(BaseModel, frozen=True):
    """A half-open ``[start, end)`` interval of character offsets.

    Attributes:
        start: First offset covered by the range.
        end: First offset after the range. ``start == end`` is an empty range.

    Example:
        ```python
        extent = OffsetRange.of(10, 20)
        head = OffsetRange.of(12, 15)
        assert extent.encloses(head)
        ```
    """

    start: int = Field(ge=0, description="First character offset covered by the range.")
    end: int = Field(ge=0, description="Offset one past the last covered character.")

    @model_validator(mode="after")
    def _start_not_after_end(self) -> "OffsetRange":
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after its end {self.end}")
        return self

    @classmethod
    def of(cls, start: int, end: int) -> "OffsetRange":
        """Build a range from its two endpoints."""
        return cls(start=start, end=end)

    @classmethod
    def from_inclusive(cls, start: int, last: int) -> "OffsetRange":
        """Build a range from an inclusive ``[start, last]`` offset pair.

        Several annotation formats record the offset of the final character
        rather than one past it.
        """
        return cls(start=start, end=last + 1)

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def encloses(self, other: "OffsetRange") -> bool:
        """True if every offset of `other` lies within this range."""
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, other: "OffsetRange") -> bool:
        """True if the two ranges share at least one offset.

        An empty range covers no offsets and so overlaps nothing.
        """
        return max(self.start, other.start) < min(self.end, other.end)

    def is_connected(self, other: "OffsetRange") -> bool:
        """True if the ranges overlap or touch end-to-start."""
        return self.start <= other.end and other.start <= self.end

    def span(self, other: "OffsetRange") -> "OffsetRange":
        """Smallest range enclosing both this range and `other`."""
        return OffsetRange(start=min(self.start, other.start), end=max(self.end, other.end))

    def as_tuple(self) -> tuple[int, int]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return f"[{self.start},{self.end})"
