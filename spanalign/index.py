"""Offset-keyed indexes built once per reference document.

- `RangeIndex` groups annotations under the exact range a selector picks for
  them (extent or head). Several annotations may share one key, for example
  coreferent mentions annotated with identical boundaries; they are kept in
  encounter order.
- `OverlappingRangeSet` answers "does any indexed range overlap / enclose /
  lie inside this query" in O(log n) using a start-sorted array with running
  end bounds. It is a short-circuit structure: a positive answer only means a
  candidate may exist, which the matcher then verifies range by range.

Neither structure exposes a mutator; both are safe to share between threads
once built.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from spanalign.errors import AnnotationIntegrityError
from spanalign.offsets import OffsetRange

T = TypeVar("T")


def check_range(offsets: OffsetRange, owner: object) -> OffsetRange:
    """Re-verify range invariants for data that may have skipped validation.

    Models created with `model_construct` bypass Pydantic validators, so
    index construction checks every key it is given.
    """
    if offsets.start < 0 or offsets.start > offsets.end:
        raise AnnotationIntegrityError(f"Malformed range {offsets!r} on {owner!r}")
    return offsets


class RangeIndex(Generic[T]):
    """Multi-valued map from an exact `OffsetRange` to the annotations at it.

    Example:
        ```python
        by_extent = RangeIndex.build(doc.iter_mentions(), lambda m: m.extent)
        by_extent.exact_matches(OffsetRange.of(10, 20))
        ```
    """

    def __init__(self, entries: dict[OffsetRange, tuple[T, ...]]) -> None:
        self._entries = entries

    @classmethod
    def build(
        cls,
        annotations: Iterable[T],
        key_selector: Callable[[T], OffsetRange | None],
    ) -> "RangeIndex[T]":
        """Index `annotations` by the range `key_selector` returns for each.

        Annotations for which the selector returns None (e.g. mentions with
        no declared head) are left out of the index.

        Raises:
            AnnotationIntegrityError: If a selected range is malformed.
        """
        grouped: dict[OffsetRange, list[T]] = {}
        for annotation in annotations:
            key = key_selector(annotation)
            if key is None:
                continue
            check_range(key, annotation)
            grouped.setdefault(key, []).append(annotation)
        return cls({key: tuple(values) for key, values in grouped.items()})

    def exact_matches(self, offsets: OffsetRange) -> tuple[T, ...]:
        """Return the annotations keyed at exactly `offsets` (empty if none)."""
        return self._entries.get(offsets, ())

    def keys(self) -> Iterator[OffsetRange]:
        return iter(self._entries)

    def __contains__(self, offsets: object) -> bool:
        return offsets in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class OverlappingRangeSet:
    """Set of ranges supporting logarithmic overlap and enclosure queries.

    Ranges are sorted by start. A prefix maximum of end offsets answers
    "does any range starting before X reach past Y", and a suffix minimum of
    end offsets answers "does any range starting at or after X stop by Y".
    Empty ranges cover no offsets, so they are kept out of overlap queries
    but still take part in enclosure queries.
    """

    def __init__(self, ranges: Iterable[OffsetRange]) -> None:
        ordered = sorted(set(ranges), key=OffsetRange.as_tuple)
        self._ranges: tuple[OffsetRange, ...] = tuple(ordered)
        self._starts = [r.start for r in ordered]

        self._prefix_max_end: list[int] = []
        running = -1
        for r in ordered:
            running = max(running, r.end)
            self._prefix_max_end.append(running)

        self._suffix_min_end: list[int] = [0] * len(ordered)
        running_min: int | None = None
        for i in range(len(ordered) - 1, -1, -1):
            end = ordered[i].end
            running_min = end if running_min is None else min(running_min, end)
            self._suffix_min_end[i] = running_min

        non_empty = [r for r in ordered if not r.is_empty()]
        self._non_empty_starts = [r.start for r in non_empty]
        self._non_empty_prefix_max_end: list[int] = []
        running = -1
        for r in non_empty:
            running = max(running, r.end)
            self._non_empty_prefix_max_end.append(running)

    @classmethod
    def build(cls, ranges: Iterable[OffsetRange]) -> "OverlappingRangeSet":
        return cls(ranges)

    def overlaps_any(self, query: OffsetRange) -> bool:
        """True if some contained range shares at least one offset with `query`."""
        if query.is_empty():
            return False
        # non-empty ranges starting before query.end are the only candidates
        idx = bisect_left(self._non_empty_starts, query.end)
        return idx > 0 and self._non_empty_prefix_max_end[idx - 1] > query.start

    def encloses_any(self, query: OffsetRange) -> bool:
        """True if some contained range encloses `query`."""
        idx = bisect_right(self._starts, query.start)
        return idx > 0 and self._prefix_max_end[idx - 1] >= query.end

    def enclosed_by_any(self, query: OffsetRange) -> bool:
        """True if some contained range lies entirely within `query`."""
        idx = bisect_left(self._starts, query.start)
        return idx < len(self._ranges) and self._suffix_min_end[idx] <= query.end

    def __contains__(self, offsets: object) -> bool:
        if not isinstance(offsets, OffsetRange):
            return False
        idx = bisect_left(self._starts, offsets.start)
        while idx < len(self._ranges) and self._ranges[idx].start == offsets.start:
            if self._ranges[idx] == offsets:
                return True
            idx += 1
        return False

    def __iter__(self) -> Iterator[OffsetRange]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)
