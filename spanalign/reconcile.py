"""Coalesce overlapping spans into a canonical disjoint cover.

Responses the system links into one cluster each cite their own predicate
justifications, which typically repeat or overlap. `RangeReconciler.merge`
turns any collection of spans into the minimal set of disjoint ranges covering
exactly the same offsets: ranges that overlap or touch are joined, and the
result is sorted by start offset. The output does not depend on input order,
and merging an already merged set returns it unchanged.
"""

from __future__ import annotations

from typing import Iterable

from spanalign.offsets import OffsetRange
from spanalign.response import ResponseSet, SystemResponse


class RangeReconciler:
    """Interval-union operations over offset ranges. Stateless."""

    @staticmethod
    def merge(spans: Iterable[OffsetRange]) -> tuple[OffsetRange, ...]:
        """Return the minimal disjoint cover of `spans`, sorted by start.

        Empty ranges cover no offsets and are ignored.

        Example:
            ```python
            RangeReconciler.merge([OffsetRange.of(0, 5), OffsetRange.of(4, 9), OffsetRange.of(20, 25)])
            # (OffsetRange(start=0, end=9), OffsetRange(start=20, end=25))
            ```
        """
        ordered = sorted((s for s in spans if not s.is_empty()), key=OffsetRange.as_tuple)
        merged: list[OffsetRange] = []
        for span in ordered:
            if merged and merged[-1].is_connected(span):
                merged[-1] = merged[-1].span(span)
            else:
                merged.append(span)
        return tuple(merged)

    @classmethod
    def merge_predicate_justifications(
        cls,
        responses: ResponseSet | Iterable[SystemResponse],
    ) -> tuple[OffsetRange, ...]:
        """Combine the predicate justifications of every response in a linked cluster."""
        if isinstance(responses, ResponseSet):
            return cls.merge(responses.predicate_justifications())
        return cls.merge(span for response in responses for span in response.predicate_justifications)
