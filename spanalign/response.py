"""System responses: the extraction output being aligned against the reference.

A `SystemResponse` is one asserted event argument. The aligner only looks at
its `base_filler`; the justification spans are consumed by the reconciler
when responses linked into one cluster are combined.
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, Field

from spanalign.offsets import OffsetRange


class SystemResponse(BaseModel, frozen=True):
    """A candidate event argument reported by an extraction system.

    Attributes:
        response_id: System-assigned identifier.
        document_id: Document the response was extracted from.
        event_type: Event type, e.g. "Conflict.Attack".
        role: Argument role, e.g. "Attacker".
        realis: "Actual", "Generic" or "Other".
        canonical_argument_string: Normalized argument text.
        base_filler: Span the system asserts as the argument filler.
        canonical_argument_span: Span of the canonical argument string, if different.
        predicate_justifications: Spans justifying the event predicate.
        additional_argument_justifications: Extra spans justifying the argument.
        confidence: System confidence in [0, 1].
    """

    response_id: str = Field(description="System-assigned response identifier.")
    document_id: str = Field(description="Document the response was extracted from.")
    event_type: str = Field(description="Event type of the asserted argument.")
    role: str = Field(description="Argument role.")
    realis: str | None = Field(default=None, description="Realis label.")
    canonical_argument_string: str | None = Field(default=None, description="Normalized argument text.")
    base_filler: OffsetRange = Field(description="Span asserted as the argument filler.")
    canonical_argument_span: OffsetRange | None = Field(default=None, description="Span of the canonical argument.")
    predicate_justifications: tuple[OffsetRange, ...] = Field(
        default=(),
        description="Spans justifying the event predicate.",
    )
    additional_argument_justifications: tuple[OffsetRange, ...] = Field(
        default=(),
        description="Additional spans justifying the argument.",
    )
    confidence: float = Field(default=1.0, ge=0.0, le=1.0, description="System confidence.")


class ResponseSet(BaseModel, frozen=True):
    """A linked cluster: responses the system asserts describe one event frame."""

    response_set_id: str = Field(description="Identifier of the linked cluster.")
    responses: tuple[SystemResponse, ...] = Field(default=(), description="Member responses.")

    def predicate_justifications(self) -> Iterator[OffsetRange]:
        """Yield the predicate justifications of every member, in member order."""
        for response in self.responses:
            yield from response.predicate_justifications
