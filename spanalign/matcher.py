"""The alignment decision procedure.

`SpanMatcher` decides whether a system span denotes the same mention as a
reference annotation, given the annotation's extent and optional declared
head. Rules are tried from strictest to loosest and the first one satisfied
wins:

1. **Exact extent**: the extent equals the system span.
2. **Exact head**: the declared head equals the system span.
3. **Containment** (unless exact heads are required): the extent encloses
   the system span. An annotation is assumed to enclose its own head, so
   this accepts without consulting the parse.
4. **Auxiliary head** (only when relaxing with a parse): let ``H`` be the
   parse-derived head of the system span.

   a. The extent or the declared head equals ``H``.
   b. Unless exact heads are required: the extent and ``H`` enclose one
      another (either way round), and the extent and the system span each
      enclose a witness head. The extent's witness is ``H`` or the declared
      head; the system span's witness is ``H`` or the declared head. The two
      witnesses are chosen independently.

Every rule after rule 1 treats the reference and system sides differently, so
the procedure is not symmetric in its arguments.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, Field

from spanalign.errors import AlignmentConfigurationError
from spanalign.offsets import OffsetRange
from spanalign.parse.heads import AuxiliaryHeadResolver

logger = logging.getLogger(__name__)


class MatchRule(str, Enum):
    """The rule that accepted an alignment."""

    EXACT_EXTENT = "exact_extent"
    EXACT_HEAD = "exact_head"
    CONTAINMENT = "containment"
    AUXILIARY_EXACT = "auxiliary_exact"
    AUXILIARY_ENCLOSURE = "auxiliary_enclosure"


class AlignmentPolicy(BaseModel, frozen=True):
    """Strictness settings fixed when an aligner is constructed.

    Attributes:
        use_auxiliary_relaxation: Fall back to the parse-derived head of the
            system span when the reference rules fail. Requires an auxiliary
            document.
        exact_head_only_for_auxiliary: Disable the containment rule and the
            enclosure half of the auxiliary rule, keeping only equalities.
    """

    use_auxiliary_relaxation: bool = Field(
        default=False,
        description="Allow matching through the auxiliary parse head.",
    )
    exact_head_only_for_auxiliary: bool = Field(
        default=False,
        description="Require exact equality instead of containment when relaxing.",
    )

    @classmethod
    def exact(cls) -> "AlignmentPolicy":
        """Exact extent or exact head matches only."""
        return cls(use_auxiliary_relaxation=False, exact_head_only_for_auxiliary=True)

    @classmethod
    def relaxed(cls) -> "AlignmentPolicy":
        """Exact matches plus extent containment, without a parse."""
        return cls(use_auxiliary_relaxation=False, exact_head_only_for_auxiliary=False)

    @classmethod
    def auxiliary(cls, exact_heads: bool = False) -> "AlignmentPolicy":
        """Relax through the auxiliary parse head."""
        return cls(use_auxiliary_relaxation=True, exact_head_only_for_auxiliary=exact_heads)

    @property
    def allows_containment(self) -> bool:
        return not self.exact_head_only_for_auxiliary


class SpanMatcher:
    """Apply an `AlignmentPolicy` to (reference extent, reference head, system span) triples.

    The matcher holds no per-query state; one instance can be shared by any
    number of concurrent queries.

    Raises:
        AlignmentConfigurationError: If the policy asks for auxiliary
            relaxation but no head resolver is given.
    """

    def __init__(self, policy: AlignmentPolicy, head_resolver: AuxiliaryHeadResolver | None = None) -> None:
        if policy.use_auxiliary_relaxation and head_resolver is None:
            raise AlignmentConfigurationError(
                "Auxiliary relaxation was requested but no auxiliary document was supplied"
            )
        self._policy = policy
        self._head_resolver = head_resolver

    @property
    def policy(self) -> AlignmentPolicy:
        return self._policy

    def auxiliary_head(self, system_span: OffsetRange) -> OffsetRange | None:
        """Parse-derived head of `system_span`, or None when relaxation is off or no head exists."""
        if not self._policy.use_auxiliary_relaxation or self._head_resolver is None:
            return None
        return self._head_resolver.head_for(system_span)

    def matches(
        self,
        reference_extent: OffsetRange,
        reference_head: OffsetRange | None,
        system_span: OffsetRange,
    ) -> bool:
        """True if `system_span` aligns with the reference annotation."""
        return self.match_rule(reference_extent, reference_head, system_span) is not None

    def match_rule(
        self,
        reference_extent: OffsetRange,
        reference_head: OffsetRange | None,
        system_span: OffsetRange,
    ) -> MatchRule | None:
        """Return the first rule under which the spans align, or None.

        The parse head of `system_span` is looked up only if rule 4 is reached.

        Args:
            reference_extent: Extent of the reference annotation.
            reference_head: Declared head of the annotation, if any.
            system_span: The system's asserted filler span.
        """
        rule = self._reference_rule(reference_extent, reference_head, system_span)
        if rule is not None or not self._policy.use_auxiliary_relaxation:
            return rule
        parse_head = self.auxiliary_head(system_span)
        if parse_head is None:
            return None
        return self._auxiliary_rule(reference_extent, reference_head, system_span, parse_head)

    def _match_rule_with_head(
        self,
        reference_extent: OffsetRange,
        reference_head: OffsetRange | None,
        system_span: OffsetRange,
        parse_head: OffsetRange | None,
    ) -> MatchRule | None:
        """Like `match_rule`, with the parse head of `system_span` already looked up.

        Callers checking one span against many annotations resolve the head
        once with `auxiliary_head` and pass it here.
        """
        rule = self._reference_rule(reference_extent, reference_head, system_span)
        if rule is not None or not self._policy.use_auxiliary_relaxation or parse_head is None:
            return rule
        return self._auxiliary_rule(reference_extent, reference_head, system_span, parse_head)

    def _reference_rule(
        self,
        reference_extent: OffsetRange,
        reference_head: OffsetRange | None,
        system_span: OffsetRange,
    ) -> MatchRule | None:
        if reference_extent == system_span:
            return MatchRule.EXACT_EXTENT
        if reference_head is not None and reference_head == system_span:
            return MatchRule.EXACT_HEAD
        if self._policy.allows_containment and reference_extent.encloses(system_span):
            return MatchRule.CONTAINMENT
        return None

    def _auxiliary_rule(
        self,
        reference_extent: OffsetRange,
        reference_head: OffsetRange | None,
        system_span: OffsetRange,
        parse_head: OffsetRange,
    ) -> MatchRule | None:
        if reference_extent == parse_head or (reference_head is not None and reference_head == parse_head):
            return MatchRule.AUXILIARY_EXACT
        if not self._policy.allows_containment:
            return None

        extent_encloses_head = reference_extent.encloses(parse_head)
        if not (extent_encloses_head or parse_head.encloses(reference_extent)):
            return None
        extent_has_witness = extent_encloses_head or (
            reference_head is not None and reference_extent.encloses(reference_head)
        )
        span_has_witness = system_span.encloses(parse_head) or (
            reference_head is not None and system_span.encloses(reference_head)
        )
        if extent_has_witness and span_has_witness:
            return MatchRule.AUXILIARY_ENCLOSURE
        logger.debug(
            "Rejected enclosure of %s by parse head %s for span %s: witness missing",
            reference_extent,
            parse_head,
            system_span,
        )
        return None
