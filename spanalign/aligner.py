"""Per-document alignment of system responses to reference annotations.

A `ReferenceAligner` is built once per reference document. Construction
indexes every entity mention (by extent and by declared head) and every
filler-typed event argument (by extent); each query then:

1. collects exact extent/head matches from the `RangeIndex` in O(1);
2. asks the `OverlappingRangeSet`s whether any relaxed match is possible at
   all under the policy;
3. only if so, scans the remaining annotations with the `SpanMatcher`.

The result is identical to testing every annotation with the matcher, and is
returned in the document's own annotation order. A system span may align with
mentions of several entities when boundaries are ambiguous; all of them are
reported.
"""

from __future__ import annotations

import logging
from typing import Iterable, TypeVar

from pydantic import BaseModel, Field

from spanalign.errors import AlignmentConfigurationError, AnnotationIntegrityError
from spanalign.index import OverlappingRangeSet, RangeIndex
from spanalign.logging import PprintLogger
from spanalign.matcher import AlignmentPolicy, SpanMatcher
from spanalign.offsets import OffsetRange
from spanalign.parse.heads import AuxiliaryHeadResolver
from spanalign.parse.interfaces import AuxiliaryDocument
from spanalign.reference import Entity, EntityMention, FillerArgument, ReferenceDocument
from spanalign.response import SystemResponse

logger = logging.getLogger(__name__)
summary_log = PprintLogger(logger)

A = TypeVar("A")


class ResponseAlignment(BaseModel, frozen=True):
    """Everything one system response aligned to in a reference document."""

    response: SystemResponse = Field(description="The aligned system response.")
    mentions: tuple[EntityMention, ...] = Field(default=(), description="Matched entity mentions.")
    entities: tuple[Entity, ...] = Field(default=(), description="Entities owning the matched mentions.")
    fillers: tuple[FillerArgument, ...] = Field(default=(), description="Matched filler arguments.")

    @property
    def is_aligned(self) -> bool:
        return bool(self.mentions or self.fillers)


def _mention_head(entry: tuple[int, EntityMention]) -> OffsetRange | None:
    mention = entry[1]
    if mention.head is not None and not mention.extent.encloses(mention.head):
        raise AnnotationIntegrityError(
            f"Head {mention.head} of mention {mention.mention_id!r} is not enclosed by its extent {mention.extent}"
        )
    return mention.head


class ReferenceAligner:
    """Answer "which reference annotations does this response denote" for one document.

    Args:
        reference_document: The reference annotations to align against.
        policy: Matching strictness. Defaults to `AlignmentPolicy()`.
        auxiliary_document: Automatic parse of the same text, required when
            `policy.use_auxiliary_relaxation` is set.

    Raises:
        AlignmentConfigurationError: Relaxation requested without a parse.
        AnnotationIntegrityError: Malformed ranges in the reference document.

    Example:
        ```python
        aligner = ReferenceAligner.create(doc, AlignmentPolicy.relaxed())
        for response in responses:
            entities = aligner.entities_for_response(response)
        ```
    """

    def __init__(
        self,
        reference_document: ReferenceDocument,
        policy: AlignmentPolicy | None = None,
        auxiliary_document: AuxiliaryDocument | None = None,
    ) -> None:
        policy = policy if policy is not None else AlignmentPolicy()
        if policy.use_auxiliary_relaxation and auxiliary_document is None:
            raise AlignmentConfigurationError(
                f"Auxiliary relaxation requested for {reference_document.document_id!r} "
                "but no auxiliary document was supplied"
            )
        head_resolver = AuxiliaryHeadResolver(auxiliary_document) if auxiliary_document is not None else None

        self._document = reference_document
        self._auxiliary_document = auxiliary_document
        self._matcher = SpanMatcher(policy, head_resolver)

        self._mentions: tuple[EntityMention, ...] = tuple(reference_document.iter_mentions())
        numbered_mentions = list(enumerate(self._mentions))
        self._mentions_by_extent = RangeIndex.build(numbered_mentions, lambda entry: entry[1].extent)
        self._mentions_by_head = RangeIndex.build(numbered_mentions, _mention_head)
        self._mention_extents = OverlappingRangeSet.build(self._mentions_by_extent.keys())
        self._mention_heads = OverlappingRangeSet.build(self._mentions_by_head.keys())

        self._filler_arguments: tuple[FillerArgument, ...] = tuple(reference_document.iter_filler_arguments())
        numbered_fillers = list(enumerate(self._filler_arguments))
        self._fillers_by_extent = RangeIndex.build(numbered_fillers, lambda entry: entry[1].filler.extent)
        self._filler_extents = OverlappingRangeSet.build(self._fillers_by_extent.keys())

        logger.debug(
            "Indexed %s: %d mentions (%d distinct extents, %d heads), %d filler arguments",
            reference_document.document_id,
            len(self._mentions),
            len(self._mentions_by_extent),
            len(self._mentions_by_head),
            len(self._filler_arguments),
        )

    @classmethod
    def create(
        cls,
        reference_document: ReferenceDocument,
        policy: AlignmentPolicy | None = None,
        auxiliary_document: AuxiliaryDocument | None = None,
    ) -> "ReferenceAligner":
        return cls(reference_document, policy, auxiliary_document)

    @property
    def document(self) -> ReferenceDocument:
        return self._document

    @property
    def policy(self) -> AlignmentPolicy:
        return self._matcher.policy

    @property
    def auxiliary_document(self) -> AuxiliaryDocument | None:
        return self._auxiliary_document

    @property
    def matcher(self) -> SpanMatcher:
        return self._matcher

    def mentions_for_response(self, response: SystemResponse) -> tuple[EntityMention, ...]:
        """Return every entity mention the response's base filler aligns with."""
        span = response.base_filler
        parse_head = self._matcher.auxiliary_head(span)
        matched: dict[int, EntityMention] = {}
        for ordinal, mention in self._mentions_by_extent.exact_matches(span):
            matched[ordinal] = mention
        for ordinal, mention in self._mentions_by_head.exact_matches(span):
            matched[ordinal] = mention

        if self._may_relax(span, parse_head, self._mention_extents, self._mention_heads):
            for ordinal, mention in enumerate(self._mentions):
                if ordinal in matched:
                    continue
                rule = self._matcher._match_rule_with_head(mention.extent, mention.head, span, parse_head)
                if rule is not None:
                    logger.debug("Response %s aligned to mention %s by %s", response.response_id, mention.mention_id, rule.value)
                    matched[ordinal] = mention
        return _in_document_order(matched)

    def entities_for_response(self, response: SystemResponse) -> tuple[Entity, ...]:
        """Return the entities owning the mentions the response aligns with."""
        return self._entities_for_mentions(self.mentions_for_response(response))

    def fillers_for_response(self, response: SystemResponse) -> tuple[FillerArgument, ...]:
        """Return every filler-typed event argument the response's base filler aligns with.

        Fillers carry no head, so only the extent and the parse head can take
        part in matching. Coreferent event mentions often repeat one argument;
        equal arguments are reported once, at their first position.
        """
        span = response.base_filler
        parse_head = self._matcher.auxiliary_head(span)
        matched: dict[int, FillerArgument] = dict(self._fillers_by_extent.exact_matches(span))

        if self._may_relax(span, parse_head, self._filler_extents, None):
            for ordinal, argument in enumerate(self._filler_arguments):
                if ordinal in matched:
                    continue
                if self._matcher._match_rule_with_head(argument.filler.extent, None, span, parse_head) is not None:
                    matched[ordinal] = argument
        return tuple(dict.fromkeys(_in_document_order(matched)))

    def align(self, response: SystemResponse) -> ResponseAlignment:
        """Align one response against mentions, entities and fillers at once."""
        if response.document_id != self._document.document_id:
            logger.warning(
                "Aligning response %s from %s against reference document %s",
                response.response_id,
                response.document_id,
                self._document.document_id,
            )
        mentions = self.mentions_for_response(response)
        return ResponseAlignment(
            response=response,
            mentions=mentions,
            entities=self._entities_for_mentions(mentions),
            fillers=self.fillers_for_response(response),
        )

    def align_all(
        self,
        responses: Iterable[SystemResponse],
        log: PprintLogger | None = None,
    ) -> list[ResponseAlignment]:
        """Align a batch of responses and log a summary of the outcome.

        The summary goes to `log` when given (e.g. one from `setup_logging`),
        otherwise to this module's logger, leaving handlers and levels to the
        application.
        """
        log = log if log is not None else summary_log
        alignments = [self.align(response) for response in responses]
        unaligned = [a.response.response_id for a in alignments if not a.is_aligned]
        log.info(
            {
                "document_id": self._document.document_id,
                "policy": self.policy.model_dump(),
                "responses": len(alignments),
                "aligned": len(alignments) - len(unaligned),
                "unaligned": unaligned,
            }
        )
        return alignments

    def _may_relax(
        self,
        span: OffsetRange,
        parse_head: OffsetRange | None,
        extents: OverlappingRangeSet,
        heads: OverlappingRangeSet | None,
    ) -> bool:
        """Whether any relaxation rule could possibly accept some annotation.

        Conservative: a True answer only licenses the full matcher scan.
        """
        policy = self._matcher.policy
        if policy.allows_containment and extents.encloses_any(span):
            return True
        if parse_head is None:
            return False
        if parse_head in extents or (heads is not None and parse_head in heads):
            return True
        return policy.allows_containment and (extents.encloses_any(parse_head) or extents.enclosed_by_any(parse_head))

    def _entities_for_mentions(self, mentions: Iterable[EntityMention]) -> tuple[Entity, ...]:
        entities: dict[str, Entity] = {}
        for mention in mentions:
            entity = self._document.entity_containing(mention)
            if entity is not None:
                entities.setdefault(entity.entity_id, entity)
        return tuple(entities.values())


def _in_document_order(matched: dict[int, A]) -> tuple[A, ...]:
    return tuple(matched[ordinal] for ordinal in sorted(matched))
