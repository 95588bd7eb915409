"""
Span Alignment - Reference-Corpus Alignment for Event Argument Extraction.

Resolves the text spans reported by an extraction system to the hand-annotated
entity mentions and fillers of a reference document, under a configurable
strictness policy, and reconciles overlapping justification spans of linked
responses into a canonical disjoint set.

Typical use, once per reference document:

    from spanalign import AlignmentPolicy, ReferenceAligner

    aligner = ReferenceAligner.create(reference_doc, AlignmentPolicy.relaxed())
    for response in responses:
        entities = aligner.entities_for_response(response)
"""

from spanalign.aligner import ReferenceAligner, ResponseAlignment
from spanalign.config import load_alignment_policy
from spanalign.doc_level import DocLevelEventArg, doc_level_args_for_response, doc_level_args_from_alignment
from spanalign.errors import AlignmentConfigurationError, AnnotationIntegrityError, SpanAlignError
from spanalign.index import OverlappingRangeSet, RangeIndex
from spanalign.matcher import AlignmentPolicy, MatchRule, SpanMatcher
from spanalign.offsets import OffsetRange
from spanalign.parse import (
    AuxiliaryDocument,
    AuxiliaryHeadResolver,
    InMemoryAuxiliaryDocument,
    InMemoryParseNode,
    InMemorySentence,
    ParseNode,
    Sentence,
)
from spanalign.reconcile import RangeReconciler
from spanalign.reference import (
    Entity,
    EntityArgument,
    EntityMention,
    Event,
    EventMention,
    Filler,
    FillerArgument,
    ReferenceDocument,
)
from spanalign.response import ResponseSet, SystemResponse

__all__ = [
    "OffsetRange",
    "Entity",
    "EntityArgument",
    "EntityMention",
    "Event",
    "EventMention",
    "Filler",
    "FillerArgument",
    "ReferenceDocument",
    "ResponseSet",
    "SystemResponse",
    "RangeIndex",
    "OverlappingRangeSet",
    "AuxiliaryDocument",
    "AuxiliaryHeadResolver",
    "InMemoryAuxiliaryDocument",
    "InMemoryParseNode",
    "InMemorySentence",
    "ParseNode",
    "Sentence",
    "AlignmentPolicy",
    "MatchRule",
    "SpanMatcher",
    "ReferenceAligner",
    "ResponseAlignment",
    "RangeReconciler",
    "DocLevelEventArg",
    "doc_level_args_for_response",
    "doc_level_args_from_alignment",
    "load_alignment_policy",
    "SpanAlignError",
    "AlignmentConfigurationError",
    "AnnotationIntegrityError",
]

__version__ = "0.1.0"
