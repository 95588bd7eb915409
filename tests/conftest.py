"""Test fixtures and a small annotated test document.

This module provides:
- Factory helpers for ranges, mentions, entities, fillers and system responses
- `FixedHeadResolver`, a head resolver backed by a dict, for unit-testing the
  matcher's auxiliary rules without building parse trees
- Pytest fixtures for one annotated sentence, its reference document and an
  in-memory parse of it

The test sentence (offsets shown under each token):

    The rebels attacked the northern town of Kenema on Tuesday .
    0   4      11       20  24       33   38 41     48 51      58

Reference annotations:
- ent-rebels: "The rebels" [0,10), head "rebels" [4,10)
- ent-town:   "the northern town of Kenema" [20,47), head "town" [33,37)
              "Kenema" [41,47), head "Kenema" [41,47)
- f-tuesday:  "Tuesday" [51,58), the Time argument of the attack
"""

from typing import Mapping

import pytest

from spanalign.offsets import OffsetRange
from spanalign.parse.heads import AuxiliaryHeadResolver
from spanalign.parse.memory import InMemoryAuxiliaryDocument, InMemoryParseNode, InMemorySentence
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
from spanalign.response import SystemResponse

DOC_ID = "AFP_ENG_20090519.0001"
SENTENCE = "The rebels attacked the northern town of Kenema on Tuesday."


def r(start: int, end: int) -> OffsetRange:
    """Shorthand for OffsetRange.of."""
    return OffsetRange.of(start, end)


def make_mention(
    mention_id: str,
    extent: tuple[int, int],
    head: tuple[int, int] | None = None,
    mention_type: str = "NAM",
) -> EntityMention:
    return EntityMention(
        mention_id=mention_id,
        extent=r(*extent),
        head=r(*head) if head is not None else None,
        mention_type=mention_type,
        text=SENTENCE[extent[0]:extent[1]] if extent[1] <= len(SENTENCE) else None,
    )


def make_entity(entity_id: str, *mentions: EntityMention, entity_type: str = "PER") -> Entity:
    return Entity(entity_id=entity_id, entity_type=entity_type, mentions=mentions)


def make_filler(filler_id: str, extent: tuple[int, int], filler_type: str = "time") -> Filler:
    return Filler(filler_id=filler_id, extent=r(*extent), filler_type=filler_type)


def make_response(
    base_filler: tuple[int, int],
    *,
    response_id: str = "resp-1",
    document_id: str = DOC_ID,
    event_type: str = "Conflict.Attack",
    role: str = "Attacker",
    realis: str = "Actual",
    predicate_justifications: tuple[tuple[int, int], ...] = ((11, 19),),
) -> SystemResponse:
    return SystemResponse(
        response_id=response_id,
        document_id=document_id,
        event_type=event_type,
        role=role,
        realis=realis,
        base_filler=r(*base_filler),
        predicate_justifications=tuple(r(*pj) for pj in predicate_justifications),
    )


def make_document(
    entities: tuple[Entity, ...] = (),
    filler_arguments: tuple[FillerArgument, ...] = (),
    document_id: str = DOC_ID,
) -> ReferenceDocument:
    """Build a document whose single event mention carries `filler_arguments`."""
    events: tuple[Event, ...] = ()
    if filler_arguments:
        events = (
            Event(
                event_id="ev-1",
                mentions=(EventMention(mention_id="em-1", event_type="Conflict.Attack", arguments=filler_arguments),),
            ),
        )
    return ReferenceDocument(
        document_id=document_id,
        entities=entities,
        fillers=tuple(dict.fromkeys(a.filler for a in filler_arguments)),
        events=events,
    )


class FixedHeadResolver(AuxiliaryHeadResolver):
    """Head resolver answering from a fixed span -> head mapping."""

    def __init__(self, heads: Mapping[OffsetRange, OffsetRange]) -> None:
        self._heads = dict(heads)

    def head_for(self, offsets: OffsetRange) -> OffsetRange | None:
        return self._heads.get(offsets)


def _leaf(label: str, start: int, end: int) -> InMemoryParseNode:
    return InMemoryParseNode.leaf(label, r(start, end))


def build_sentence_parse() -> InMemoryAuxiliaryDocument:
    """Parse of SENTENCE with explicit heads."""
    np_rebels = InMemoryParseNode.phrase("NP", (_leaf("DT", 0, 3), _leaf("NNS", 4, 10)), head_child=1)
    np_town = InMemoryParseNode.phrase(
        "NP", (_leaf("DT", 20, 23), _leaf("JJ", 24, 32), _leaf("NN", 33, 37)), head_child=2
    )
    np_kenema = InMemoryParseNode.phrase("NP", (_leaf("NNP", 41, 47),), head_child=0)
    pp_of = InMemoryParseNode.phrase("PP", (_leaf("IN", 38, 40), np_kenema), head_child=1)
    np_full = InMemoryParseNode.phrase("NP", (np_town, pp_of), head_child=0)
    np_tuesday = InMemoryParseNode.phrase("NP", (_leaf("NNP", 51, 58),), head_child=0)
    pp_on = InMemoryParseNode.phrase("PP", (_leaf("IN", 48, 50), np_tuesday), head_child=1)
    vp = InMemoryParseNode.phrase("VP", (_leaf("VBD", 11, 19), np_full, pp_on), head_child=0)
    root = InMemoryParseNode.phrase("S", (np_rebels, vp, _leaf(".", 58, 59)), head_child=1)
    return InMemoryAuxiliaryDocument(
        document_id=DOC_ID,
        sentences=(InMemorySentence(offsets=r(0, 59), root=root),),
    )


@pytest.fixture
def rebels() -> Entity:
    return make_entity("ent-rebels", make_mention("m-rebels", (0, 10), (4, 10), mention_type="NOM"), entity_type="ORG")


@pytest.fixture
def town() -> Entity:
    return make_entity(
        "ent-town",
        make_mention("m-town", (20, 47), (33, 37), mention_type="NOM"),
        make_mention("m-kenema", (41, 47), (41, 47)),
        entity_type="GPE",
    )


@pytest.fixture
def tuesday_argument() -> FillerArgument:
    return FillerArgument(role="Time", realis="Actual", filler=make_filler("f-tuesday", (51, 58)))


@pytest.fixture
def reference_document(rebels: Entity, town: Entity, tuesday_argument: FillerArgument) -> ReferenceDocument:
    return ReferenceDocument(
        document_id=DOC_ID,
        entities=(rebels, town),
        fillers=(tuesday_argument.filler,),
        events=(
            Event(
                event_id="ev-attack",
                mentions=(
                    EventMention(
                        mention_id="em-attack",
                        event_type="Conflict",
                        event_subtype="Attack",
                        realis="Actual",
                        trigger=r(11, 19),
                        arguments=(
                            EntityArgument(role="Attacker", entity_id="ent-rebels", mention_id="m-rebels"),
                            EntityArgument(role="Target", entity_id="ent-town", mention_id="m-town"),
                            tuesday_argument,
                        ),
                    ),
                ),
            ),
        ),
    )


@pytest.fixture
def sentence_parse() -> InMemoryAuxiliaryDocument:
    return build_sentence_parse()
