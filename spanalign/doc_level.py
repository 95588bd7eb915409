"""Document-level event arguments derived from aligned responses.

Once a response is aligned, what it asserts can be stated without offsets:
"in document D, some event of type T has an argument with role R, realis X,
filled by coreference cluster C". The cluster is the aligned entity for
entity fillers and the filler annotation itself for non-entity fillers.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from spanalign.aligner import ReferenceAligner, ResponseAlignment
from spanalign.response import SystemResponse


class DocLevelEventArg(BaseModel, frozen=True):
    """An event argument stated at the document level."""

    document_id: str = Field(description="Document the argument occurs in.")
    event_type: str = Field(description="Event type, e.g. 'Conflict.Attack'.")
    event_argument_type: str = Field(description="Argument role, e.g. 'Attacker'.")
    realis: str | None = Field(default=None, description="Realis of the assertion.")
    coref_id: str = Field(description="Entity or filler identifier filling the role.")


def doc_level_args_from_alignment(alignment: ResponseAlignment) -> tuple[DocLevelEventArg, ...]:
    """Convert an alignment to the document-level arguments it supports.

    One argument per aligned entity, then one per aligned filler; repeated
    identifiers are collapsed. An unaligned response yields nothing.
    """
    response = alignment.response
    coref_ids: dict[str, None] = {}
    for entity in alignment.entities:
        coref_ids.setdefault(entity.entity_id, None)
    for argument in alignment.fillers:
        coref_ids.setdefault(argument.filler.filler_id, None)
    return tuple(
        DocLevelEventArg(
            document_id=response.document_id,
            event_type=response.event_type,
            event_argument_type=response.role,
            realis=response.realis,
            coref_id=coref_id,
        )
        for coref_id in coref_ids
    )


def doc_level_args_for_response(aligner: ReferenceAligner, response: SystemResponse) -> tuple[DocLevelEventArg, ...]:
    return doc_level_args_from_alignment(aligner.align(response))
