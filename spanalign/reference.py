"""Reference (gold) annotation model.

This module defines the hand-annotated side of an alignment: the entities,
mentions, fillers and events of one reference document.

- **EntityMention**: one textual occurrence of an entity, located by its
  extent and, when the annotators determined one, a head sub-span.
- **Entity**: a coreference chain owning an ordered tuple of mentions.
- **Filler**: a standalone annotation (times, values, crimes, ...) that
  belongs to no entity.
- **EventMention**: an annotated event occurrence whose arguments are either
  entity-typed or filler-typed (`Argument` is a union discriminated on
  ``kind``).
- **ReferenceDocument**: the whole document, plus a mention -> entity lookup
  table. Ownership flows one way: entities own mentions, and the document
  answers "which entity contains this mention" through the table.

All models are frozen Pydantic models. They are built once when a document is
loaded and are only read afterwards, so they may be shared across threads.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from spanalign.errors import AnnotationIntegrityError
from spanalign.offsets import OffsetRange


class EntityMention(BaseModel, frozen=True):
    """A single mention of a reference entity.

    Attributes:
        mention_id: Identifier unique within the document.
        extent: Full offset range of the mention.
        head: Head sub-span, if the annotation declares one. Always enclosed
            by `extent`.
        mention_type: Annotation category such as "NAM", "NOM" or "PRO".
        text: Surface text of the extent, when available.
    """

    mention_id: str = Field(description="Document-unique mention identifier.")
    extent: OffsetRange = Field(description="Full offset range of the mention.")
    head: OffsetRange | None = Field(default=None, description="Declared head range, if any.")
    mention_type: str | None = Field(default=None, description="Mention category (NAM, NOM, PRO, ...).")
    text: str | None = Field(default=None, description="Surface text of the extent.")

    @model_validator(mode="after")
    def _head_within_extent(self) -> "EntityMention":
        if self.head is not None and not self.extent.encloses(self.head):
            raise AnnotationIntegrityError(
                f"Head {self.head} of mention {self.mention_id!r} is not enclosed by its extent {self.extent}"
            )
        return self


class Entity(BaseModel, frozen=True):
    """A reference entity: a coreference chain of mentions."""

    entity_id: str = Field(description="Document-unique entity identifier.")
    entity_type: str | None = Field(default=None, description="Entity type such as PER, ORG or GPE.")
    specificity: str | None = Field(default=None, description="Specific or generic reference.")
    mentions: tuple[EntityMention, ...] = Field(default=(), description="Mentions in annotation order.")


class Filler(BaseModel, frozen=True):
    """A non-entity argument filler. Fillers never carry a head."""

    filler_id: str = Field(description="Document-unique filler identifier.")
    extent: OffsetRange = Field(description="Offset range of the filler.")
    filler_type: str | None = Field(default=None, description="Filler category (time, money, crime, ...).")
    text: str | None = Field(default=None, description="Surface text of the extent.")


class EntityArgument(BaseModel, frozen=True):
    """An event argument filled by an entity mention."""

    kind: Literal["entity"] = "entity"
    role: str = Field(description="Argument role, e.g. 'Attacker'.")
    realis: str | None = Field(default=None, description="Realis of the argument.")
    entity_id: str = Field(description="Identifier of the filling entity.")
    mention_id: str = Field(description="Identifier of the filling mention.")


class FillerArgument(BaseModel, frozen=True):
    """An event argument filled by a standalone filler."""

    kind: Literal["filler"] = "filler"
    role: str = Field(description="Argument role, e.g. 'Time'.")
    realis: str | None = Field(default=None, description="Realis of the argument.")
    filler: Filler = Field(description="The filler annotation itself.")


Argument = Annotated[Union[EntityArgument, FillerArgument], Field(discriminator="kind")]


class EventMention(BaseModel, frozen=True):
    mention_id: str
    event_type: str
    event_subtype: str | None = None
    realis: str | None = None
    trigger: OffsetRange | None = None
    arguments: tuple[Argument, ...] = ()


class Event(BaseModel, frozen=True):
    event_id: str
    mentions: tuple[EventMention, ...] = ()


class ReferenceDocument(BaseModel, frozen=True):
    """All reference annotations of one document.

    Construction validates identifier uniqueness, that every entity-typed
    argument points at a known entity mention and that every filler-typed
    argument carries one of the document's fillers, then builds the lookup tables
    used by `entity_containing` and `filler_by_id`.

    Example:
        ```python
        doc = ReferenceDocument(
            document_id="NYT_ENG_20130501.0001",
            entities=(
                Entity(entity_id="ent-1", mentions=(
                    EntityMention(mention_id="m-1", extent=OffsetRange.of(10, 20),
                                  head=OffsetRange.of(14, 20)),
                )),
            ),
        )
        doc.entity_containing(doc.entities[0].mentions[0])
        ```
    """

    document_id: str = Field(description="Identifier of the annotated document.")
    entities: tuple[Entity, ...] = Field(default=(), description="Entities in annotation order.")
    fillers: tuple[Filler, ...] = Field(default=(), description="Fillers in annotation order.")
    events: tuple[Event, ...] = Field(default=(), description="Events in annotation order.")

    _entity_id_by_mention_id: dict[str, str] = PrivateAttr(default_factory=dict)
    _mentions_by_id: dict[str, EntityMention] = PrivateAttr(default_factory=dict)
    _entities_by_id: dict[str, Entity] = PrivateAttr(default_factory=dict)
    _fillers_by_id: dict[str, Filler] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _check_identifiers(self) -> "ReferenceDocument":
        entity_ids: set[str] = set()
        mention_owner: dict[str, str] = {}
        for entity in self.entities:
            if entity.entity_id in entity_ids:
                raise AnnotationIntegrityError(f"Duplicate entity id {entity.entity_id!r} in {self.document_id!r}")
            entity_ids.add(entity.entity_id)
            for mention in entity.mentions:
                if mention.mention_id in mention_owner:
                    raise AnnotationIntegrityError(
                        f"Mention {mention.mention_id!r} appears in both {mention_owner[mention.mention_id]!r} "
                        f"and {entity.entity_id!r}"
                    )
                mention_owner[mention.mention_id] = entity.entity_id

        fillers_by_id: dict[str, Filler] = {}
        for filler in self.fillers:
            if filler.filler_id in fillers_by_id:
                raise AnnotationIntegrityError(f"Duplicate filler id {filler.filler_id!r} in {self.document_id!r}")
            fillers_by_id[filler.filler_id] = filler

        for event in self.events:
            for event_mention in event.mentions:
                for argument in event_mention.arguments:
                    if argument.kind == "filler":
                        declared = fillers_by_id.get(argument.filler.filler_id)
                        if declared != argument.filler:
                            raise AnnotationIntegrityError(
                                f"Argument of {event_mention.mention_id!r} carries filler "
                                f"{argument.filler.filler_id!r} {argument.filler.extent}, which does not match "
                                f"the document's fillers"
                            )
                        continue
                    owner = mention_owner.get(argument.mention_id)
                    if owner != argument.entity_id:
                        raise AnnotationIntegrityError(
                            f"Argument of {event_mention.mention_id!r} refers to mention {argument.mention_id!r} "
                            f"of entity {argument.entity_id!r}, which is not in the document"
                        )
        return self

    def model_post_init(self, __context: Any) -> None:
        for entity in self.entities:
            self._entities_by_id[entity.entity_id] = entity
            for mention in entity.mentions:
                self._entity_id_by_mention_id[mention.mention_id] = entity.entity_id
                self._mentions_by_id[mention.mention_id] = mention
        for filler in self.fillers:
            self._fillers_by_id[filler.filler_id] = filler

    def entity_containing(self, mention: EntityMention) -> Entity | None:
        """Return the entity owning `mention`, or None if it is not part of this document."""
        if self._mentions_by_id.get(mention.mention_id) != mention:
            return None
        return self._entities_by_id[self._entity_id_by_mention_id[mention.mention_id]]

    def entity_by_id(self, entity_id: str) -> Entity | None:
        return self._entities_by_id.get(entity_id)

    def filler_by_id(self, filler_id: str) -> Filler | None:
        return self._fillers_by_id.get(filler_id)

    def iter_mentions(self) -> Iterator[EntityMention]:
        """Yield every entity mention in entity, then mention, order."""
        for entity in self.entities:
            yield from entity.mentions

    def iter_arguments(self) -> Iterator[EntityArgument | FillerArgument]:
        """Yield every argument of every event mention in annotation order."""
