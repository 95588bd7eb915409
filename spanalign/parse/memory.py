"""In-memory parse structures implementing the auxiliary-document interfaces.

These are frozen Pydantic models, so a parse produced by any external tool can
be loaded from JSON with `InMemoryAuxiliaryDocument.model_validate_json` and
then shared read-only across alignment queries.

Heads are explicit: each phrase records which child is its head
(`head_child`), and `terminal_head` follows those pointers down to a leaf. A
phrase without a head child has no terminal head.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from spanalign.offsets import OffsetRange
from spanalign.parse.interfaces import AuxiliaryDocument, ParseNode, Sentence


class InMemoryParseNode(ParseNode, BaseModel):
    """A parse tree node with an explicit head-child pointer.

    Example:
        ```python
        det = InMemoryParseNode.leaf("DT", OffsetRange.of(0, 3))
        noun = InMemoryParseNode.leaf("NN", OffsetRange.of(4, 9))
        np = InMemoryParseNode.phrase("NP", (det, noun), head_child=1)
        assert np.terminal_head() == noun
        ```
    """

    model_config = {"frozen": True}

    label: str = Field(description="Constituent or part-of-speech label.")
    offsets: OffsetRange = Field(description="Character range covered by the node.")
    children: tuple[InMemoryParseNode, ...] = Field(default=(), description="Child nodes in text order.")
    head_child: int | None = Field(default=None, ge=0, description="Index of the head child, if known.")

    @model_validator(mode="after")
    def _check_children(self) -> "InMemoryParseNode":
        if self.head_child is not None and self.head_child >= len(self.children):
            raise ValueError(f"head_child {self.head_child} out of range for {len(self.children)} children")
        for child in self.children:
            if not self.offsets.encloses(child.offsets):
                raise ValueError(f"Child {child.label} {child.offsets} lies outside parent {self.label} {self.offsets}")
        return self

    @classmethod
    def leaf(cls, label: str, offsets: OffsetRange) -> "InMemoryParseNode":
        return cls(label=label, offsets=offsets)

    @classmethod
    def phrase(
        cls,
        label: str,
        children: tuple[InMemoryParseNode, ...],
        head_child: int | None = None,
    ) -> "InMemoryParseNode":
        """Build a phrase whose span is the union of its children's spans."""
        if not children:
            raise ValueError("A phrase needs at least one child")
        offsets = children[0].offsets
        for child in children[1:]:
            offsets = offsets.span(child.offsets)
        return cls(label=label, offsets=offsets, children=children, head_child=head_child)

    def is_terminal(self) -> bool:
        return not self.children

    def span(self) -> OffsetRange:
        return self.offsets

    def terminal_head(self) -> "InMemoryParseNode | None":
        node = self
        while node.children:
            if node.head_child is None:
                return None
            node = node.children[node.head_child]
        return node


class InMemorySentence(Sentence, BaseModel):
    """One sentence with its parse tree."""

    model_config = {"frozen": True}

    offsets: OffsetRange = Field(description="Character range of the sentence.")
    root: InMemoryParseNode = Field(description="Root of the sentence's parse tree.")

    def node_for_offsets(self, offsets: OffsetRange) -> InMemoryParseNode | None:
        """Return the deepest node whose span is exactly `offsets`.

        Unary chains (e.g. NP over NN) share one span; the deepest member of
        the chain is the smallest node spanning the range.
        """
        node = self.root
        if not node.offsets.encloses(offsets):
            return None
        found: InMemoryParseNode | None = None
        while True:
            if node.offsets == offsets:
                found = node
            next_node = next((c for c in node.children if c.offsets.encloses(offsets)), None)
            if next_node is None:
                return found
            node = next_node


class InMemoryAuxiliaryDocument(AuxiliaryDocument, BaseModel):
    """A parsed document held entirely in memory."""

    model_config = {"frozen": True}

    document_id: str = Field(description="Identifier of the parsed document.")
    sentences: tuple[InMemorySentence, ...] = Field(default=(), description="Sentences in text order.")

    def first_sentence_containing(self, offsets: OffsetRange) -> InMemorySentence | None:
        for sentence in self.sentences:
            if sentence.offsets.encloses(offsets):
                return sentence
        return None
