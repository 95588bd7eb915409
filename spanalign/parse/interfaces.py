"""Interfaces for the auxiliary (automatic) parse of a reference document.

The alignment engine never parses text itself. When head-based relaxation is
enabled it asks an externally produced parse, organised as sentences holding
parse trees, for the syntactic head of a system span. Any parser output can be
plugged in by implementing these three interfaces; `spanalign.parse.memory`
provides plain in-memory implementations.

Implementations must be read-only after construction so that a single parse
can serve concurrent alignment queries.
"""

from abc import ABC, abstractmethod

from spanalign.offsets import OffsetRange


class ParseNode(ABC):
    """A constituent (or terminal) of a parse tree."""

    @abstractmethod
    def span(self) -> OffsetRange:
        """Return the character range covered by this node."""

    @abstractmethod
    def terminal_head(self) -> "ParseNode | None":
        """Return the terminal that heads this node, or None if it has no head."""


class Sentence(ABC):
    """One parsed sentence of the auxiliary document."""

    @abstractmethod
    def node_for_offsets(self, offsets: OffsetRange) -> ParseNode | None:
        """Return the smallest parse node spanning exactly `offsets`, if any."""


class AuxiliaryDocument(ABC):
    """A full automatic parse of the same text the reference annotates."""

    @abstractmethod
    def first_sentence_containing(self, offsets: OffsetRange) -> Sentence | None:
        """Return the first sentence whose span encloses `offsets`, if any."""
