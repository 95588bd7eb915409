"""Derive a syntactic head range for a system span from the auxiliary parse."""

import logging

from spanalign.offsets import OffsetRange
from spanalign.parse.interfaces import AuxiliaryDocument

logger = logging.getLogger(__name__)


class AuxiliaryHeadResolver:
    """Look up the terminal head of the parse node spanning a range.

    The lookup chain is sentence -> node spanning exactly the range -> that
    node's terminal head -> the head's span. A miss at any step, or an error
    raised by a third-party parse implementation, means "no auxiliary head";
    it never propagates to the caller.
    """

    def __init__(self, auxiliary_document: AuxiliaryDocument) -> None:
        self._document = auxiliary_document

    @property
    def document(self) -> AuxiliaryDocument:
        return self._document

    def head_for(self, offsets: OffsetRange) -> OffsetRange | None:
        """Return the head range for `offsets`, or None if none can be derived."""
        try:
            sentence = self._document.first_sentence_containing(offsets)
            if sentence is None:
                logger.debug("No auxiliary sentence contains %s", offsets)
                return None
            node = sentence.node_for_offsets(offsets)
            if node is None:
                logger.debug("No auxiliary parse node spans exactly %s", offsets)
                return None
            head = node.terminal_head()
            if head is None:
                return None
            return head.span()
        except Exception as e:
            logger.debug("Auxiliary head lookup failed for %s: %s", offsets, e)
            return None
