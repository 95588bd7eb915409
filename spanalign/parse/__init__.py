"""Auxiliary parse interfaces, in-memory implementations and head resolution."""

from spanalign.parse.heads import AuxiliaryHeadResolver
from spanalign.parse.interfaces import AuxiliaryDocument, ParseNode, Sentence
from spanalign.parse.memory import InMemoryAuxiliaryDocument, InMemoryParseNode, InMemorySentence

__all__ = [
    "AuxiliaryDocument",
    "AuxiliaryHeadResolver",
    "InMemoryAuxiliaryDocument",
    "InMemoryParseNode",
    "InMemorySentence",
    "ParseNode",
    "Sentence",
]
