"""
Text, vocabulary and document primitives shared by the clustering and graph stages.
"""

from .text import tokenize, cosine
from .documents import Document, CorpusError, coerce_documents, chronological_order, load_corpus
from .vocabulary import Vocabulary, build_vocabulary, vectorize
from .logger import Logger

__all__ = [
    "tokenize",
    "cosine",
    "Document",
    "CorpusError",
    "coerce_documents",
    "chronological_order",
    "load_corpus",
    "Vocabulary",
    "build_vocabulary",
    "vectorize",
    "Logger",
]
