"""
Vocabulary selection and TF-IDF vectorization.

The vocabulary is the top-N terms by document frequency, with ties kept in
first-seen order (documents in input order, terms in text order). It is built
once per corpus snapshot and never mutated afterwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import numpy as np

from ..config import ConfigError, DEFAULT_MAX_TERMS
from .documents import Document
from .text import tokenize


@dataclass(frozen=True, eq=False)
class Vocabulary:
    """Ranked terms, term -> index mapping and parallel IDF weights."""

    terms: tuple[str, ...]
    idf: np.ndarray
    doc_freq: tuple[int, ...]        # Parallel to terms
    num_documents: int
    index: Mapping[str, int] = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "index", {t: i for i, t in enumerate(self.terms)})
        self.idf.setflags(write=False)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: str) -> bool:
        return term in self.index

    def top_terms(self, n: int = 10) -> list[tuple[str, int]]:
        """Highest document-frequency terms with their counts."""
        return list(zip(self.terms[:n], self.doc_freq[:n]))


def build_vocabulary(
    documents: Iterable[Document],
    max_terms: int = DEFAULT_MAX_TERMS,
) -> Vocabulary:
    """
    Build a vocabulary from a corpus.

    Args:
        documents: Corpus snapshot
        max_terms: Vocabulary cap; rarer long-tail terms are dropped

    Returns:
        Vocabulary with idf = ln((N + 1) / (df + 1)) + 1 per term
    """
    if max_terms <= 0:
        raise ConfigError(f"max_terms must be positive, got {max_terms}")

    # dict keeps first-seen order, sorted() is stable -> deterministic ties
    df: dict[str, int] = {}
    num_documents = 0
    for doc in documents:
        num_documents += 1
        for term in dict.fromkeys(tokenize(doc.text)):
            df[term] = df.get(term, 0) + 1

    ranked = sorted(df.items(), key=lambda item: -item[1])[:max_terms]
    terms = tuple(t for t, _ in ranked)
    freqs = tuple(n for _, n in ranked)

    idf = np.array(
        [math.log((num_documents + 1) / (n + 1)) + 1 for n in freqs],
        dtype=np.float64,
    )

    return Vocabulary(terms=terms, idf=idf, doc_freq=freqs, num_documents=num_documents)


def vectorize(text: str, vocabulary: Vocabulary) -> np.ndarray:
    """Raw term counts over the vocabulary, scaled by IDF. Unknown terms are ignored."""
    counts = np.zeros(len(vocabulary), dtype=np.float64)
    index = vocabulary.index
    for term in tokenize(text):
        i = index.get(term)
        if i is not None:
            counts[i] += 1
    return counts * vocabulary.idf
