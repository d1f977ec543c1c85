"""
Test vocabulary building and vectorization.
"""

import math

import numpy as np
import pytest

from lanemap.config import ConfigError
from lanemap.core.documents import Document
from lanemap.core.vocabulary import build_vocabulary, vectorize


def make_docs(*texts):
    return [Document(id=f"n{i}", text=t, timestamp=i) for i, t in enumerate(texts)]


def test_ranked_by_document_frequency_with_first_seen_ties():
    docs = make_docs("apple banana apple", "apple cherry", "zebra")
    vocab = build_vocabulary(docs)

    assert vocab.terms == ("apple", "banana", "cherry", "zebra")
    assert vocab.doc_freq == (2, 1, 1, 1)
    assert vocab.num_documents == 3
    print(f"  ✓ Terms: {vocab.terms}")


def test_truncation_keeps_top_terms():
    docs = make_docs("apple banana apple", "apple cherry", "zebra")
    vocab = build_vocabulary(docs, max_terms=2)

    assert vocab.terms == ("apple", "banana")
    assert len(vocab) <= 2


def test_parallel_structures_and_index():
    docs = make_docs("red green blue", "green blue", "blue yellow")
    vocab = build_vocabulary(docs)

    assert len(vocab.idf) == len(vocab.terms) == len(vocab.index)
    for i, term in enumerate(vocab.terms):
        assert vocab.index[term] == i
        assert term in vocab
    assert "purple" not in vocab


def test_idf_formula_and_positivity():
    docs = make_docs("common rare", "common", "common")
    vocab = build_vocabulary(docs)

    common = vocab.idf[vocab.index["common"]]
    rare = vocab.idf[vocab.index["rare"]]
    assert common == pytest.approx(1.0)  # ln(4/4) + 1
    assert rare == pytest.approx(math.log(4 / 2) + 1)
    assert common < rare
    assert np.all(vocab.idf > 0)


def test_empty_corpus():
    vocab = build_vocabulary([])
    assert len(vocab) == 0
    assert vocab.idf.shape == (0,)
    assert vocab.num_documents == 0


def test_invalid_max_terms():
    with pytest.raises(ConfigError):
        build_vocabulary(make_docs("anything"), max_terms=0)


def test_vocabulary_is_read_only():
    vocab = build_vocabulary(make_docs("alpha beta"))
    with pytest.raises(ValueError):
        vocab.idf[0] = 5.0


def test_vectorize_counts_times_idf():
    docs = make_docs("apple banana apple", "apple cherry", "zebra")
    vocab = build_vocabulary(docs)

    v = vectorize("apple apple zebra unknownword", vocab)
    expected = np.array([
        2 * vocab.idf[0],
        0.0,
        0.0,
        1 * vocab.idf[3],
    ])
    assert v.shape == (len(vocab),)
    np.testing.assert_allclose(v, expected)


def test_vectorize_out_of_vocabulary_text_is_zero():
    vocab = build_vocabulary(make_docs("alpha beta"))
    v = vectorize("nothing matches here", vocab)
    assert not v.any()
