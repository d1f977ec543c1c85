"""
Text normalization and vector similarity primitives.
"""

from __future__ import annotations

import re
from typing import Optional

import numpy as np

MIN_TOKEN_LEN = 3
MAX_TOKEN_LEN = 32

# Runs of anything that is not a letter or digit (underscore counts as a separator)
_SEPARATOR_RE = re.compile(r"[\W_]+", re.UNICODE)


def tokenize(text: Optional[str]) -> list[str]:
    """
    Split text into lowercase letter/digit terms.

    Duplicates are kept in text order; term frequency matters downstream.
    Terms outside MIN_TOKEN_LEN..MAX_TOKEN_LEN characters are dropped.
    """
    if not text:
        return []
    normalized = _SEPARATOR_RE.sub(" ", text.lower())
    return [
        tok for tok in normalized.split()
        if MIN_TOKEN_LEN <= len(tok) <= MAX_TOKEN_LEN
    ]


def cosine(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity, 0.0 when either vector has zero norm."""
    n = min(len(a), len(b))
    a = np.asarray(a[:n], dtype=np.float64)
    b = np.asarray(b[:n], dtype=np.float64)
    norm_a = float(np.dot(a, a))
    norm_b = float(np.dot(b, b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a, b)) / (np.sqrt(norm_a) * np.sqrt(norm_b))
