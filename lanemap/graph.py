"""
Sparse k-nearest-neighbor similarity graph.

Top-k selection is not symmetric: b can be among a's top-k without a being
among b's. When both directions survive, only the first one encountered (in
the order documents were given) is kept, along with its weight; the later
duplicate is dropped even if its weight differs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import numpy as np

from .config import ConfigError, DEFAULT_K
from .core.documents import Document
from .core.text import cosine


@dataclass(frozen=True)
class Edge:
    """Undirected weighted edge with a < b."""

    a: Any
    b: Any
    weight: float

    def to_dict(self) -> dict:
        return {"a": self.a, "b": self.b, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> Edge:
        return cls(a=data["a"], b=data["b"], weight=data["weight"])


def nearest_neighbors(
    points: Iterable[Document],
    vectors: Mapping[Any, np.ndarray],
    k: int = DEFAULT_K,
) -> list[Edge]:
    """
    Build deduplicated top-k neighbor edges.

    Args:
        points: Documents; their order decides which duplicate edge wins
        vectors: doc id -> vector (from compute_lanes)
        k: Neighbors kept per document before filtering

    Returns:
        Edges with positive weight, canonical (smaller id first), in insertion order
    """
    if k <= 0:
        raise ConfigError(f"k must be positive, got {k}")

    ids = [p.id for p in points]
    edges: list[Edge] = []
    seen: set = set()

    for a in ids:
        va = vectors[a]
        sims = [(b, cosine(va, vectors[b])) for b in ids if b != a]
        sims.sort(key=lambda item: item[1], reverse=True)  # Stable for equal weights

        for b, weight in sims[:k]:
            if weight <= 0:
                continue
            key = (a, b) if a < b else (b, a)
            if key in seen:
                continue
            seen.add(key)
            edges.append(Edge(a=key[0], b=key[1], weight=weight))

    return edges


def filter_edges(edges: Iterable[Edge], min_weight: float) -> list[Edge]:
    """Keep edges with weight >= min_weight (caller-side display threshold)."""
    return [e for e in edges if e.weight >= min_weight]
