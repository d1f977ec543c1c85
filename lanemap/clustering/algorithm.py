"""
Single-pass online lane clustering.

Greedy and order dependent: each document is compared against the current lane
centroids, joins the most similar lane if it clears the threshold, and
otherwise opens a new lane. There is no iteration and no reassignment, so
earlier documents seed the centroids that later documents gravitate toward.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

import numpy as np

from ..config import DEFAULT_LANE_SIM_THRESHOLD, DEFAULT_MAX_TERMS
from ..core.documents import Document, ensure_unique_ids
from ..core.text import cosine
from ..core.vocabulary import build_vocabulary, vectorize
from .models import Lane, LaneRegistry, LaneResult


def find_nearest_lane(
    vector: np.ndarray,
    registry: LaneRegistry,
) -> tuple[Optional[Lane], float]:
    """
    Find the lane whose centroid is most similar to a vector.

    Only strict improvements replace the current best, so ties go to the
    lowest lane index. Returns (None, -inf) when there are no lanes.
    """
    best_lane = None
    best_sim = float('-inf')

    for lane in registry.lanes:
        sim = cosine(vector, lane.centroid)
        if sim > best_sim:
            best_sim = sim
            best_lane = lane

    return best_lane, best_sim


def update_centroid(lane: Lane, vector: np.ndarray, doc_id: Any) -> None:
    """Add a member to a lane, updating its centroid as a running mean."""
    n = lane.count
    lane.centroid = (lane.centroid * n + vector) / (n + 1)
    lane.count += 1
    lane.member_ids.append(doc_id)


def compute_lanes(
    points: Iterable[Document],
    threshold: float = DEFAULT_LANE_SIM_THRESHOLD,
    max_terms: int = DEFAULT_MAX_TERMS,
    verbose: bool = False,
) -> LaneResult:
    """
    Vectorize a corpus and partition it into lanes.

    Args:
        points: Documents in processing order (oldest first gives
            temporally coherent lane growth)
        threshold: Minimum cosine similarity to join an existing lane
        max_terms: Vocabulary cap
        verbose: Print progress

    Returns:
        LaneResult with vectors (in input order), lanes and the vocabulary
    """
    points = list(points)
    ensure_unique_ids(points)

    vocabulary = build_vocabulary(points, max_terms=max_terms)
    registry = LaneRegistry()
    vectors: dict[Any, np.ndarray] = {}

    if verbose:
        print(f"Clustering {len(points)} documents over {len(vocabulary)} terms "
              f"(threshold={threshold})...")

    for doc in points:
        vector = vectorize(doc.text, vocabulary)
        vectors[doc.id] = vector

        best_lane, best_sim = find_nearest_lane(vector, registry)
        if best_lane is not None and best_sim >= threshold:
            update_centroid(best_lane, vector, doc.id)
        else:
            registry.spawn_lane(vector, doc.id)

    if verbose:
        sizes = ", ".join(str(lane.count) for lane in registry.lanes)
        print(f"  Lanes: {len(registry)} (sizes: {sizes or '-'})")

    return LaneResult(vectors=vectors, lanes=registry.lanes, vocabulary=vocabulary)
