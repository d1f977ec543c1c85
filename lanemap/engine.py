"""
LaneMapEngine - runs the full pipeline over one corpus snapshot.

corpus -> vocabulary -> vectors -> {lanes, neighbor graph}

Lanes are computed in chronological order (oldest first) unless the config
says otherwise; the neighbor graph uses the order the caller listed the
documents in.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np

from .clustering.algorithm import compute_lanes
from .clustering.models import Lane
from .config import LaneMapConfig, LaneMapError
from .core.documents import Document, chronological_order, coerce_documents
from .core.logger import Logger
from .core.vocabulary import Vocabulary
from .graph import Edge, filter_edges, nearest_neighbors


@dataclass
class SemanticMap:
    """Everything one engine run produces."""

    documents: tuple[Document, ...]
    vocabulary: Vocabulary
    vectors: dict[Any, np.ndarray]
    lanes: list[Lane]
    edges: list[Edge]                       # All positive edges
    shown_edges: list[Edge] = field(default_factory=list)  # weight >= edge_min_weight

    @property
    def num_lanes(self) -> int:
        return len(self.lanes)

    def lane_of(self) -> dict[Any, int]:
        """Map each document id to its lane index (for timeline layout)."""
        return {
            doc_id: lane.id
            for lane in self.lanes
            for doc_id in lane.member_ids
        }

    def summary(self) -> dict:
        """JSON-ready overview of the run."""
        return {
            "num_documents": len(self.documents),
            "vocabulary_size": len(self.vocabulary),
            "num_lanes": self.num_lanes,
            "lane_sizes": [lane.count for lane in self.lanes],
            "num_edges": len(self.edges),
            "num_shown_edges": len(self.shown_edges),
        }


class LaneMapEngine:
    """Runs tokenization, vectorization, lane clustering and graph building."""

    def __init__(self, config: Optional[LaneMapConfig] = None, logger: Optional[Logger] = None):
        self.config = config or LaneMapConfig()
        self.logger = logger

    def run(self, documents: Iterable[Union[Document, Mapping]]) -> SemanticMap:
        """
        Analyze a corpus snapshot.

        Args:
            documents: Documents (or id/text/timestamp mappings) in listing order

        Returns:
            SemanticMap
        """
        config = self.config
        start = time.perf_counter()

        try:
            docs = coerce_documents(documents)
        except LaneMapError as e:
            if self.logger:
                self.logger.log_error(str(e), error_type=type(e).__name__)
            raise

        if self.logger:
            self.logger.log_analysis_start(config.to_dict(), len(docs))

        cluster_order = chronological_order(docs) if config.chronological else list(docs)
        result = compute_lanes(
            cluster_order,
            threshold=config.lane_sim_threshold,
            max_terms=config.max_terms,
            verbose=config.verbose,
        )
        if self.logger:
            self.logger.log_vocabulary_built(
                len(result.vocabulary),
                result.vocabulary.num_documents,
                result.vocabulary.top_terms(10),
            )
            self.logger.log_lanes_computed(config.lane_sim_threshold, [
                {
                    "id": lane.id,
                    "size": lane.count,
                    "first_member": lane.member_ids[0],
                    "last_member": lane.member_ids[-1],
                }
                for lane in result.lanes
            ])

        # Vectors keyed in listing order rather than clustering order
        vectors = {doc.id: result.vectors[doc.id] for doc in docs}

        edges = nearest_neighbors(docs, vectors, k=config.k)
        shown = filter_edges(edges, config.edge_min_weight)
        if config.verbose:
            print(f"  Edges: {len(edges)} ({len(shown)} >= {config.edge_min_weight})")

        elapsed_ms = (time.perf_counter() - start) * 1000
        if self.logger:
            self.logger.log_graph_built(config.k, len(edges), len(shown), config.edge_min_weight)
            self.logger.log_analysis_end(len(result.lanes), len(edges), elapsed_ms)

        return SemanticMap(
            documents=docs,
            vocabulary=result.vocabulary,
            vectors=vectors,
            lanes=result.lanes,
            edges=edges,
            shown_edges=shown,
        )


def analyze(
    documents: Iterable[Union[Document, Mapping]],
    config: Optional[LaneMapConfig] = None,
    logger: Optional[Logger] = None,
) -> SemanticMap:
    """Convenience wrapper: LaneMapEngine(config, logger).run(documents)."""
    return LaneMapEngine(config, logger).run(documents)
