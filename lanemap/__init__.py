"""
lanemap - semantic lane clustering for timestamped notes.

Builds a TF-IDF vocabulary over a corpus snapshot, groups documents into
lanes with a single-pass online clusterer, and derives a k-nearest-neighbor
similarity graph.
"""

from .config import LaneMapConfig, LaneMapError, ConfigError, load_config
from .core import Document, CorpusError, load_corpus, tokenize, cosine
from .clustering import Lane, compute_lanes, LaneMapStore
from .graph import Edge, nearest_neighbors, filter_edges
from .engine import LaneMapEngine, SemanticMap, analyze

__all__ = [
    "LaneMapConfig",
    "LaneMapError",
    "ConfigError",
    "load_config",
    "Document",
    "CorpusError",
    "load_corpus",
    "tokenize",
    "cosine",
    "Lane",
    "compute_lanes",
    "LaneMapStore",
    "Edge",
    "nearest_neighbors",
    "filter_edges",
    "LaneMapEngine",
    "SemanticMap",
    "analyze",
]
