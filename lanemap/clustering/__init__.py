"""
Online lane clustering.

Single-pass greedy assignment of documents to lanes with running-mean
centroids, plus a store for saving and inspecting results.
"""

from .models import (
    Lane,
    LaneRegistry,
    LaneResult,
)
from .algorithm import (
    find_nearest_lane,
    update_centroid,
    compute_lanes,
)
from .manager import LaneMapStore, StoredMap

__all__ = [
    # Models
    "Lane",
    "LaneRegistry",
    "LaneResult",
    # Algorithm
    "find_nearest_lane",
    "update_centroid",
    "compute_lanes",
    # Store
    "LaneMapStore",
    "StoredMap",
]
