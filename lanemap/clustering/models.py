"""
Data models for lane clustering.

Lanes are exclusively owned, index-addressed records: each one's centroid is
updated in place as documents are assigned, and lanes are never merged or
removed within a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from ..core.vocabulary import Vocabulary


@dataclass(eq=False)
class Lane:
    """State of a single lane."""

    id: int                      # Position in the lane list, e.g. 0
    centroid: np.ndarray         # Running mean of member vectors
    count: int                   # Number of members (>= 1)
    member_ids: list = field(default_factory=list)  # Assignment order

    def to_meta_dict(self) -> dict:
        """Convert to dict for serialization (excludes centroid)."""
        return {
            "id": self.id,
            "count": self.count,
            "member_ids": list(self.member_ids),
        }

    @classmethod
    def from_meta_dict(cls, data: dict, centroid: np.ndarray) -> Lane:
        """Create from metadata dict + centroid array."""
        return cls(
            id=data["id"],
            centroid=centroid,
            count=data["count"],
            member_ids=list(data["member_ids"]),
        )


@dataclass
class LaneRegistry:
    """Ordered collection of lanes for one run."""

    lanes: list[Lane] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lanes)

    def spawn_lane(self, vector: np.ndarray, doc_id: Any) -> Lane:
        """Open a new lane seeded with a copy of one document's vector."""
        lane = Lane(
            id=len(self.lanes),
            centroid=np.array(vector, dtype=np.float64, copy=True),
            count=1,
            member_ids=[doc_id],
        )
        self.lanes.append(lane)
        return lane


@dataclass
class LaneResult:
    """Output of compute_lanes."""

    vectors: dict[Any, np.ndarray]   # doc id -> TF-IDF vector, input order
    lanes: list[Lane]
    vocabulary: Vocabulary

    def lane_of(self) -> dict[Any, int]:
        """Map each document id to its lane index."""
        return {
            doc_id: lane.id
            for lane in self.lanes
            for doc_id in lane.member_ids
        }
