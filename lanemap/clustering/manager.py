"""
Result store for saving and inspecting computed lane maps.

Uses .npy for the dense arrays and YAML/JSON for everything else.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import numpy as np
import yaml

from ..config import LaneMapConfig, LaneMapError
from ..core.text import cosine
from ..graph import Edge
from .models import Lane


@dataclass
class StoredMap:
    """A lane map loaded back from disk."""

    config: LaneMapConfig
    terms: list[str]
    idf: np.ndarray
    documents: list[dict]            # id, title, timestamp, preview (listing order)
    vectors: dict[Any, np.ndarray]
    lanes: list[Lane]
    edges: list[Edge]

    def shown_edges(self) -> list[Edge]:
        return [e for e in self.edges if e.weight >= self.config.edge_min_weight]


class LaneMapStore:
    """
    Persists one lane map to a directory.

    Storage format:
        out_dir/
        ├── centroids.npy      # lanes × vocab float32
        ├── vectors.npy        # documents × vocab float32
        ├── meta.yaml          # config, vocabulary, documents, lanes
        └── edges.json         # all positive edges
    """

    PREVIEW_CHARS = 80

    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)
        self._centroids_path = self.out_dir / "centroids.npy"
        self._vectors_path = self.out_dir / "vectors.npy"
        self._meta_path = self.out_dir / "meta.yaml"
        self._edges_path = self.out_dir / "edges.json"

        self._loaded: Optional[StoredMap] = None

    @property
    def initialized(self) -> bool:
        """Check if a map has been saved here."""
        return self._meta_path.exists()

    def save(self, semantic_map, config: LaneMapConfig) -> None:
        """Save a SemanticMap (from LaneMapEngine.run) with the config that produced it."""
        self.out_dir.mkdir(parents=True, exist_ok=True)
        dim = len(semantic_map.vocabulary)

        centroids = np.array(
            [lane.centroid for lane in semantic_map.lanes], dtype=np.float32
        ).reshape(len(semantic_map.lanes), dim)
        np.save(self._centroids_path, centroids)

        doc_ids = [doc.id for doc in semantic_map.documents]
        vectors = np.array(
            [semantic_map.vectors[doc_id] for doc_id in doc_ids], dtype=np.float32
        ).reshape(len(doc_ids), dim)
        np.save(self._vectors_path, vectors)

        meta = {
            "config": config.to_dict(),
            "vocabulary": {
                "terms": list(semantic_map.vocabulary.terms),
                "idf": [float(x) for x in semantic_map.vocabulary.idf],
            },
            "documents": [
                {
                    "id": doc.id,
                    "title": doc.title,
                    "timestamp": doc.timestamp,
                    "preview": self._preview(doc.text),
                }
                for doc in semantic_map.documents
            ],
            "lanes": [lane.to_meta_dict() for lane in semantic_map.lanes],
        }
        self._atomic_write(self._meta_path, lambda f: yaml.safe_dump(
            meta, f, default_flow_style=False, allow_unicode=True, sort_keys=False
        ))

        edges = [e.to_dict() for e in semantic_map.edges]
        self._atomic_write(self._edges_path, lambda f: json.dump(edges, f, indent=2))

        self._loaded = None

    def load(self) -> StoredMap:
        """Load the saved map."""
        if not self.initialized:
            raise LaneMapError(f"No lane map saved in {self.out_dir}")
        if self._loaded is not None:
            return self._loaded

        with open(self._meta_path, encoding="utf-8") as f:
            meta = yaml.safe_load(f)

        centroids = np.load(self._centroids_path)
        vectors_arr = np.load(self._vectors_path)
        with open(self._edges_path) as f:
            edges = [Edge.from_dict(e) for e in json.load(f)]

        documents = meta.get("documents", [])
        vectors = {
            doc["id"]: vectors_arr[i].astype(np.float64)
            for i, doc in enumerate(documents)
        }
        lanes = [
            Lane.from_meta_dict(lane_meta, centroids[i].astype(np.float64))
            for i, lane_meta in enumerate(meta.get("lanes", []))
        ]

        self._loaded = StoredMap(
            config=LaneMapConfig.from_dict(meta.get("config", {})),
            terms=meta["vocabulary"]["terms"],
            idf=np.array(meta["vocabulary"]["idf"], dtype=np.float64),
            documents=documents,
            vectors=vectors,
            lanes=lanes,
            edges=edges,
        )
        return self._loaded

    def get_status(self) -> dict:
        """Get lane map status summary."""
        if not self.initialized:
            return {"initialized": False}

        stored = self.load()
        titles = {doc["id"]: doc.get("title") or doc.get("preview", "") for doc in stored.documents}

        return {
            "initialized": True,
            "num_documents": len(stored.documents),
            "vocabulary_size": len(stored.terms),
            "num_lanes": len(stored.lanes),
            "num_edges": len(stored.edges),
            "num_shown_edges": len(stored.shown_edges()),
            "lanes": [
                {
                    "id": lane.id,
                    "members": lane.count,
                    "first": titles.get(lane.member_ids[0], ""),
                }
                for lane in sorted(stored.lanes, key=lambda x: -x.count)
            ],
        }

    def get_lane_members(self, lane_id: int, limit: int = 5) -> list[dict]:
        """
        Get detailed info for the members of a lane.

        Args:
            lane_id: Lane index
            limit: Max members to return (0 = all)

        Returns:
            Member dicts sorted by similarity to the lane centroid (closest first)
        """
        if not self.initialized:
            return []

        stored = self.load()
        if not 0 <= lane_id < len(stored.lanes):
            return []
        lane = stored.lanes[lane_id]
        docs_by_id = {doc["id"]: doc for doc in stored.documents}

        members = []
        for doc_id in lane.member_ids:
            doc = docs_by_id.get(doc_id, {})
            members.append({
                "id": doc_id,
                "title": doc.get("title", ""),
                "timestamp": doc.get("timestamp"),
                "similarity": cosine(stored.vectors[doc_id], lane.centroid),
                "preview": doc.get("preview", ""),
            })

        members.sort(key=lambda x: -x["similarity"])

        if limit > 0:
            members = members[:limit]

        return members

    def _preview(self, text: str) -> str:
        text = " ".join(text.split())
        if len(text) > self.PREVIEW_CHARS:
            return text[:self.PREVIEW_CHARS] + "..."
        return text

    def _atomic_write(self, path: Path, write_fn) -> None:
        with tempfile.NamedTemporaryFile(
            mode='w', dir=self.out_dir, suffix='.tmp', delete=False, encoding='utf-8'
        ) as f:
            temp_path = Path(f.name)
            write_fn(f)
        shutil.move(str(temp_path), str(path))
