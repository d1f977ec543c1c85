"""
Structured logging for lane map analysis runs.

Single JSONL file with typed events for streaming and later inspection.

Event types:
- analysis_start: Config, corpus size
- vocabulary_built: Vocabulary size and top terms
- lanes_computed: Lane count and per-lane sizes
- graph_built: Edge counts before/after display filtering
- error: Contract violations that aborted a run
- analysis_end: Summary stats
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Any, Optional


class Logger:
    def __init__(self, output_dir: Path, filename: str = "events.jsonl"):
        """
        Initialize logger for an analysis run.

        Args:
            output_dir: Directory for the log file (created if missing)
            filename: Log file name inside output_dir
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.output_dir / filename

        # Open file in append mode
        self.file_handle = open(self.log_file, 'a', encoding='utf-8')

    def _write_event(self, event_type: str, data: dict[str, Any]) -> None:
        """Write typed event to JSONL log."""
        event = {
            "type": event_type,
            "timestamp": datetime.now().isoformat(),
            **data
        }
        self.file_handle.write(json.dumps(event, default=str) + '\n')
        self.file_handle.flush()  # Ensure streaming writes

    def log_analysis_start(self, config: dict[str, Any], num_documents: int) -> None:
        """
        Log start of an analysis run.

        Args:
            config: LaneMapConfig as dict
            num_documents: Corpus size
        """
        self._write_event("analysis_start", {
            "config": config,
            "num_documents": num_documents,
        })

    def log_vocabulary_built(
        self,
        size: int,
        num_documents: int,
        top_terms: list[tuple[str, int]],
    ) -> None:
        """
        Log vocabulary construction.

        Args:
            size: Number of terms kept
            num_documents: Documents scanned
            top_terms: (term, document frequency) pairs, most common first
        """
        self._write_event("vocabulary_built", {
            "size": size,
            "num_documents": num_documents,
            "top_terms": [[t, n] for t, n in top_terms],
        })

    def log_lanes_computed(self, threshold: float, lanes: list[dict]) -> None:
        """
        Log lane clustering results.

        Args:
            threshold: Similarity threshold used for assignment
            lanes: Lane details (id, size, first/last member); centroids excluded
        """
        logged_lanes = []
        for lane in lanes:
            logged_lanes.append({
                "id": lane["id"],
                "size": lane["size"],
                "first_member": lane.get("first_member"),
                "last_member": lane.get("last_member"),
            })

        self._write_event("lanes_computed", {
            "threshold": threshold,
            "num_lanes": len(lanes),
            "lanes": logged_lanes,
        })

    def log_graph_built(self, k: int, num_edges: int, num_shown: int, min_weight: float) -> None:
        """
        Log neighbor graph construction.

        Args:
            k: Neighbors considered per document
            num_edges: Edges after positivity filter and dedup
            num_shown: Edges at or above min_weight
            min_weight: Display threshold
        """
        self._write_event("graph_built", {
            "k": k,
            "num_edges": num_edges,
            "num_shown": num_shown,
            "min_weight": min_weight,
        })

    def log_error(self, message: str, error_type: str = "error") -> None:
        """
        Log error event.

        Args:
            message: Error description
            error_type: Error category (e.g. exception class name)
        """
        self._write_event("error", {
            "message": message,
            "error_type": error_type,
        })

    def log_analysis_end(self, num_lanes: int, num_edges: int, elapsed_ms: float) -> None:
        """
        Log analysis completion.

        Args:
            num_lanes: Lanes produced
            num_edges: Edges produced (before display filtering)
            elapsed_ms: Wall time for the run
        """
        self._write_event("analysis_end", {
            "num_lanes": num_lanes,
            "num_edges": num_edges,
            "elapsed_ms": elapsed_ms,
        })

    def close(self) -> None:
        """Close log file."""
        if hasattr(self, 'file_handle') and self.file_handle:
            self.file_handle.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
