"""
lanemap CLI - cluster a note corpus into lanes and inspect the result.

Usage:
    lanemap analyze notes.jsonl --out ./map
    lanemap analyze notes.yaml --out ./map --threshold 0.4 --k 3
    lanemap status ./map
    lanemap lanes ./map --lane 0 --limit 10
"""

import argparse
import sys
from pathlib import Path

from .clustering.manager import LaneMapStore
from .config import LaneMapError, load_config, save_config
from .core.documents import load_corpus
from .core.logger import Logger
from .engine import LaneMapEngine


def cmd_analyze(args):
    """Analyze a corpus file and save the lane map."""
    out_dir = Path(args.out)
    config = load_config(
        args.config,
        lane_sim_threshold=args.threshold,
        k=args.k,
        max_terms=args.max_terms,
        edge_min_weight=args.min_weight,
        chronological=False if args.given_order else None,
        verbose=args.verbose,
    )

    with Logger(out_dir) as logger:
        try:
            documents = load_corpus(args.corpus)
        except LaneMapError as e:
            logger.log_error(str(e), error_type=type(e).__name__)
            raise
        # Engine logs its own errors
        semantic_map = LaneMapEngine(config, logger).run(documents)

    store = LaneMapStore(out_dir)
    store.save(semantic_map, config)
    save_config(config, out_dir / "config.yaml")

    summary = semantic_map.summary()
    print(f"Documents: {summary['num_documents']}")
    print(f"Vocabulary: {summary['vocabulary_size']} terms")
    print(f"Lanes: {summary['num_lanes']} (sizes: {summary['lane_sizes']})")
    print(f"Edges: {summary['num_edges']} total, "
          f"{summary['num_shown_edges']} with similarity >= {config.edge_min_weight}")
    print(f"Saved to {out_dir}")

    return 0


def cmd_status(args):
    """Show a saved lane map's status."""
    store = LaneMapStore(Path(args.out))
    status = store.get_status()

    if not status["initialized"]:
        print(f"No lane map in {args.out}")
        return 1

    print(f"Documents: {status['num_documents']}")
    print(f"Vocabulary: {status['vocabulary_size']} terms")
    print(f"Lanes: {status['num_lanes']}")
    print(f"Edges: {status['num_edges']} ({status['num_shown_edges']} shown)")
    print()
    for lane in status["lanes"]:
        print(f"  [{lane['id']}] {lane['members']:>4} members  {lane['first']}")

    return 0


def cmd_lanes(args):
    """Show members of one lane (or all lanes)."""
    store = LaneMapStore(Path(args.out))
    if not store.initialized:
        print(f"No lane map in {args.out}")
        return 1

    stored = store.load()
    lane_ids = [args.lane] if args.lane is not None else [lane.id for lane in stored.lanes]

    for lane_id in lane_ids:
        members = store.get_lane_members(lane_id, limit=args.limit)
        if not members:
            print(f"Lane {lane_id}: not found")
            continue
        print(f"Lane {lane_id}:")
        for m in members:
            label = m["title"] or m["preview"]
            print(f"  {m['similarity']:.3f}  {m['id']}  {label}")
        print()

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="lanemap - semantic lane clustering for timestamped notes"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # analyze
    p_analyze = subparsers.add_parser("analyze", help="Cluster a corpus into lanes")
    p_analyze.add_argument("corpus", help="Corpus file (.jsonl or .yaml)")
    p_analyze.add_argument("--out", required=True, help="Output directory")
    p_analyze.add_argument("--config", help="YAML config file")
    p_analyze.add_argument("--threshold", type=float, help="Lane similarity threshold")
    p_analyze.add_argument("--k", type=int, help="Neighbors per document")
    p_analyze.add_argument("--max-terms", type=int, help="Vocabulary cap")
    p_analyze.add_argument("--min-weight", type=float, help="Edge display threshold")
    p_analyze.add_argument("--given-order", action="store_true",
                           help="Cluster in file order instead of oldest first")
    p_analyze.add_argument("--verbose", action="store_true", default=None,
                           help="Print clustering progress")

    # status
    p_status = subparsers.add_parser("status", help="Show saved lane map summary")
    p_status.add_argument("out", help="Lane map directory")

    # lanes
    p_lanes = subparsers.add_parser("lanes", help="Show lane members")
    p_lanes.add_argument("out", help="Lane map directory")
    p_lanes.add_argument("--lane", type=int, help="Lane index (default: all)")
    p_lanes.add_argument("--limit", type=int, default=5, help="Max members per lane (0 = all)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch
    commands = {
        "analyze": cmd_analyze,
        "status": cmd_status,
        "lanes": cmd_lanes,
    }

    try:
        return commands[args.command](args)
    except LaneMapError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
