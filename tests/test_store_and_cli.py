"""
Test result persistence and the command-line interface.
"""

import json
import tempfile
from pathlib import Path

import numpy as np
import pytest

from lanemap import LaneMapConfig, LaneMapError, analyze
from lanemap.cli import main
from lanemap.clustering.manager import LaneMapStore


NOTES = [
    {"id": "g1", "title": "Garden", "text": "garden tomatoes basil watering", "timestamp": 1},
    {"id": "b1", "title": "Budget", "text": "budget hiring plan quarter", "timestamp": 2},
    {"id": "g2", "title": "Compost", "text": "tomatoes basil compost garden", "timestamp": 3},
    {"id": "b2", "title": "Review", "text": "budget review hiring plan", "timestamp": 4},
]


def write_corpus(path: Path) -> Path:
    path.write_text("\n".join(json.dumps(n) for n in NOTES) + "\n")
    return path


def test_save_and_load_roundtrip():
    config = LaneMapConfig(k=1)
    result = analyze(NOTES, config)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = LaneMapStore(Path(tmpdir))
        assert not store.initialized
        store.save(result, config)
        assert store.initialized

        stored = LaneMapStore(Path(tmpdir)).load()
        assert stored.config == config
        assert stored.terms == list(result.vocabulary.terms)
        assert [lane.member_ids for lane in stored.lanes] == [lane.member_ids for lane in result.lanes]
        for saved, original in zip(stored.lanes, result.lanes):
            np.testing.assert_allclose(saved.centroid, original.centroid, rtol=1e-6)
        assert [(e.a, e.b) for e in stored.edges] == [(e.a, e.b) for e in result.edges]
        assert [d["id"] for d in stored.documents] == ["g1", "b1", "g2", "b2"]


def test_status_and_members():
    result = analyze(NOTES)

    with tempfile.TemporaryDirectory() as tmpdir:
        store = LaneMapStore(Path(tmpdir))
        assert store.get_status() == {"initialized": False}
        assert store.get_lane_members(0) == []

        store.save(result, LaneMapConfig())
        status = store.get_status()
        assert status["initialized"] is True
        assert status["num_documents"] == 4
        assert status["num_lanes"] == 2
        assert {lane["first"] for lane in status["lanes"]} == {"Garden", "Budget"}

        members = store.get_lane_members(0, limit=0)
        assert {m["id"] for m in members} == {"g1", "g2"}
        sims = [m["similarity"] for m in members]
        assert sims == sorted(sims, reverse=True)
        assert len(store.get_lane_members(0, limit=1)) == 1
        assert store.get_lane_members(99) == []


def test_load_without_saved_map():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(LaneMapError):
            LaneMapStore(Path(tmpdir)).load()


def test_cli_analyze_status_lanes(capsys):
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        corpus = write_corpus(tmp / "notes.jsonl")
        out = tmp / "map"

        assert main(["analyze", str(corpus), "--out", str(out)]) == 0
        for name in ("centroids.npy", "vectors.npy", "meta.yaml", "edges.json", "events.jsonl", "config.yaml"):
            assert (out / name).exists(), name
        assert "Lanes: 2" in capsys.readouterr().out

        assert main(["status", str(out)]) == 0
        assert "Garden" in capsys.readouterr().out

        assert main(["lanes", str(out), "--lane", "1"]) == 0
        assert "Budget" in capsys.readouterr().out


def test_cli_threshold_override():
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        corpus = write_corpus(tmp / "notes.jsonl")
        out = tmp / "map"

        assert main(["analyze", str(corpus), "--out", str(out), "--threshold", "1.01"]) == 0
        assert LaneMapStore(out).get_status()["num_lanes"] == 4


def test_cli_bad_corpus_logs_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        corpus = tmp / "notes.jsonl"
        corpus.write_text('{"id": "a", "timestamp": 1}\n{"id": "a", "timestamp": 2}\n')
        out = tmp / "map"

        assert main(["analyze", str(corpus), "--out", str(out)]) == 1
        events = [json.loads(line) for line in (out / "events.jsonl").read_text().splitlines()]
        assert events[-1]["type"] == "error"
        assert not (out / "meta.yaml").exists()


def test_cli_status_missing_map():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert main(["status", tmpdir]) == 1
        assert main([]) == 1


def test_cli_malformed_records_exit_cleanly():
    """Bad field types and mixed id types end in an error event, not a traceback."""
    bad_corpora = {
        "text.jsonl": '{"id": "a", "text": 42, "timestamp": 1}\n',
        "timestamp.jsonl": '{"id": "a", "text": "x", "timestamp": null}\n{"id": "b", "text": "y", "timestamp": 2}\n',
        "ids.yaml": "- id: 1\n  text: first note\n  timestamp: 1\n- id: note-2\n  text: second note\n  timestamp: 2\n",
    }
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        for name, content in bad_corpora.items():
            corpus = tmp / name
            corpus.write_text(content)
            out = tmp / f"map-{corpus.stem}"

            assert main(["analyze", str(corpus), "--out", str(out)]) == 1, name
            events = [json.loads(line) for line in (out / "events.jsonl").read_text().splitlines()]
            assert [e["type"] for e in events] == ["error"], name
            assert events[0]["error_type"] == "CorpusError"


def test_cli_verbose_flag(capsys):
    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        corpus = write_corpus(tmp / "notes.jsonl")

        assert main(["analyze", str(corpus), "--out", str(tmp / "quiet")]) == 0
        assert "Clustering" not in capsys.readouterr().out

        assert main(["analyze", str(corpus), "--out", str(tmp / "loud"), "--verbose"]) == 0
        assert "Clustering 4 documents" in capsys.readouterr().out
