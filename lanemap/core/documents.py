"""
Document model and corpus loading.

The engine works on an immutable snapshot of (id, text, timestamp) records.
Corpus files are either JSONL (one object per line) or YAML (a list).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import yaml

from ..config import LaneMapError


class CorpusError(LaneMapError, ValueError):
    """Malformed corpus: duplicate ids, missing fields, unreadable file."""


@dataclass(frozen=True)
class Document:
    """A note snapshot fed to the engine."""

    id: Any           # Unique, mutually orderable (strings in practice)
    text: str         # Latest full-text snapshot
    timestamp: int    # Ordering key, e.g. updatedAt in ms
    title: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "timestamp": self.timestamp,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> Document:
        if "id" not in data:
            raise CorpusError(f"Document record has no 'id': {dict(data)!r:.120}")
        doc_id = data["id"]
        if "timestamp" not in data:
            raise CorpusError(f"Document {doc_id!r} has no 'timestamp'")

        timestamp = data["timestamp"]
        # bool is an int subclass but never a meaningful timestamp
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise CorpusError(f"Document {doc_id!r} has non-numeric timestamp: {timestamp!r}")
        for key in ("text", "title"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise CorpusError(f"Document {doc_id!r} has non-string {key}: {type(value).__name__}")

        return cls(
            id=doc_id,
            text=data.get("text") or "",
            timestamp=timestamp,
            title=data.get("title") or "",
        )


def coerce_documents(items: Iterable[Union[Document, Mapping]]) -> tuple[Document, ...]:
    """
    Snapshot input into a tuple of Documents, rejecting duplicate ids.

    Accepts Document instances or mappings with id/text/timestamp keys.
    All ids must share one type so they can be ordered against each other.
    """
    documents = []
    seen = set()
    id_type = None
    for item in items:
        doc = item if isinstance(item, Document) else Document.from_dict(item)
        if id_type is None:
            id_type = type(doc.id)
        elif type(doc.id) is not id_type:
            raise CorpusError(
                f"Document id {doc.id!r} is {type(doc.id).__name__}, "
                f"expected {id_type.__name__} like the others"
            )
        try:
            duplicate = doc.id in seen
        except TypeError:
            raise CorpusError(f"Document id {doc.id!r} is not hashable") from None
        if duplicate:
            raise CorpusError(f"Duplicate document id: {doc.id!r}")
        seen.add(doc.id)
        documents.append(doc)
    return tuple(documents)


def ensure_unique_ids(documents: Iterable[Document]) -> None:
    """Raise CorpusError if any id repeats."""
    seen = set()
    for doc in documents:
        if doc.id in seen:
            raise CorpusError(f"Duplicate document id: {doc.id!r}")
        seen.add(doc.id)


def chronological_order(documents: Iterable[Document]) -> list[Document]:
    """
    Oldest first, with equal timestamps in reverse listing order.

    Notes are listed newest first (stable) and that listing is reversed,
    so ties come out last-listed first.
    """
    newest_first = sorted(documents, key=lambda d: d.timestamp, reverse=True)
    return newest_first[::-1]


def load_corpus(path: Union[str, Path]) -> tuple[Document, ...]:
    """
    Load documents from a .jsonl or .yaml/.yml file.

    Args:
        path: Corpus file

    Returns:
        Tuple of Documents in file order
    """
    path = Path(path)
    if not path.exists():
        raise CorpusError(f"Corpus file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        records = []
        with open(path, encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as e:
                    raise CorpusError(f"{path}:{line_num}: invalid JSON: {e}") from e
    elif suffix in (".yaml", ".yml"):
        with open(path, encoding="utf-8") as f:
            try:
                records = yaml.safe_load(f) or []
            except yaml.YAMLError as e:
                raise CorpusError(f"Could not parse {path}: {e}") from e
        if not isinstance(records, list):
            raise CorpusError(f"{path} must contain a list of documents")
    else:
        raise CorpusError(f"Unsupported corpus format: {path.suffix!r} (use .jsonl or .yaml)")

    for record in records:
        if not isinstance(record, dict):
            raise CorpusError(f"Document record must be a mapping, got {type(record).__name__}")

    return coerce_documents(records)
