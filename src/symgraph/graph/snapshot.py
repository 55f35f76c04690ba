"""Snapshot codec: Graph <-> plain JSON document.

Document layout (field names are a compatibility surface)::

    {
      "formatVersion": 1,
      "repoPath": "...",
      "generatedAt": "2026-01-01T00:00:00+00:00",
      "files": {unit: {"dialect", "symbols", "memberData"}},
      "dependencyGraph": {"typeMap": {name: entry}, "edges": [edge]},
      "indexes": {"byName": {...}, "byKind": {...}, "byFile": {...}}
    }

Loading is all-or-nothing: any structural problem raises
``GraphError.snapshot_invalid`` and nothing is published.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog

from symgraph.config.constants import SNAPSHOT_FORMAT_VERSION, SNAPSHOT_REQUIRED_KEYS
from symgraph.core.errors import GraphError
from symgraph.graph.models import Edge, Graph, Indexes, TypeMapEntry, UnitData

log = structlog.get_logger(__name__)


def to_document(graph: Graph) -> dict[str, Any]:
    """Serialize a graph into plain key/value/array data."""
    return {
        "formatVersion": SNAPSHOT_FORMAT_VERSION,
        "repoPath": graph.repo_path,
        "generatedAt": graph.generated_at,
        "files": {unit_id: unit.to_dict() for unit_id, unit in graph.files.items()},
        "dependencyGraph": {
            "typeMap": {name: entry.to_dict() for name, entry in graph.type_map.items()},
            "edges": [edge.to_dict() for edge in graph.edges],
        },
        "indexes": graph.indexes.to_dict(),
    }


def _repo_prefix(repo_path: Any) -> str | None:
    if not isinstance(repo_path, str) or not repo_path:
        return None
    return repo_path.rstrip("/") + "/"


def _relative(path: str, prefix: str | None) -> str:
    if prefix and path.startswith(prefix):
        return path[len(prefix) :]
    return path


def _rebase_symbols(graph: Graph, prefix: str | None) -> None:
    """Rewrite absolute ``symbol.file`` values under the repo to unit ids."""
    if prefix is None:
        return
    symbols = [s for unit in graph.files.values() for s in unit.symbols]
    symbols.extend(entry.symbol for entry in graph.type_map.values())
    for symbol in symbols:
        symbol.file = _relative(symbol.file, prefix)


def from_document(document: Any) -> Graph:
    """Rebuild a graph from a snapshot document.

    Older snapshots key ``files`` (and each symbol's ``file``) by absolute
    path while the type map, edges and indexes use repo-relative ids; paths
    under ``repoPath`` are rewritten to the relative form.

    Raises:
        ValueError: If the document is not a structurally valid snapshot.
    """
    if not isinstance(document, dict):
        raise ValueError("snapshot root must be an object")
    missing = [key for key in SNAPSHOT_REQUIRED_KEYS if key not in document]
    if missing:
        raise ValueError(f"missing keys: {', '.join(missing)}")
    version = document.get("formatVersion", SNAPSHOT_FORMAT_VERSION)
    if not isinstance(version, int) or version > SNAPSHOT_FORMAT_VERSION:
        raise ValueError(f"unsupported formatVersion {version}")

    prefix = _repo_prefix(document.get("repoPath"))
    try:
        dependency_graph = document["dependencyGraph"] or {}
        graph = Graph(
            files={
                _relative(unit_id, prefix): UnitData.from_dict(unit)
                for unit_id, unit in (document["files"] or {}).items()
            },
            type_map={
                name: TypeMapEntry.from_dict(entry)
                for name, entry in (dependency_graph.get("typeMap") or {}).items()
            },
            edges=[Edge.from_dict(edge) for edge in dependency_graph.get("edges") or []],
            indexes=Indexes.from_dict(document["indexes"] or {}),
            repo_path=document.get("repoPath"),
            generated_at=document.get("generatedAt"),
        )
        _rebase_symbols(graph, prefix)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed entry: {e!r}") from e
    return graph


def save_snapshot(graph: Graph, path: Path) -> Path:
    """Write a snapshot atomically (temp file + replace).

    Raises:
        GraphError: If the file cannot be written.
    """
    document = to_document(graph)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise GraphError.snapshot_write_failed(str(path), str(e)) from e

    log.info("snapshot_saved", path=str(path), units=graph.unit_count)
    return path


def load_snapshot(path: Path) -> Graph:
    """Load a snapshot written by ``save_snapshot`` (or an earlier release).

    Raises:
        GraphError: SNAPSHOT_NOT_FOUND if the file is missing,
            SNAPSHOT_INVALID if it cannot be decoded.
    """
    if not path.is_file():
        raise GraphError.snapshot_not_found(str(path))
    try:
        with path.open(encoding="utf-8") as f:
            document = json.load(f)
        graph = from_document(document)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
        raise GraphError.snapshot_invalid(str(path), str(e)) from e

    log.info(
        "snapshot_loaded",
        path=str(path),
        units=graph.unit_count,
        types=len(graph.type_map),
    )
    return graph
