"""Graph build orchestration and the session that owns the published graph.

Build phases:
1. Extract every unit in a thread pool (per-unit work is pure)
2. Join
3. Build type map, edges and indexes over the complete set, in input order

A build never touches the published graph. ``GraphSession.publish`` swaps the
reference in one step, so queries already holding an engine keep reading the
graph they started with.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from symgraph.core.errors import GraphError
from symgraph.graph._internal.building import build_edges, build_indexes, build_type_map
from symgraph.graph._internal.extraction import extract_unit
from symgraph.graph.models import BuildResult, BuildStats, Dialect, Graph, UnitData
from symgraph.graph.query import QueryEngine
from symgraph.graph.snapshot import load_snapshot, save_snapshot

log = structlog.get_logger(__name__)

# unit id -> (dialect, raw AST)
RawUnits = Mapping[str, tuple[Dialect | str, Any]]


def build_graph(
    raw_units: RawUnits,
    *,
    repo_path: str | None = None,
    max_workers: int = 4,
) -> BuildResult:
    """Build a complete graph from raw per-unit ASTs.

    A unit whose extraction raises is left out of the graph and counted in
    ``BuildStats``; the remaining units are still built.
    """
    start = time.perf_counter()
    stats = BuildStats(total=len(raw_units))
    extracted: dict[str, UnitData] = {}

    if raw_units:
        with ThreadPoolExecutor(
            max_workers=max(1, min(max_workers, len(raw_units))),
            thread_name_prefix="symgraph-extract",
        ) as executor:
            futures = {
                unit_id: executor.submit(extract_unit, dialect, ast, unit_id)
                for unit_id, (dialect, ast) in raw_units.items()
            }
            for unit_id, future in futures.items():
                try:
                    extracted[unit_id] = future.result()
                except Exception as e:
                    stats.errors += 1
                    stats.failed_units.append(unit_id)
                    log.warning("unit_extraction_failed", unit=unit_id, error=str(e))

    # Barrier: cross-unit passes need every table, in input order
    units = {unit_id: extracted[unit_id] for unit_id in raw_units if unit_id in extracted}
    stats.processed = len(units)

    type_map = build_type_map(units)
    graph = Graph(
        files=units,
        type_map=type_map,
        edges=build_edges(units, type_map),
        indexes=build_indexes(units),
        repo_path=repo_path,
        generated_at=datetime.now(UTC).isoformat(),
    )

    log.info(
        "graph_built",
        units=stats.processed,
        errors=stats.errors,
        types=len(graph.type_map),
        edges=len(graph.edges),
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return BuildResult(graph=graph, stats=stats)


class GraphSession:
    """Holds the single current graph for one logical session."""

    def __init__(self, graph: Graph | None = None) -> None:
        self._lock = threading.Lock()
        self._graph = graph

    @property
    def loaded(self) -> bool:
        return self._graph is not None

    @property
    def current(self) -> Graph:
        """The published graph.

        Raises:
            GraphError: GRAPH_NOT_LOADED if nothing has been built or loaded.
        """
        graph = self._graph
        if graph is None:
            raise GraphError.not_loaded()
        return graph

    def publish(self, graph: Graph) -> None:
        with self._lock:
            previous = self._graph
            self._graph = graph
        log.debug(
            "graph_published",
            units=graph.unit_count,
            replaced=previous is not None,
        )

    def clear(self) -> None:
        with self._lock:
            self._graph = None

    def query(self) -> QueryEngine:
        """A query engine bound to the graph published right now."""
        return QueryEngine(self.current)

    def load(self, path: Path) -> Graph:
        """Load a snapshot and publish it. On failure the previous graph stays."""
        graph = load_snapshot(path)
        self.publish(graph)
        return graph

    def save(self, path: Path) -> Path:
        return save_snapshot(self.current, path)
