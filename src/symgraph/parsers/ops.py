"""Repository scan: detect, discover, parse, build.

Shared by the ``init_repo`` tool and the ``build`` command. The result graph
is not published; callers hand it to their ``GraphSession``.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path

import structlog

from symgraph.config.models import SymgraphConfig
from symgraph.core.errors import ParserError
from symgraph.graph.models import BuildStats, Graph
from symgraph.graph.ops import build_graph
from symgraph.parsers.discovery import ProjectInfo, detect_project, find_source_units
from symgraph.parsers.runner import ParserRunner

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScanResult:
    root: Path
    project: ProjectInfo | None
    graph: Graph
    stats: BuildStats
    duration_seconds: float


async def scan_repository(
    root: Path,
    config: SymgraphConfig | None = None,
    runner: ParserRunner | None = None,
) -> ScanResult:
    """Build a graph for every source unit under ``root``.

    Parse failures and extraction failures are both counted in the returned
    stats; neither aborts the scan.

    Raises:
        ParserError: PROJECT_NOT_FOUND, NO_SOURCE_UNITS or PARSER_NOT_FOUND.
    """
    config = config or SymgraphConfig()
    runner = runner or ParserRunner(config.parsers)
    start = time.perf_counter()

    root = root.expanduser().resolve()
    if not root.is_dir():
        raise ParserError.project_not_found(str(root))

    project = detect_project(root)
    if project is None and config.parsers.require_xcode_project:
        raise ParserError.project_not_found(str(root))

    units = find_source_units(root, skip_dirs=config.parsers.skip_dirs)
    if not units:
        raise ParserError.no_source_units(str(root))

    log.info(
        "scan_started",
        root=str(root),
        project=project.kind if project else None,
        units=len(units),
    )

    parsed = await runner.run(units, cwd=root)
    # Extraction is CPU bound; keep the event loop free while it runs
    build = await asyncio.to_thread(
        build_graph,
        parsed.units,
        repo_path=str(root),
        max_workers=config.graph.extract_workers,
    )

    stats = BuildStats(
        total=len(units),
        processed=build.stats.processed,
        errors=build.stats.errors + len(parsed.failures),
        failed_units=[*parsed.failures, *build.stats.failed_units],
    )
    duration = time.perf_counter() - start
    log.info(
        "scan_complete",
        root=str(root),
        processed=stats.processed,
        errors=stats.errors,
        duration_ms=round(duration * 1000, 1),
    )
    return ScanResult(
        root=root,
        project=project,
        graph=build.graph,
        stats=stats,
        duration_seconds=duration,
    )
