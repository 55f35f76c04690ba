"""Graph lifecycle MCP tools.

- init_repo: Scan a project, build its graph, publish it and write the snapshot
- load_graph: Publish a previously written snapshot
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp import Context
from pydantic import Field

from symgraph.config.loader import get_snapshot_path
from symgraph.core.errors import GraphError, SymgraphError
from symgraph.core.formatting import format_duration, pluralize
from symgraph.mcp.errors import error_result
from symgraph.parsers.ops import scan_repository

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from symgraph.mcp.context import AppContext

log = structlog.get_logger(__name__)


# =============================================================================
# Summary Helpers
# =============================================================================


def _summarize_build(processed: int, errors: int, types: int, edges: int, seconds: float) -> str:
    parts = [f"built {pluralize(processed, 'unit')}"]
    if errors:
        parts.append(f"{pluralize(errors, 'error')}")
    parts.append(pluralize(types, "type"))
    parts.append(pluralize(edges, "edge"))
    return f"{', '.join(parts)} in {format_duration(seconds)}"


# =============================================================================
# Tool Registration
# =============================================================================


def register_tools(mcp: FastMCP, app_ctx: AppContext) -> None:
    """Register graph lifecycle tools with FastMCP server."""

    @mcp.tool
    async def init_repo(
        ctx: Context,  # noqa: ARG001
        repo_path: str = Field(..., description="Absolute path to the Swift/Objective-C project"),
    ) -> dict[str, Any]:
        """Scan a Swift/Objective-C project and build its symbol graph. Run this first.

        Requires an .xcworkspace, .xcodeproj or Package.swift at the root unless
        parsers.require_xcode_project is disabled.
        """
        root = Path(repo_path).expanduser()
        try:
            scan = await scan_repository(root, app_ctx.config, app_ctx.runner)
        except SymgraphError as e:
            log.warning("init_repo_failed", path=repo_path, error=e.error_name)
            return error_result(e)

        app_ctx.session.publish(scan.graph)
        app_ctx.repo_root = scan.root

        output: dict[str, Any] = {
            "repo_path": str(scan.root),
            "project": scan.project.to_dict() if scan.project else None,
            "stats": scan.stats.to_dict(),
            "types": len(scan.graph.type_map),
            "edges": len(scan.graph.edges),
            "duration_seconds": round(scan.duration_seconds, 2),
        }

        try:
            snapshot = app_ctx.session.save(get_snapshot_path(scan.root, app_ctx.config))
            output["snapshot"] = str(snapshot)
        except GraphError as e:
            # Graph stays published; only persistence failed
            log.warning("snapshot_save_failed", error=e.message)
            output["snapshot"] = None
            output["snapshot_error"] = e.message

        output["summary"] = _summarize_build(
            scan.stats.processed,
            scan.stats.errors,
            output["types"],
            output["edges"],
            scan.duration_seconds,
        )
        return output

    @mcp.tool
    async def load_graph(
        ctx: Context,  # noqa: ARG001
        snapshot_path: str = Field(..., description="Path to a snapshot JSON file"),
    ) -> dict[str, Any]:
        """Load a saved symbol graph snapshot and make it current.

        A failed load keeps the previously loaded graph.
        """
        path = Path(snapshot_path).expanduser()
        try:
            graph = app_ctx.session.load(path)
        except SymgraphError as e:
            return error_result(e)

        if graph.repo_path:
            app_ctx.repo_root = Path(graph.repo_path)
        return {
            "snapshot": str(path),
            "repo_path": graph.repo_path,
            "generated_at": graph.generated_at,
            "units": graph.unit_count,
            "types": len(graph.type_map),
            "edges": len(graph.edges),
            "summary": f"loaded {pluralize(graph.unit_count, 'unit')}, "
            f"{pluralize(len(graph.type_map), 'type')}",
        }
