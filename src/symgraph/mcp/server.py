"""FastMCP server creation and wiring.

The stdio transport owns stdout: the server logs to stderr (INFO) and to a
JSON file (DEBUG) only.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from symgraph.config.models import SymgraphConfig
    from symgraph.mcp.context import AppContext

log = structlog.get_logger(__name__)

SERVER_NAME = "symgraph"
SERVER_INSTRUCTIONS = (
    "Symbol graph for Swift and Objective-C projects. Call init_repo (or load_graph) first, "
    "then explain_symbol, search_symbols, get_codebase_stats and get_file_overview."
)


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext holding the session, config and parser runner

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from symgraph.mcp.middleware import ToolMiddleware
    from symgraph.mcp.tools import graph, query

    log.info(
        "mcp_server_creating",
        repo_root=str(context.repo_root) if context.repo_root else None,
    )

    mcp = FastMCP(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    mcp.add_middleware(ToolMiddleware())
    graph.register_tools(mcp, context)
    query.register_tools(mcp, context)

    log.info("mcp_server_created")
    return mcp


def default_log_file(repo_root: Path | None) -> Path:
    base = repo_root if repo_root is not None else Path.home()
    return base / ".symgraph" / "mcp-server.log"


def run_server(repo_root: Path | None = None, config: SymgraphConfig | None = None) -> None:
    """Create and run the MCP server over stdio.

    If ``repo_root`` holds a snapshot it is loaded at startup; a missing or
    broken snapshot only logs a warning.
    """
    from symgraph.config.loader import get_snapshot_path, load_config
    from symgraph.config.models import LoggingConfig, LogOutputConfig
    from symgraph.core.errors import GraphError
    from symgraph.core.logging import configure_logging
    from symgraph.mcp.context import AppContext

    config = config or load_config(repo_root)

    # Console: INFO level, no tracebacks
    # File: DEBUG level with full tracebacks
    log_file = default_log_file(repo_root)
    configure_logging(
        config=LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(destination="stderr", format="console", level="INFO"),
                LogOutputConfig(destination=str(log_file.resolve()), format="json", level="DEBUG"),
            ],
        )
    )

    log.info(
        "mcp_server_starting",
        repo_root=str(repo_root) if repo_root else None,
        log_file=str(log_file),
    )

    context = AppContext.create(repo_root, config)
    if repo_root is not None:
        snapshot = get_snapshot_path(repo_root, config)
        if snapshot.is_file():
            try:
                context.session.load(snapshot)
            except GraphError as e:
                log.warning("startup_snapshot_skipped", path=str(snapshot), error=e.message)

    mcp = create_mcp_server(context)

    log.info("mcp_server_running")
    mcp.run()
