"""MCP server exposing symbol graph tools."""

from symgraph.mcp.context import AppContext
from symgraph.mcp.server import create_mcp_server, run_server

__all__ = ["AppContext", "create_mcp_server", "run_server"]
