"""MCP tool handlers."""

from symgraph.mcp.tools import graph, query

__all__ = [
    "graph",
    "query",
]
