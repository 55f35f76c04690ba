"""Shared fixtures for MCP tests.

Tools are registered against ``ToolCollector`` instead of a live FastMCP
server so tests call the handler coroutines directly. Every parameter must be
passed explicitly: unfilled ``Field`` defaults are only resolved by FastMCP.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from symgraph.config.models import SymgraphConfig
from symgraph.graph import Dialect, Graph, GraphSession, build_graph
from symgraph.mcp.context import AppContext
from symgraph.parsers.runner import ParserRunner

SK = "source.lang.swift.decl."

Tool = Callable[..., Any]


class ToolCollector:
    """Stands in for FastMCP: ``@mcp.tool`` records the handler by name."""

    def __init__(self) -> None:
        self.tools: dict[str, Tool] = {}

    def tool(self, fn: Tool) -> Tool:
        self.tools[fn.__name__] = fn
        return fn


def _decl(kind: str, name: str, *inherits: str, **keys: Any) -> dict[str, Any]:
    node: dict[str, Any] = {"key.kind": SK + kind, "key.name": name}
    if inherits:
        node["key.inheritedtypes"] = [{"key.name": t} for t in inherits]
    node.update({f"key.{k}": v for k, v in keys.items()})
    return node


@pytest.fixture
def service_graph() -> Graph:
    """Four Swift units around a BaseService hierarchy."""
    user_service = _decl(
        "class",
        "UserService",
        "BaseService",
        "Cacheable",
        substructure=[
            *(_decl("var.instance", f"field{i}", typename="String") for i in range(12)),
            _decl("function.method.instance", "init(client:)"),
            _decl("function.method.instance", "fetch()", typename="User"),
        ],
    )
    raw = {
        "Sources/Base.swift": [_decl("class", "BaseService"), _decl("protocol", "Cacheable")],
        "Sources/UserService.swift": [user_service],
        "Sources/Extensions/UserService+Logging.swift": [
            _decl("extension", "UserService", "Loggable")
        ],
        "Sources/OrderService.swift": [
            _decl("class", "OrderService", "BaseService"),
            _decl("function.free", "makeOrder()"),
        ],
    }
    return build_graph(
        {unit: (Dialect.SWIFT, {"key.substructure": decls}) for unit, decls in raw.items()},
        repo_path="/repo",
    ).graph


@pytest.fixture
def app_ctx(service_graph: Graph) -> AppContext:
    config = SymgraphConfig()
    return AppContext(
        config=config,
        session=GraphSession(service_graph),
        runner=ParserRunner(config.parsers),
    )


@pytest.fixture
def empty_ctx() -> AppContext:
    """Context with nothing built or loaded."""
    return AppContext.create(config=SymgraphConfig())


@pytest.fixture
def mcp_ctx() -> MagicMock:
    """Stand-in for the per-request FastMCP Context."""
    return MagicMock()


@pytest.fixture
def collector() -> ToolCollector:
    return ToolCollector()
