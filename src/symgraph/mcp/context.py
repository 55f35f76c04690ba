"""Application context for MCP handlers.

Single object passed to all tool handlers with access to the graph session,
configuration and parser runner.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from symgraph.config.models import SymgraphConfig
from symgraph.graph.ops import GraphSession
from symgraph.parsers.runner import ParserRunner


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers.

    ``repo_root`` is the last repository built or loaded, if any.
    """

    config: SymgraphConfig
    session: GraphSession
    runner: ParserRunner
    repo_root: Path | None = None

    @classmethod
    def create(
        cls,
        repo_root: Path | None = None,
        config: SymgraphConfig | None = None,
    ) -> AppContext:
        """Factory wiring a fresh session and runner to one configuration."""
        if config is None:
            from symgraph.config.loader import load_config

            config = load_config(repo_root)

        return cls(
            config=config,
            session=GraphSession(),
            runner=ParserRunner(config.parsers),
            repo_root=repo_root,
        )
