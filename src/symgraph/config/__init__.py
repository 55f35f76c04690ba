"""Config module exports."""

from symgraph.config.loader import SymgraphSettings, get_snapshot_path, load_config
from symgraph.config.models import (
    GraphConfig,
    LimitsConfig,
    LoggingConfig,
    LogOutputConfig,
    ParsersConfig,
    SymgraphConfig,
)

__all__ = [
    "load_config",
    "get_snapshot_path",
    "SymgraphConfig",
    "SymgraphSettings",
    "GraphConfig",
    "LimitsConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ParsersConfig",
]
