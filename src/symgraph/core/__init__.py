"""Core module exports."""

from symgraph.core.errors import (
    ConfigError,
    ErrorCode,
    GraphError,
    InternalError,
    ParserError,
    SymgraphError,
)
from symgraph.core.logging import (
    configure_logging,
    get_request_id,
    request_scope,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "GraphError",
    "InternalError",
    "ParserError",
    "SymgraphError",
    # Logging
    "configure_logging",
    "get_request_id",
    "request_scope",
]
