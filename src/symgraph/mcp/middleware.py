"""MCP middleware: per-call request correlation and timing.

Every tool call runs under its own request id, so all log events emitted
while answering it (graph loads, parser runs, query misses) share one
``request_id`` in the JSON log.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.server.middleware import Middleware, MiddlewareContext

from symgraph.core.logging import request_scope

if TYPE_CHECKING:
    from fastmcp.server.middleware import CallNext
    from mcp import types as mt

log = structlog.get_logger(__name__)

# Arguments worth echoing into tool_start; anything else stays out of the log
_LOGGED_ARGS = ("repo_path", "snapshot_path", "symbol_name", "query", "kind", "limit", "file_path")


class ToolMiddleware(Middleware):
    """Wraps each tool call in a request scope with start/end log events."""

    async def on_call_tool(  # type: ignore[override]
        self,
        context: MiddlewareContext[mt.CallToolRequest],
        call_next: CallNext[mt.CallToolRequest, Any],
    ) -> Any:
        params = context.message
        tool_name = getattr(params, "name", "unknown")
        arguments = getattr(params, "arguments", {}) or {}
        log_params = {k: arguments[k] for k in _LOGGED_ARGS if k in arguments}

        with request_scope():
            start_time = time.perf_counter()
            log.info("tool_start", tool=tool_name, **log_params)
            try:
                result = await call_next(context)
            except Exception as e:
                log.warning(
                    "tool_failed",
                    tool=tool_name,
                    error=type(e).__name__,
                    duration_ms=_elapsed_ms(start_time),
                )
                raise
            log.info(
                "tool_completed",
                tool=tool_name,
                duration_ms=_elapsed_ms(start_time),
            )
            return result


def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 1)
