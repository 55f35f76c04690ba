"""Tool-boundary error conversion.

Tools never raise past the MCP boundary: every ``SymgraphError`` becomes a
result dict carrying the error code, a remediation hint and a one-line
summary so agents can self-correct.
"""

from __future__ import annotations

from typing import Any

from symgraph.core.errors import ErrorCode, SymgraphError

REMEDIATIONS: dict[ErrorCode, str] = {
    ErrorCode.GRAPH_NOT_LOADED: "Call init_repo with a project path or load_graph with a snapshot.",
    ErrorCode.SNAPSHOT_NOT_FOUND: "Check the snapshot path, or call init_repo to create one.",
    ErrorCode.SNAPSHOT_INVALID: "Rebuild the snapshot with init_repo.",
    ErrorCode.SNAPSHOT_WRITE_FAILED: "Check write permissions on the repository root.",
    ErrorCode.PARSER_NOT_FOUND: "Install the parser or set its path in .symgraph/config.yaml.",
    ErrorCode.PROJECT_NOT_FOUND: "Point at the folder containing the .xcodeproj or .xcworkspace.",
    ErrorCode.NO_SOURCE_UNITS: "Check parsers.skip_dirs; vendored folders are skipped by default.",
    ErrorCode.INTERNAL_TIMEOUT: "Raise parsers.timeout_sec or retry.",
}


def error_result(error: SymgraphError) -> dict[str, Any]:
    """Convert a typed error into a tool result."""
    return {
        "error": error.message,
        "code": error.error_name,
        "error_code": error.code.value,
        "retryable": error.retryable,
        "remediation": REMEDIATIONS.get(error.code, ""),
        "details": error.details,
        "summary": f"error: {error.error_name.lower()}",
    }


def not_found_result(kind: str, name: str, **extra: Any) -> dict[str, Any]:
    """Result for a lookup that found nothing. Not an error condition."""
    return {
        "found": False,
        kind: name,
        **extra,
        "summary": f"{kind} '{name}' not found",
    }
