"""Symgraph error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Graph (build, snapshot, query preconditions)
- 4xxx: Parser (external AST producers, discovery)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Graph (3xxx)
    GRAPH_NOT_LOADED = 3001
    SNAPSHOT_NOT_FOUND = 3002
    SNAPSHOT_INVALID = 3003
    SNAPSHOT_WRITE_FAILED = 3004

    # Parser (4xxx)
    PARSER_NOT_FOUND = 4001
    PARSE_FAILED = 4002
    PROJECT_NOT_FOUND = 4003
    NO_SOURCE_UNITS = 4004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_TIMEOUT = 9002


@dataclass(frozen=True, slots=True)
class SymgraphError(Exception):
    """Base error with structured context for tool responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'GRAPH_NOT_LOADED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/MCP responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SymgraphError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class GraphError(SymgraphError):
    """Symbol graph lifecycle errors."""

    @classmethod
    def not_loaded(cls) -> "GraphError":
        return cls(
            code=ErrorCode.GRAPH_NOT_LOADED,
            message="No symbol graph loaded. Build a repository or load a snapshot first.",
            retryable=True,
        )

    @classmethod
    def snapshot_not_found(cls, path: str) -> "GraphError":
        return cls(
            code=ErrorCode.SNAPSHOT_NOT_FOUND,
            message=f"Snapshot not found: {path}",
            details={"path": path},
        )

    @classmethod
    def snapshot_invalid(cls, path: str, reason: str) -> "GraphError":
        return cls(
            code=ErrorCode.SNAPSHOT_INVALID,
            message=f"Malformed snapshot at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def snapshot_write_failed(cls, path: str, reason: str) -> "GraphError":
        return cls(
            code=ErrorCode.SNAPSHOT_WRITE_FAILED,
            message=f"Failed to write snapshot to {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )


class ParserError(SymgraphError):
    """External parser and source discovery errors."""

    @classmethod
    def parser_not_found(cls, executable: str, hint: str = "") -> "ParserError":
        message = f"Parser executable not found: {executable}"
        if hint:
            message = f"{message}. {hint}"
        return cls(
            code=ErrorCode.PARSER_NOT_FOUND,
            message=message,
            details={"executable": executable},
        )

    @classmethod
    def parse_failed(cls, unit: str, reason: str) -> "ParserError":
        return cls(
            code=ErrorCode.PARSE_FAILED,
            message=f"Failed to parse {unit}: {reason}",
            details={"unit": unit, "reason": reason},
        )

    @classmethod
    def project_not_found(cls, path: str) -> "ParserError":
        return cls(
            code=ErrorCode.PROJECT_NOT_FOUND,
            message=f"No .xcworkspace, .xcodeproj or Package.swift found in {path}",
            details={"path": path},
        )

    @classmethod
    def no_source_units(cls, path: str) -> "ParserError":
        return cls(
            code=ErrorCode.NO_SOURCE_UNITS,
            message=f"No Swift or Objective-C sources found in {path}",
            details={"path": path},
        )


class InternalError(SymgraphError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def timeout(cls, operation: str, seconds: float) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_TIMEOUT,
            message=f"{operation} timed out after {seconds}s",
            retryable=True,
            details={"operation": operation, "seconds": seconds},
        )
