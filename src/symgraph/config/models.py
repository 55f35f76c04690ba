"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SYMGRAPH__SECTION__KEY)
3. Repo YAML (.symgraph/config.yaml)
4. Global YAML (~/.config/symgraph/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SYMGRAPH__<SECTION>__<KEY>=<VALUE>

Examples:
    SYMGRAPH__LOGGING__LEVEL=DEBUG
    SYMGRAPH__PARSERS__MAX_CONCURRENCY=16
    SYMGRAPH__GRAPH__SNAPSHOT_NAME=graph.json
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from symgraph.core.excludes import DEFAULT_SKIP_DIRS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SYMGRAPH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every extracted unit.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ParsersConfig(BaseModel):
    """External AST producer configuration.

    Env vars:
        SYMGRAPH__PARSERS__SOURCEKITTEN_PATH: SourceKitten executable
        SYMGRAPH__PARSERS__CLANG_PATH: clang executable
        SYMGRAPH__PARSERS__MAX_CONCURRENCY: Parallel parser invocations
        SYMGRAPH__PARSERS__TIMEOUT_SEC: Per-unit parser timeout
    """

    sourcekitten_path: str = Field(
        default="sourcekitten",
        description="SourceKitten executable used for Swift structure dumps.",
    )
    clang_path: str = Field(
        default="clang",
        description="clang executable used for Objective-C JSON AST dumps.",
    )
    clang_args: list[str] = Field(
        default_factory=list,
        description="Extra clang arguments (include paths, -fmodules, SDK flags).",
    )
    max_concurrency: int = Field(
        default=8,
        description="Parallel parser processes. Bounded by the number of source units.",
    )
    timeout_sec: float = Field(
        default=60.0,
        description="Per-unit parser timeout. A timed-out unit counts as an error.",
    )
    require_xcode_project: bool = Field(
        default=True,
        description="Refuse to scan directories without .xcworkspace, .xcodeproj or Package.swift.",
    )
    skip_dirs: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_SKIP_DIRS),
        description="Directory names never traversed during discovery.",
    )

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {v}")
        return v


class GraphConfig(BaseModel):
    """Graph build and snapshot configuration.

    Env vars:
        SYMGRAPH__GRAPH__SNAPSHOT_NAME: Snapshot file name under the repo root
        SYMGRAPH__GRAPH__EXTRACT_WORKERS: Thread pool size for per-unit extraction
    """

    snapshot_name: str = Field(
        default="app.json",
        description="Snapshot file written next to the scanned sources.",
    )
    extract_workers: int = Field(
        default=4,
        description="Worker threads for symbol extraction. Extraction is pure per unit.",
    )

    @field_validator("extract_workers")
    @classmethod
    def validate_extract_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"extract_workers must be >= 1, got {v}")
        return v


class LimitsConfig(BaseModel):
    """Display limits for tool and CLI output.

    The query engine itself is unbounded; these only shape responses.

    Env vars:
        SYMGRAPH__LIMITS__SEARCH_DEFAULT: Default search results
        SYMGRAPH__LIMITS__MEMBERS_SHOWN: Properties/methods listed per symbol
    """

    search_default: int = Field(default=25, description="Default search results shown.")
    members_shown: int = Field(default=10, description="Properties and methods listed per symbol.")
    references_shown: int = Field(default=5, description="Referencing units listed per symbol.")
    overview_items: int = Field(default=10, description="Symbols listed per file overview section.")
    largest_files: int = Field(default=5, description="Units listed in codebase statistics.")


class SymgraphConfig(BaseModel):
    """Root configuration for symgraph.

    All settings can be configured via:
    1. Environment variables: SYMGRAPH__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    parsers: ParsersConfig = Field(default_factory=ParsersConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
