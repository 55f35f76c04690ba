"""Minimal user-facing configuration.

This module defines only the config fields that users should care about.
Everything else uses opinionated defaults.

User config is stored in .symgraph/config.yaml inside the scanned repository.
"""

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

log = structlog.get_logger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_SNAPSHOT_NAME = "app.json"
DEFAULT_LOG_LEVEL: LogLevel = "INFO"


class UserConfig(BaseModel):
    """User-facing configuration options."""

    snapshot_name: str = Field(
        default=DEFAULT_SNAPSHOT_NAME,
        description="Snapshot file written at the repository root.",
    )
    log_level: LogLevel = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Log level. DEBUG is very verbose.",
    )
    clang_args: list[str] = Field(
        default_factory=list,
        description="Extra clang arguments for Objective-C sources.",
    )


def write_user_config(path: Path, config: UserConfig | None = None) -> None:
    """Write user config file with helpful comments.

    Non-default values are written active, defaults as comments.
    """
    cfg = config or UserConfig()

    lines = [
        "# symgraph configuration",
        "",
        "# Snapshot file written at the repository root",
    ]
    if cfg.snapshot_name != DEFAULT_SNAPSHOT_NAME:
        lines.append(f"snapshot_name: {cfg.snapshot_name}")
    else:
        lines.append(f"# snapshot_name: {cfg.snapshot_name}")
    lines.append("")

    lines.append("# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL")
    if cfg.log_level != DEFAULT_LOG_LEVEL:
        lines.append(f"log_level: {cfg.log_level}")
    else:
        lines.append(f"# log_level: {cfg.log_level}")
    lines.append("")

    lines.append("# Extra clang arguments for Objective-C sources (e.g. -I include)")
    if cfg.clang_args:
        lines.append(yaml.dump({"clang_args": cfg.clang_args}, default_flow_style=None).strip())
    else:
        lines.append("# clang_args: []")
    lines.append("")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines))


def load_user_config(path: Path) -> UserConfig:
    """Load user config from YAML file, falling back to defaults when unreadable."""
    if not path.exists():
        return UserConfig()
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        return UserConfig(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        log.warning("user_config_ignored", path=str(path), error=str(e))
        return UserConfig()
