"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (SYMGRAPH__SECTION__KEY)
3. Explicit config file (config_file argument or SYMGRAPH_CONFIG)
4. User config (.symgraph/config.yaml) - minimal user-facing options
5. Global config (~/.config/symgraph/config.yaml)
6. Built-in defaults (lowest priority)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from symgraph.config.models import (
    GraphConfig,
    LimitsConfig,
    LoggingConfig,
    ParsersConfig,
    SymgraphConfig,
)
from symgraph.config.user_config import UserConfig, load_user_config
from symgraph.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/symgraph/config.yaml").expanduser()
CONFIG_FILE_ENV = "SYMGRAPH_CONFIG"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _explicit_config(config_file: Path | None) -> dict[str, Any]:
    """Sectioned YAML named by the caller or SYMGRAPH_CONFIG; it must exist."""
    if config_file is None:
        env_value = os.environ.get(CONFIG_FILE_ENV)
        if not env_value:
            return {}
        config_file = Path(env_value).expanduser()
    if not config_file.is_file():
        raise ConfigError.file_not_found(str(config_file))
    return _load_yaml(config_file)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _user_config_to_yaml(user_config: UserConfig) -> dict[str, Any]:
    """Map explicitly set user-facing fields onto the sectioned internal structure."""
    set_fields = user_config.model_fields_set
    config: dict[str, Any] = {}
    if "snapshot_name" in set_fields:
        config["graph"] = {"snapshot_name": user_config.snapshot_name}
    if "log_level" in set_fields:
        config["logging"] = {"level": user_config.log_level}
    if "clang_args" in set_fields:
        config["parsers"] = {"clang_args": user_config.clang_args}
    return config


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class SymgraphSettings(BaseSettings):
        """Root config. Env vars: SYMGRAPH__LOGGING__LEVEL, SYMGRAPH__GRAPH__SNAPSHOT_NAME, etc."""

        model_config = SettingsConfigDict(
            env_prefix="SYMGRAPH__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        parsers: ParsersConfig = ParsersConfig()
        graph: GraphConfig = GraphConfig()
        limits: LimitsConfig = LimitsConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return SymgraphSettings


SymgraphSettings = _make_settings_class({})


def load_config(
    repo_root: Path | None = None, config_file: Path | None = None, **kwargs: Any
) -> SymgraphConfig:
    """Load config: defaults < global YAML < user config < explicit file < env vars < kwargs.

    Args:
        repo_root: Repository whose .symgraph/config.yaml is read.
                   Defaults to current working directory.
        config_file: Sectioned YAML file applied over the repo config.
                     Falls back to the SYMGRAPH_CONFIG environment variable.
        **kwargs: Override values (highest precedence), keyed by section.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors, or when
            the explicit config file does not exist.
    """
    repo_root = repo_root or Path.cwd()
    user_config = load_user_config(repo_root / ".symgraph" / "config.yaml")

    yaml_config = _user_config_to_yaml(user_config)

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(global_config, yaml_config)

    explicit = _explicit_config(config_file)
    if explicit:
        yaml_config = _deep_merge(yaml_config, explicit)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return SymgraphConfig.model_validate(settings.model_dump())


def get_snapshot_path(repo_root: Path, config: SymgraphConfig | None = None) -> Path:
    """Snapshot location for a repository, respecting graph.snapshot_name."""
    config = config or load_config(repo_root)
    return repo_root / config.graph.snapshot_name
