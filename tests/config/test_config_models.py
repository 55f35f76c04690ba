"""Tests for configuration models and user config files."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from symgraph.config.models import (
    GraphConfig,
    LogOutputConfig,
    ParsersConfig,
    SymgraphConfig,
)
from symgraph.config.user_config import UserConfig, load_user_config, write_user_config


class TestLogOutputConfig:
    """Log destination validation."""

    def test_stream_destinations_accepted(self) -> None:
        assert LogOutputConfig(destination="stderr").destination == "stderr"
        assert LogOutputConfig(destination="stdout").destination == "stdout"

    def test_relative_file_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/symgraph.log")

    def test_absolute_file_accepted(self, tmp_path: Path) -> None:
        path = tmp_path / "symgraph.log"
        assert LogOutputConfig(destination=str(path)).destination == str(path)


class TestParsersConfig:
    """Parser configuration defaults and validation."""

    def test_defaults(self) -> None:
        config = ParsersConfig()

        assert config.sourcekitten_path == "sourcekitten"
        assert config.clang_path == "clang"
        assert config.timeout_sec == 60.0
        assert config.require_xcode_project is True
        assert "Pods" in config.skip_dirs

    def test_zero_concurrency_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParsersConfig(max_concurrency=0)


class TestGraphConfig:
    def test_zero_workers_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GraphConfig(extract_workers=0)


class TestSymgraphConfig:
    def test_sections_present(self) -> None:
        config = SymgraphConfig()

        assert config.graph.snapshot_name == "app.json"
        assert config.limits.members_shown == 10
        assert config.logging.outputs[0].destination == "stderr"


class TestUserConfigFile:
    """write_user_config / load_user_config."""

    def test_defaults_written_as_comments(self, tmp_path: Path) -> None:
        """A default config has no active keys."""
        path = tmp_path / ".symgraph" / "config.yaml"

        write_user_config(path, UserConfig())

        assert yaml.safe_load(path.read_text()) is None
        assert "# snapshot_name: app.json" in path.read_text()

    def test_non_defaults_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        original = UserConfig(snapshot_name="graph.json", log_level="DEBUG", clang_args=["-Iinc"])

        write_user_config(path, original)
        loaded = load_user_config(path)

        assert loaded == original

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_user_config(tmp_path / "absent.yaml") == UserConfig()

    def test_invalid_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("snapshot_name: [unclosed")

        assert load_user_config(path) == UserConfig()
