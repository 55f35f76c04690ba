"""Shared fixtures for parser tests."""

from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest

from symgraph.config.models import ParsersConfig


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def xcode_repo(tmp_path: Path) -> Path:
    """A small Xcode project with Swift and Objective-C sources plus vendored noise."""
    root = tmp_path / "App"
    (root / "App.xcodeproj").mkdir(parents=True)
    _touch(root / "App" / "AppDelegate.swift", "class AppDelegate {}\n")
    _touch(root / "App" / "Models" / "User.swift", "struct User {}\n")
    _touch(root / "Legacy" / "Profile.h", "@interface Profile\n@end\n")
    _touch(root / "Legacy" / "Profile.m", "@implementation Profile\n@end\n")
    _touch(root / "Legacy" / "Bridge.mm", "")
    _touch(root / "README.md", "# App\n")
    _touch(root / "Pods" / "Alamofire" / "Session.swift", "")
    _touch(root / "build" / "Generated.swift", "")
    _touch(root / ".git" / "hooks" / "pre-commit.swift", "")
    return root


@pytest.fixture
def fake_parsers(tmp_path: Path) -> ParsersConfig:
    """Executable stand-ins for sourcekitten and clang that print a fixed AST."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    swift_ast = {
        "key.substructure": [{"key.kind": "source.lang.swift.decl.class", "key.name": "Stub"}]
    }
    clang_ast = {
        "kind": "TranslationUnitDecl",
        "inner": [{"kind": "ObjCProtocolDecl", "name": "StubProtocol"}],
    }

    def script(name: str, payload: dict[str, object]) -> str:
        path = bin_dir / name
        path.write_text(f"#!/bin/sh\ncat <<'EOF'\n{json.dumps(payload)}\nEOF\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return ParsersConfig(
        sourcekitten_path=script("sourcekitten", swift_ast),
        clang_path=script("clang", clang_ast),
        max_concurrency=2,
        timeout_sec=30,
    )
