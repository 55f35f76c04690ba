"""Source unit discovery and project detection."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from symgraph.core.excludes import is_skipped_dir
from symgraph.graph.models import Dialect

log = structlog.get_logger(__name__)

SUFFIX_DIALECTS: dict[str, Dialect] = {
    ".swift": Dialect.SWIFT,
    ".h": Dialect.OBJC,
    ".m": Dialect.OBJC,
    ".mm": Dialect.OBJC,
}

SWIFTPM_MANIFEST = "Package.swift"


@dataclass(frozen=True)
class ProjectInfo:
    """Detected project container."""

    kind: str  # xcworkspace, xcodeproj, swiftpm
    path: Path
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "path": str(self.path), "name": self.name}


@dataclass(frozen=True)
class SourceUnit:
    path: Path
    unit_id: str
    dialect: Dialect


def detect_project(root: Path) -> ProjectInfo | None:
    """Find the project container at ``root``.

    A workspace wins over a project (it may wrap Pods or packages); a SwiftPM
    manifest is used only when neither exists.
    """
    workspace: Path | None = None
    project: Path | None = None
    for entry in sorted(root.iterdir()):
        if not entry.is_dir():
            continue
        if entry.suffix == ".xcworkspace" and workspace is None:
            workspace = entry
        elif entry.suffix == ".xcodeproj" and project is None:
            project = entry

    if workspace is not None:
        return ProjectInfo(kind="xcworkspace", path=workspace, name=workspace.stem)
    if project is not None:
        return ProjectInfo(kind="xcodeproj", path=project, name=project.stem)
    manifest = root / SWIFTPM_MANIFEST
    if manifest.is_file():
        return ProjectInfo(kind="swiftpm", path=manifest, name=root.name)
    return None


def unit_id(path: Path, root: Path) -> str:
    """Unit identifier: POSIX path relative to the repo root."""
    return path.relative_to(root).as_posix()


def dialect_for(path: Path) -> Dialect | None:
    return SUFFIX_DIALECTS.get(path.suffix)


def find_source_units(
    root: Path,
    dialects: Iterable[Dialect | str] | None = None,
    skip_dirs: Iterable[str] | None = None,
) -> list[SourceUnit]:
    """Recursively collect source units under ``root``, sorted by unit id.

    Directories named in ``skip_dirs`` (default set when None) are pruned
    along with everything below them. Only suffixes mapping to an enabled
    dialect are returned.
    """
    enabled = {Dialect(d) for d in dialects} if dialects is not None else set(Dialect)
    skip = frozenset(skip_dirs) if skip_dirs is not None else None

    units: list[SourceUnit] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not is_skipped_dir(d, skip)]
        base = Path(dirpath)
        for filename in filenames:
            path = base / filename
            dialect = dialect_for(path)
            if dialect is None or dialect not in enabled:
                continue
            units.append(SourceUnit(path=path, unit_id=unit_id(path, root), dialect=dialect))

    units.sort(key=lambda u: u.unit_id)
    log.debug("source_units_found", root=str(root), count=len(units))
    return units
