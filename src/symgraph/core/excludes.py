"""Directory exclusion sets for source unit discovery.

Tier 0 (HARDCODED_DIRS): Never traversed, not user-configurable.
    - VCS internals, symgraph data directories

Tier 1 (DEFAULT_SKIP_DIRS): Excluded by default, overridable through
    ``parsers.skip_dirs`` in config.
    - Dependency managers, build outputs, caches
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        # Symgraph data
        ".symgraph",
    )
)

DEFAULT_SKIP_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # Apple dependency managers
        # -------------------------------------------------------------------------
        "Pods",
        "Carthage",
        ".swiftpm",
        # -------------------------------------------------------------------------
        # Build outputs
        # -------------------------------------------------------------------------
        ".build",
        "build",
        "DerivedData",
        # -------------------------------------------------------------------------
        # Tooling that ships its own sources
        # -------------------------------------------------------------------------
        "node_modules",
        "vendor",
    )
)


def is_skipped_dir(name: str, skip_dirs: frozenset[str] | None = None) -> bool:
    """Return True if a directory with this name must not be traversed."""
    if name in HARDCODED_DIRS:
        return True
    return name in (DEFAULT_SKIP_DIRS if skip_dirs is None else skip_dirs)
