"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are compatibility constraints and API stability limits.

For configurable values, see models.py (LimitsConfig, GraphConfig, etc.).
"""

# =============================================================================
# MCP Tool Limits
# =============================================================================
# Hard caps for API stability. Users can configure defaults below these,
# but cannot exceed them.

SEARCH_MAX_LIMIT = 500
"""Maximum search results returned by a single tool call."""

# =============================================================================
# Snapshot Compatibility
# =============================================================================

SNAPSHOT_FORMAT_VERSION = 1
"""Written into every snapshot. Snapshots without it predate versioning and still load."""

SNAPSHOT_REQUIRED_KEYS = ("files", "dependencyGraph", "indexes")
"""Top-level document keys a snapshot must carry to be loadable."""

# =============================================================================
# Dialect Conventions
# =============================================================================

SOURCEKIT_ACCESSIBILITY_PREFIX = "source.lang.swift.accessibility."
"""Prefix stripped from SourceKit accessibility values."""

INITIALIZER_PREFIX = "init"
"""Method names starting with this marker are initializers (Swift and Objective-C)."""

PUBLIC_INTERFACE_SUFFIXES = frozenset((".h",))
"""Units whose declarations default to public accessibility."""
