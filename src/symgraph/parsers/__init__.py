"""Source discovery and external parser invocation."""

from symgraph.parsers.discovery import (
    SUFFIX_DIALECTS,
    ProjectInfo,
    SourceUnit,
    detect_project,
    find_source_units,
    unit_id,
)
from symgraph.parsers.ops import ScanResult, scan_repository
from symgraph.parsers.runner import ParserRunner, ParseRun

__all__ = [
    "ParseRun",
    "ParserRunner",
    "ProjectInfo",
    "SUFFIX_DIALECTS",
    "ScanResult",
    "SourceUnit",
    "detect_project",
    "find_source_units",
    "scan_repository",
    "unit_id",
]
