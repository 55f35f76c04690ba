"""Symbol graph: extraction, construction, persistence and queries."""

from symgraph.graph.models import (
    EDGE_SOURCE_KINDS,
    INDEXED_KINDS,
    TYPE_KINDS,
    Accessibility,
    BuildResult,
    BuildStats,
    Dialect,
    Edge,
    Graph,
    IndexLocation,
    Indexes,
    Member,
    MemberSet,
    Symbol,
    SymbolKind,
    SymbolTable,
    TypeMapEntry,
    UnitData,
)
from symgraph.graph.ops import GraphSession, RawUnits, build_graph
from symgraph.graph.query import (
    CodebaseStats,
    Explanation,
    FileOverview,
    QueryEngine,
    ResolvedSymbol,
    SearchHit,
    Usages,
)
from symgraph.graph.snapshot import from_document, load_snapshot, save_snapshot, to_document

__all__ = [
    # Models
    "Accessibility",
    "BuildResult",
    "BuildStats",
    "Dialect",
    "EDGE_SOURCE_KINDS",
    "Edge",
    "Graph",
    "INDEXED_KINDS",
    "IndexLocation",
    "Indexes",
    "Member",
    "MemberSet",
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    "TYPE_KINDS",
    "TypeMapEntry",
    "UnitData",
    # Build / session
    "GraphSession",
    "RawUnits",
    "build_graph",
    # Queries
    "CodebaseStats",
    "Explanation",
    "FileOverview",
    "QueryEngine",
    "ResolvedSymbol",
    "SearchHit",
    "Usages",
    # Snapshots
    "from_document",
    "load_snapshot",
    "save_snapshot",
    "to_document",
]
