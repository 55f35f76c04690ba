"""Graph and index construction over complete sets of unit symbol tables."""

from symgraph.graph._internal.building.dependency import build_edges, build_type_map
from symgraph.graph._internal.building.indexes import build_indexes

__all__ = ["build_edges", "build_indexes", "build_type_map"]
