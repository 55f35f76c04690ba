"""Type map and inheritance edge construction.

Both passes iterate units in input order. The type map is last-write-wins:
when several units declare a type with the same name, the unit processed
last owns the entry and earlier declarations are shadowed without error.
Edges are only emitted toward names present in the type map, so supertypes
declared outside the scanned tree never produce an edge.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from symgraph.graph.models import (
    EDGE_SOURCE_KINDS,
    TYPE_KINDS,
    Edge,
    TypeMapEntry,
    UnitData,
)

log = structlog.get_logger(__name__)


def build_type_map(units: Mapping[str, UnitData]) -> dict[str, TypeMapEntry]:
    type_map: dict[str, TypeMapEntry] = {}
    shadowed = 0
    for unit_id, unit in units.items():
        for symbol in unit.symbols.iter_kinds(TYPE_KINDS):
            previous = type_map.get(symbol.name)
            if previous is not None and previous.file != unit_id:
                shadowed += 1
            type_map[symbol.name] = TypeMapEntry(file=unit_id, kind=symbol.kind, symbol=symbol)
    if shadowed:
        log.debug("type_map_shadowed", count=shadowed)
    return type_map


def build_edges(
    units: Mapping[str, UnitData],
    type_map: Mapping[str, TypeMapEntry],
) -> list[Edge]:
    edges: list[Edge] = []
    unresolved = 0
    for unit_id, unit in units.items():
        for symbol in unit.symbols.iter_kinds(EDGE_SOURCE_KINDS):
            for inherited in symbol.inherited_types:
                target = type_map.get(inherited)
                if target is None:
                    unresolved += 1
                    continue
                edges.append(
                    Edge(
                        from_file=unit_id,
                        to_file=target.file,
                        from_symbol=symbol.name,
                        to_symbol=inherited,
                    )
                )
    log.debug("edges_built", edges=len(edges), unresolved=unresolved)
    return edges
