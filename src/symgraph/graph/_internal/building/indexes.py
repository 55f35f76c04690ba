"""Name, kind and file indexes.

Every indexed symbol occurrence is appended to all three indexes. Nothing is
deduplicated: a name declared in two units has two ``byName`` locations, and
the first one is the default for lookups.
"""

from __future__ import annotations

from collections.abc import Mapping

from symgraph.graph.models import INDEXED_KINDS, IndexLocation, Indexes, UnitData


def build_indexes(units: Mapping[str, UnitData]) -> Indexes:
    indexes = Indexes()
    for unit_id, unit in units.items():
        file_names = indexes.by_file.setdefault(unit_id, [])
        for kind in INDEXED_KINDS:
            kind_names = indexes.by_kind.setdefault(kind.value, [])
            for symbol in unit.symbols.bucket(kind):
                indexes.by_name.setdefault(symbol.name, []).append(
                    IndexLocation(file=unit_id, kind=kind)
                )
                kind_names.append(symbol.name)
                file_names.append(symbol.name)
    return indexes
