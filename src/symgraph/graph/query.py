"""Read-only queries over one published Graph.

Lookups are name based and scope blind. ``resolve`` takes the first
``byName`` location as canonical and falls back to the type map. ``usages``
detects syntactic name recurrence only (inheritance edges, extensions,
same-named declarations, declared types), so an empty result means "not
provably referenced", not "unused".

Every result is detached from the graph: callers may mutate what they get
back without affecting later queries.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from symgraph.graph.models import (
    INDEXED_KINDS,
    TYPE_KINDS,
    Graph,
    Member,
    MemberSet,
    Symbol,
    SymbolKind,
)

# Per-unit search order
SEARCH_KINDS: tuple[SymbolKind, ...] = (
    SymbolKind.CLASS,
    SymbolKind.STRUCT,
    SymbolKind.PROTOCOL,
    SymbolKind.FUNCTION,
    SymbolKind.ENUM,
)

OVERVIEW_KINDS: tuple[SymbolKind, ...] = (
    SymbolKind.CLASS,
    SymbolKind.STRUCT,
    SymbolKind.PROTOCOL,
    SymbolKind.ENUM,
    SymbolKind.EXTENSION,
    SymbolKind.FUNCTION,
)


def _detached(symbol: Symbol) -> Symbol:
    return replace(symbol, inherited_types=list(symbol.inherited_types))


def _detached_members(members: MemberSet) -> MemberSet:
    def copy(items: list[Member]) -> list[Member]:
        return [replace(m) for m in items]

    return MemberSet(
        properties=copy(members.properties),
        methods=copy(members.methods),
        initializers=copy(members.initializers),
    )


# =============================================================================
# Result types
# =============================================================================


@dataclass
class ResolvedSymbol:
    """A symbol plus the location it was resolved to."""

    symbol: Symbol
    file: str
    symbol_kind: SymbolKind

    @property
    def name(self) -> str:
        return self.symbol.name

    def to_dict(self) -> dict[str, Any]:
        return {**self.symbol.to_dict(), "file": self.file, "symbolKind": self.symbol_kind.value}


@dataclass
class SearchHit:
    name: str
    kind: SymbolKind
    file: str
    inherited_types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "file": self.file,
            "inheritedTypes": list(self.inherited_types),
        }


@dataclass
class InheritorRef:
    name: str
    file: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "file": self.file}


@dataclass
class ExtensionRef:
    file: str
    conformances: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "conformances": list(self.conformances)}


@dataclass
class Usages:
    """Where a symbol's name recurs outside its defining unit."""

    inherited_by: list[InheritorRef] = field(default_factory=list)
    extended_in: list[ExtensionRef] = field(default_factory=list)
    referenced_in: list[str] = field(default_factory=list)

    @property
    def has_usages(self) -> bool:
        return bool(self.inherited_by or self.extended_in or self.referenced_in)

    def to_dict(self) -> dict[str, Any]:
        return {
            "inheritedBy": [r.to_dict() for r in self.inherited_by],
            "extendedIn": [r.to_dict() for r in self.extended_in],
            "referencedIn": list(self.referenced_in),
        }


@dataclass
class InheritedTypeInfo:
    """A supertype name, with its defining location when it is in the scanned tree."""

    name: str
    kind: SymbolKind | None = None
    file: str | None = None

    @property
    def external(self) -> bool:
        return self.file is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value if self.kind else None,
            "file": self.file,
            "external": self.external,
        }


@dataclass
class Explanation:
    resolved: ResolvedSymbol
    inherits: list[InheritedTypeInfo]
    members: MemberSet
    usages: Usages

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.resolved.to_dict(),
            "inherits": [t.to_dict() for t in self.inherits],
            "members": self.members.to_dict(),
            "usages": self.usages.to_dict(),
        }


@dataclass
class CodebaseStats:
    unit_count: int
    counts: dict[str, int]
    largest_units: list[tuple[str, int]]

    @property
    def total_types(self) -> int:
        return sum(self.counts.get(kind.bucket, 0) for kind in TYPE_KINDS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "units": self.unit_count,
            "types": self.total_types,
            "counts": dict(self.counts),
            "largest_units": [{"file": unit, "symbols": n} for unit, n in self.largest_units],
        }


@dataclass
class FileOverview:
    """Result of a unit lookup by path fragment.

    ``sections`` is only populated when exactly one unit matched.
    """

    query: str
    matches: list[str]
    sections: dict[str, list[Symbol]] = field(default_factory=dict)

    @property
    def unit(self) -> str | None:
        return self.matches[0] if len(self.matches) == 1 else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "matches": list(self.matches),
            "unit": self.unit,
            "sections": {
                bucket: [s.to_dict() for s in symbols] for bucket, symbols in self.sections.items()
            },
        }


# =============================================================================
# Engine
# =============================================================================


class QueryEngine:
    """Answers symbol queries against exactly one immutable graph."""

    def __init__(self, graph: Graph) -> None:
        self._graph = graph

    @property
    def graph(self) -> Graph:
        return self._graph

    def resolve(self, name: str) -> ResolvedSymbol | None:
        """Resolve a name via its first index location, falling back to the type map."""
        graph = self._graph
        locations = graph.indexes.by_name.get(name)
        if locations:
            first = locations[0]
            unit = graph.files.get(first.file)
            if unit is not None:
                symbol = unit.symbols.find(name, first.kind)
                if symbol is not None:
                    return ResolvedSymbol(_detached(symbol), first.file, first.kind)

        entry = graph.type_map.get(name)
        if entry is not None:
            return ResolvedSymbol(_detached(entry.symbol), entry.file, entry.kind)
        return None

    def search(
        self,
        query: str,
        kind: SymbolKind | str | None = None,
        limit: int | None = None,
    ) -> list[SearchHit]:
        """Case-insensitive substring search in unit-then-declaration order.

        ``kind`` of None or "all" searches classes, structs, protocols,
        functions and enums. ``limit`` truncates; None returns everything.

        Raises:
            ValueError: If ``kind`` is unknown or is "variable".
        """
        if kind is None or kind == "all":
            kinds = SEARCH_KINDS
        else:
            selected = SymbolKind(kind)
            if selected is SymbolKind.VARIABLE:
                raise ValueError("variables are not searchable")
            kinds = (selected,)
        needle = query.lower()

        hits: list[SearchHit] = []
        for unit_id, unit in self._graph.files.items():
            for symbol in unit.symbols.iter_kinds(kinds):
                if needle in symbol.name.lower():
                    hits.append(
                        SearchHit(
                            name=symbol.name,
                            kind=symbol.kind,
                            file=unit_id,
                            inherited_types=list(symbol.inherited_types),
                        )
                    )
                    if limit is not None and len(hits) >= limit:
                        return hits
        return hits

    def usages(self, name: str) -> Usages | None:
        """Inheritors, extensions and referencing units of a symbol. None if unresolved."""
        resolved = self.resolve(name)
        if resolved is None:
            return None
        return self._usages_of(name, resolved.file)

    def _usages_of(self, name: str, defining_unit: str) -> Usages:
        graph = self._graph
        usages = Usages(
            inherited_by=[
                InheritorRef(name=edge.from_symbol, file=edge.from_file)
                for edge in graph.edges
                if edge.to_symbol == name
            ]
        )

        # Units declaring a symbol with the same name count as references
        same_name_units = {
            loc.file for loc in graph.indexes.by_name.get(name, []) if loc.file != defining_unit
        }

        for unit_id, unit in graph.files.items():
            if unit_id == defining_unit:
                continue
            for extension in unit.symbols.extensions:
                if extension.name == name:
                    usages.extended_in.append(
                        ExtensionRef(file=unit_id, conformances=list(extension.inherited_types))
                    )
            if unit_id in same_name_units or any(
                symbol.type_name == name or name in symbol.inherited_types
                for symbol in unit.symbols
            ):
                usages.referenced_in.append(unit_id)
        return usages

    def members(self, name: str) -> MemberSet:
        """Members recorded for ``name`` in its defining unit; empty if none."""
        resolved = self.resolve(name)
        if resolved is None:
            return MemberSet()
        unit = self._graph.files.get(resolved.file)
        if unit is None or name not in unit.members:
            return MemberSet()
        return _detached_members(unit.members[name])

    def explain(self, name: str) -> Explanation | None:
        """Symbol, annotated supertypes, members and usages in one answer."""
        resolved = self.resolve(name)
        if resolved is None:
            return None

        inherits: list[InheritedTypeInfo] = []
        for type_name in resolved.symbol.inherited_types:
            entry = self._graph.type_map.get(type_name)
            if entry is None:
                inherits.append(InheritedTypeInfo(name=type_name))
            else:
                inherits.append(InheritedTypeInfo(name=type_name, kind=entry.kind, file=entry.file))

        return Explanation(
            resolved=resolved,
            inherits=inherits,
            members=self.members(name),
            usages=self._usages_of(name, resolved.file),
        )

    def stats(self, largest: int | None = None) -> CodebaseStats:
        """Per-kind totals and units ranked by declared symbol count."""
        counts = {kind.bucket: 0 for kind in OVERVIEW_KINDS}
        sizes: list[tuple[str, int]] = []
        for unit_id, unit in self._graph.files.items():
            for kind in OVERVIEW_KINDS:
                counts[kind.bucket] += unit.symbols.count(kind)
            sizes.append((unit_id, sum(unit.symbols.count(k) for k in INDEXED_KINDS)))

        sizes.sort(key=lambda item: item[1], reverse=True)
        if largest is not None:
            sizes = sizes[:largest]
        return CodebaseStats(unit_count=self._graph.unit_count, counts=counts, largest_units=sizes)

    def file_overview(self, fragment: str) -> FileOverview:
        """Symbols of the single unit whose id contains ``fragment`` (case-insensitive)."""
        needle = fragment.lower()
        matches = [unit_id for unit_id in self._graph.files if needle in unit_id.lower()]
        overview = FileOverview(query=fragment, matches=matches)
        if overview.unit is None:
            return overview

        symbols = self._graph.files[overview.unit].symbols
        overview.sections = {
            kind.bucket: [_detached(s) for s in symbols.bucket(kind)] for kind in OVERVIEW_KINDS
        }
        return overview
