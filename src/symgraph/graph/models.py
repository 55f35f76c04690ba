"""Normalized symbol model shared by extraction, graph building and queries.

Every structure here serializes to plain key/value/array data through
``to_dict()`` and rebuilds through ``from_dict()``. The dict field names are
the snapshot compatibility surface (camelCase, as written by earlier
releases), so they must not be renamed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from symgraph.config.constants import SOURCEKIT_ACCESSIBILITY_PREFIX


class SymbolKind(StrEnum):
    """Closed set of normalized declaration kinds."""

    CLASS = "class"
    STRUCT = "struct"
    PROTOCOL = "protocol"
    ENUM = "enum"
    EXTENSION = "extension"
    FUNCTION = "function"
    VARIABLE = "variable"

    @property
    def bucket(self) -> str:
        """Plural collection name used in symbol tables and snapshots."""
        return _BUCKETS[self]

    @classmethod
    def from_bucket(cls, bucket: str) -> SymbolKind:
        for kind, name in _BUCKETS.items():
            if name == bucket:
                return kind
        raise ValueError(f"Unknown symbol bucket: {bucket}")


_BUCKETS: dict[SymbolKind, str] = {
    SymbolKind.CLASS: "classes",
    SymbolKind.STRUCT: "structs",
    SymbolKind.PROTOCOL: "protocols",
    SymbolKind.ENUM: "enums",
    SymbolKind.EXTENSION: "extensions",
    SymbolKind.FUNCTION: "functions",
    SymbolKind.VARIABLE: "variables",
}

_KIND_VALUES: frozenset[str] = frozenset(kind.value for kind in SymbolKind)

# Kinds recorded in the type map (types only, never functions)
TYPE_KINDS: tuple[SymbolKind, ...] = (
    SymbolKind.CLASS,
    SymbolKind.STRUCT,
    SymbolKind.PROTOCOL,
    SymbolKind.ENUM,
)

# Kinds whose inherited types produce edges (protocols do not)
EDGE_SOURCE_KINDS: tuple[SymbolKind, ...] = (
    SymbolKind.CLASS,
    SymbolKind.STRUCT,
    SymbolKind.ENUM,
    SymbolKind.EXTENSION,
)

# Kinds written to byName/byKind/byFile, in index construction order
INDEXED_KINDS: tuple[SymbolKind, ...] = (
    SymbolKind.CLASS,
    SymbolKind.STRUCT,
    SymbolKind.PROTOCOL,
    SymbolKind.ENUM,
    SymbolKind.FUNCTION,
)


class Accessibility(StrEnum):
    """Normalized access level."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"
    UNKNOWN = "unknown"

    @classmethod
    def normalize(
        cls, raw: str | None, default: Accessibility | None = None
    ) -> Accessibility | None:
        """Map a dialect access string onto the normalized set.

        SourceKit values carry a ``source.lang.swift.accessibility.`` prefix,
        clang values are bare. Absent values resolve to ``default``;
        unrecognized values resolve to UNKNOWN.
        """
        if not raw:
            return default
        value = raw.removeprefix(SOURCEKIT_ACCESSIBILITY_PREFIX)
        return _ACCESS_ALIASES.get(value, cls.UNKNOWN)


_ACCESS_ALIASES: dict[str, Accessibility] = {
    "open": Accessibility.PUBLIC,
    "public": Accessibility.PUBLIC,
    "package": Accessibility.INTERNAL,
    "internal": Accessibility.INTERNAL,
    "fileprivate": Accessibility.PRIVATE,
    "private": Accessibility.PRIVATE,
    "protected": Accessibility.PRIVATE,
}


class Dialect(StrEnum):
    """Raw AST shape a unit was produced in."""

    SWIFT = "swift"  # SourceKitten structure (key.* tags)
    OBJC = "objc"  # clang -ast-dump=json (kind/name/inner tags)


# =============================================================================
# Symbols and members
# =============================================================================


@dataclass(slots=True)
class Symbol:
    """A named declaration extracted from one unit."""

    name: str
    kind: SymbolKind
    file: str
    inherited_types: list[str] = field(default_factory=list)
    accessibility: Accessibility = Accessibility.INTERNAL
    raw_kind: str | None = None
    type_name: str | None = None
    offset: int | None = None
    length: int | None = None
    extended_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "file": self.file,
            "inheritedTypes": list(self.inherited_types),
            "accessibility": self.accessibility.value,
        }
        optional = {
            "rawKind": self.raw_kind,
            "typeName": self.type_name,
            "offset": self.offset,
            "length": self.length,
            "extendedType": self.extended_type,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], kind: SymbolKind | None = None) -> Symbol:
        stored_kind = data.get("kind")
        normalized = stored_kind in _KIND_VALUES
        resolved_kind = SymbolKind(stored_kind) if normalized else kind
        if resolved_kind is None:
            raise ValueError(f"Symbol {data.get('name')!r} has no recognizable kind")
        return cls(
            name=data["name"],
            kind=resolved_kind,
            file=data.get("file", ""),
            inherited_types=list(data.get("inheritedTypes") or []),
            accessibility=Accessibility.normalize(data.get("accessibility"), Accessibility.INTERNAL)
            or Accessibility.INTERNAL,
            # Snapshots from earlier releases stored the dialect tag under "kind"
            raw_kind=data.get("rawKind") or (None if normalized else stored_kind),
            type_name=data.get("typeName"),
            offset=data.get("offset"),
            length=data.get("length"),
            extended_type=data.get("extendedType"),
        )


@dataclass(slots=True)
class Member:
    """A property, method or initializer attached to a type."""

    name: str
    type_name: str | None = None
    access: Accessibility | None = None


@dataclass
class MemberSet:
    """Members of one type, split by role."""

    properties: list[Member] = field(default_factory=list)
    methods: list[Member] = field(default_factory=list)
    initializers: list[Member] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.properties or self.methods or self.initializers)

    def to_dict(self) -> dict[str, Any]:
        def access(m: Member) -> dict[str, Any]:
            return {"access": m.access.value} if m.access else {}

        def typed(m: Member, key: str) -> dict[str, Any]:
            return {key: m.type_name} if m.type_name else {}

        return {
            "properties": [
                {"name": m.name, **typed(m, "type"), **access(m)} for m in self.properties
            ],
            "methods": [
                {"name": m.name, **typed(m, "returnType"), **access(m)} for m in self.methods
            ],
            "initializers": [{"name": m.name, **access(m)} for m in self.initializers],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MemberSet:
        def member(item: dict[str, Any], key: str | None) -> Member:
            return Member(
                name=item["name"],
                type_name=item.get(key) if key else None,
                access=Accessibility.normalize(item.get("access")),
            )

        return cls(
            properties=[member(p, "type") for p in data.get("properties", [])],
            methods=[member(m, "returnType") for m in data.get("methods", [])],
            initializers=[member(i, None) for i in data.get("initializers", [])],
        )


@dataclass
class SymbolTable:
    """Per-unit symbols in seven buckets, each in declaration order."""

    classes: list[Symbol] = field(default_factory=list)
    structs: list[Symbol] = field(default_factory=list)
    protocols: list[Symbol] = field(default_factory=list)
    enums: list[Symbol] = field(default_factory=list)
    functions: list[Symbol] = field(default_factory=list)
    extensions: list[Symbol] = field(default_factory=list)
    variables: list[Symbol] = field(default_factory=list)

    def bucket(self, kind: SymbolKind) -> list[Symbol]:
        return getattr(self, kind.bucket)  # type: ignore[no-any-return]

    def add(self, symbol: Symbol) -> None:
        self.bucket(symbol.kind).append(symbol)

    def find(self, name: str, kind: SymbolKind) -> Symbol | None:
        """First symbol of ``kind`` named exactly ``name``."""
        return next((s for s in self.bucket(kind) if s.name == name), None)

    def iter_kinds(self, kinds: tuple[SymbolKind, ...]) -> Iterator[Symbol]:
        for kind in kinds:
            yield from self.bucket(kind)

    def __iter__(self) -> Iterator[Symbol]:
        return self.iter_kinds(tuple(SymbolKind))

    def count(self, kind: SymbolKind) -> int:
        return len(self.bucket(kind))

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {kind.bucket: [s.to_dict() for s in self.bucket(kind)] for kind in SymbolKind}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SymbolTable:
        table = cls()
        for kind in SymbolKind:
            for item in data.get(kind.bucket) or []:
                table.bucket(kind).append(Symbol.from_dict(item, kind=kind))
        return table


@dataclass
class UnitData:
    """Extraction output for one source unit."""

    dialect: Dialect
    symbols: SymbolTable = field(default_factory=SymbolTable)
    members: dict[str, MemberSet] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dialect": self.dialect.value,
            "symbols": self.symbols.to_dict(),
            "memberData": {name: m.to_dict() for name, m in self.members.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UnitData:
        return cls(
            dialect=Dialect(data.get("dialect", Dialect.SWIFT.value)),
            symbols=SymbolTable.from_dict(data.get("symbols") or {}),
            members={
                name: MemberSet.from_dict(m) for name, m in (data.get("memberData") or {}).items()
            },
        )


# =============================================================================
# Graph structures
# =============================================================================


@dataclass(frozen=True, slots=True)
class TypeMapEntry:
    """Defining location of a type name. Last declaration processed wins."""

    file: str
    kind: SymbolKind
    symbol: Symbol

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "kind": self.kind.value, "symbol": self.symbol.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TypeMapEntry:
        kind = SymbolKind(data["kind"])
        return cls(
            file=data["file"],
            kind=kind,
            symbol=Symbol.from_dict(data["symbol"], kind=kind),
        )


@dataclass(frozen=True, slots=True)
class Edge:
    """``from_symbol``, declared in ``from_file``, inherits from or extends ``to_symbol``."""

    from_file: str
    to_file: str
    from_symbol: str
    to_symbol: str

    def to_dict(self) -> dict[str, str]:
        return {
            "from": self.from_file,
            "to": self.to_file,
            "fromSymbol": self.from_symbol,
            "toSymbol": self.to_symbol,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Edge:
        return cls(
            from_file=data["from"],
            to_file=data["to"],
            from_symbol=data["fromSymbol"],
            to_symbol=data["toSymbol"],
        )


@dataclass(frozen=True, slots=True)
class IndexLocation:
    file: str
    kind: SymbolKind

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file, "kind": self.kind.value}


@dataclass
class Indexes:
    """Lookup tables derived from the symbol tables. Lists keep declaration order."""

    by_name: dict[str, list[IndexLocation]] = field(default_factory=dict)
    by_kind: dict[str, list[str]] = field(default_factory=dict)
    by_file: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "byName": {
                name: [loc.to_dict() for loc in locs] for name, locs in self.by_name.items()
            },
            "byKind": {kind: list(names) for kind, names in self.by_kind.items()},
            "byFile": {unit: list(names) for unit, names in self.by_file.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Indexes:
        return cls(
            by_name={
                name: [IndexLocation(loc["file"], SymbolKind(loc["kind"])) for loc in locs]
                for name, locs in (data.get("byName") or {}).items()
            },
            by_kind={kind: list(names) for kind, names in (data.get("byKind") or {}).items()},
            by_file={unit: list(names) for unit, names in (data.get("byFile") or {}).items()},
        )


@dataclass(frozen=True)
class Graph:
    """A fully built symbol graph. Never mutated after construction."""

    files: dict[str, UnitData]
    type_map: dict[str, TypeMapEntry]
    edges: list[Edge]
    indexes: Indexes
    repo_path: str | None = None
    generated_at: str | None = None

    @property
    def unit_count(self) -> int:
        return len(self.files)


@dataclass
class BuildStats:
    """Outcome counts for one build."""

    total: int = 0
    processed: int = 0
    errors: int = 0
    failed_units: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "errors": self.errors,
            "failed_units": list(self.failed_units),
        }


@dataclass(frozen=True)
class BuildResult:
    graph: Graph
    stats: BuildStats
