"""Tests for the QueryEngine."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from symgraph.graph import Graph, QueryEngine, SymbolKind
from symgraph.graph.query import ExtensionRef, InheritorRef

Decl = Callable[..., dict[str, Any]]
GraphFactory = Callable[[dict[str, list[dict[str, Any]]]], Graph]


@pytest.fixture
def engine(sample_graph: Graph) -> QueryEngine:
    return QueryEngine(sample_graph)


class TestResolve:
    """resolve() uses the first byName location, then the type map."""

    def test_first_location_wins(self, swift_decl: Decl, swift_graph: GraphFactory) -> None:
        graph = swift_graph(
            {
                "A.swift": [swift_decl("class", "Foo", inherits=("Base",))],
                "B.swift": [swift_decl("struct", "Foo")],
            }
        )

        resolved = QueryEngine(graph).resolve("Foo")

        assert resolved is not None
        assert resolved.file == "A.swift"
        assert resolved.symbol_kind is SymbolKind.CLASS
        assert resolved.symbol.inherited_types == ["Base"]
        # The type map disagrees; the index wins
        assert graph.type_map["Foo"].file == "B.swift"

    def test_unknown_name(self, engine: QueryEngine) -> None:
        assert engine.resolve("NoSuchType") is None

    def test_case_sensitive(self, engine: QueryEngine) -> None:
        assert engine.resolve("usermanager") is None

    def test_functions_resolve(self, engine: QueryEngine) -> None:
        resolved = engine.resolve("makeUser()")

        assert resolved is not None
        assert resolved.symbol_kind is SymbolKind.FUNCTION

    def test_idempotent(self, engine: QueryEngine) -> None:
        first = engine.resolve("UserManager")
        second = engine.resolve("UserManager")

        assert first is not None and second is not None
        assert first.to_dict() == second.to_dict()

    def test_result_detached(self, engine: QueryEngine) -> None:
        """Mutating a result does not leak into later queries."""
        first = engine.resolve("UserManager")
        assert first is not None
        first.symbol.inherited_types.append("Injected")

        again = engine.resolve("UserManager")

        assert again is not None
        assert again.symbol.inherited_types == ["BaseManager", "UserProviding"]

    def test_falls_back_to_type_map(self, sample_graph: Graph) -> None:
        """A name missing from byName still resolves through the type map."""
        sample_graph.indexes.by_name.pop("AuditEntry")

        resolved = QueryEngine(sample_graph).resolve("AuditEntry")

        assert resolved is not None
        assert resolved.file == "Sources/AdminManager.swift"
        assert resolved.symbol_kind is SymbolKind.STRUCT

    def test_to_dict(self, engine: QueryEngine) -> None:
        resolved = engine.resolve("ProfileController")

        assert resolved is not None
        data = resolved.to_dict()
        assert data["name"] == "ProfileController"
        assert data["file"] == "Legacy/ProfileController.h"
        assert data["symbolKind"] == "class"
        assert data["inheritedTypes"] == ["NSObject", "ProfileDelegate"]


class TestSearch:
    """Case-insensitive substring search."""

    def test_default_kinds_in_unit_order(self, engine: QueryEngine) -> None:
        hits = engine.search("user")

        assert [(h.name, h.kind) for h in hits] == [
            ("UserManager", SymbolKind.CLASS),
            ("User", SymbolKind.STRUCT),
            ("UserProviding", SymbolKind.PROTOCOL),
            ("makeUser()", SymbolKind.FUNCTION),
            ("UserRole", SymbolKind.ENUM),
        ]

    def test_kind_filter(self, swift_decl: Decl, swift_graph: GraphFactory) -> None:
        graph = swift_graph(
            {
                "A.swift": [swift_decl("class", "UserManager")],
                "B.swift": [swift_decl("struct", "UserViewModel")],
            }
        )
        engine = QueryEngine(graph)

        assert [h.name for h in engine.search("User")] == ["UserManager", "UserViewModel"]
        assert [h.name for h in engine.search("user", kind="struct")] == ["UserViewModel"]
        assert [h.name for h in engine.search("USER", kind=SymbolKind.CLASS)] == ["UserManager"]
        assert engine.search("user", kind="protocol") == []

    def test_explicit_kind_outside_default_set(self, engine: QueryEngine) -> None:
        hits = engine.search("user", kind="extension")

        assert [(h.name, h.file) for h in hits] == [
            ("User", "Sources/UserManager.swift"),
            ("UserManager", "Sources/AdminManager.swift"),
        ]

    def test_limit(self, engine: QueryEngine) -> None:
        assert [h.name for h in engine.search("user", limit=2)] == ["UserManager", "User"]

    def test_all_is_default(self, engine: QueryEngine) -> None:
        assert engine.search("profile", kind="all") == engine.search("profile")

    def test_empty_query_matches_everything(self, engine: QueryEngine) -> None:
        assert len(engine.search("")) == 15

    def test_invalid_kind(self, engine: QueryEngine) -> None:
        with pytest.raises(ValueError):
            engine.search("user", kind="typealias")

    @pytest.mark.parametrize("kind", ["variable", SymbolKind.VARIABLE])
    def test_variables_not_searchable(self, engine: QueryEngine, kind: str | SymbolKind) -> None:
        with pytest.raises(ValueError, match="not searchable"):
            engine.search("users", kind=kind)

    def test_hit_to_dict(self, engine: QueryEngine) -> None:
        hit = engine.search("AdminManager")[0]

        assert hit.to_dict() == {
            "name": "AdminManager",
            "kind": "class",
            "file": "Sources/AdminManager.swift",
            "inheritedTypes": ["UserManager"],
        }


class TestUsages:
    def test_inherited_by(self, swift_decl: Decl, swift_graph: GraphFactory) -> None:
        graph = swift_graph(
            {
                "A.swift": [swift_decl("class", "Base")],
                "B.swift": [swift_decl("class", "Child", inherits=("Base",))],
            }
        )

        usages = QueryEngine(graph).usages("Base")

        assert usages is not None
        assert usages.inherited_by == [InheritorRef(name="Child", file="B.swift")]
        assert usages.referenced_in == ["B.swift"]

    def test_extended_in(self, swift_decl: Decl, swift_graph: GraphFactory) -> None:
        graph = swift_graph(
            {
                "A.swift": [swift_decl("class", "Foo")],
                "B.swift": [swift_decl("extension", "Foo", inherits=("Bar",))],
            }
        )

        usages = QueryEngine(graph).usages("Foo")

        assert usages is not None
        assert usages.extended_in == [ExtensionRef(file="B.swift", conformances=["Bar"])]
        assert usages.to_dict()["extendedIn"] == [{"file": "B.swift", "conformances": ["Bar"]}]

    def test_sample_usages(self, engine: QueryEngine) -> None:
        usages = engine.usages("UserManager")

        assert usages is not None
        assert usages.to_dict() == {
            "inheritedBy": [{"name": "AdminManager", "file": "Sources/AdminManager.swift"}],
            "extendedIn": [
                {"file": "Sources/AdminManager.swift", "conformances": ["Auditable"]}
            ],
            "referencedIn": ["Sources/AdminManager.swift"],
        }

    def test_declared_type_counts_as_reference(self, engine: QueryEngine) -> None:
        usages = engine.usages("User")

        assert usages is not None
        assert usages.inherited_by == []
        # The extension lives in the defining unit, so it is not listed
        assert usages.extended_in == []
        assert usages.referenced_in == ["Sources/AdminManager.swift"]

    def test_same_name_declaration_counts_as_reference(
        self, swift_decl: Decl, swift_graph: GraphFactory
    ) -> None:
        graph = swift_graph(
            {
                "A.swift": [swift_decl("class", "Foo")],
                "B.swift": [swift_decl("struct", "Foo")],
            }
        )

        usages = QueryEngine(graph).usages("Foo")

        assert usages is not None
        assert usages.referenced_in == ["B.swift"]

    def test_unused_symbol(self, engine: QueryEngine) -> None:
        usages = engine.usages("UserRole")

        assert usages is not None
        assert not usages.has_usages

    def test_unknown_symbol(self, engine: QueryEngine) -> None:
        assert engine.usages("NoSuchType") is None


class TestMembers:
    def test_members_of_resolved_type(self, engine: QueryEngine) -> None:
        members = engine.members("UserManager")

        assert [p.name for p in members.properties] == ["users"]
        assert [m.name for m in members.methods] == ["load()", "shared()"]
        assert [i.name for i in members.initializers] == ["init(store:)"]

    def test_absent_is_empty(self, engine: QueryEngine) -> None:
        assert engine.members("NoSuchType").is_empty()
        assert engine.members("makeUser()").is_empty()

    def test_result_detached(self, engine: QueryEngine) -> None:
        engine.members("UserManager").properties.clear()
        engine.members("UserManager").methods[0].name = "mutated"

        members = engine.members("UserManager")
        assert [p.name for p in members.properties] == ["users"]
        assert members.methods[0].name == "load()"


class TestExplain:
    def test_explain_class(self, engine: QueryEngine) -> None:
        explanation = engine.explain("UserManager")

        assert explanation is not None
        data = explanation.to_dict()
        assert data["symbol"]["file"] == "Sources/UserManager.swift"
        assert data["inherits"] == [
            {"name": "BaseManager", "kind": None, "file": None, "external": True},
            {
                "name": "UserProviding",
                "kind": "protocol",
                "file": "Sources/UserManager.swift",
                "external": False,
            },
        ]
        assert data["members"]["properties"] == [
            {"name": "users", "type": "[User]", "access": "private"}
        ]
        assert data["usages"]["inheritedBy"][0]["name"] == "AdminManager"

    def test_explain_unknown(self, engine: QueryEngine) -> None:
        assert engine.explain("NoSuchType") is None


class TestStats:
    def test_counts(self, engine: QueryEngine) -> None:
        stats = engine.stats()

        assert stats.unit_count == 3
        assert stats.counts == {
            "classes": 4,
            "structs": 2,
            "protocols": 2,
            "enums": 2,
            "extensions": 3,
            "functions": 5,
        }
        assert stats.total_types == 10

    def test_largest_units(self, engine: QueryEngine) -> None:
        assert engine.stats().largest_units == [
            ("Sources/UserManager.swift", 9),
            ("Legacy/ProfileController.h", 4),
            ("Sources/AdminManager.swift", 2),
        ]
        assert engine.stats(largest=1).to_dict()["largest_units"] == [
            {"file": "Sources/UserManager.swift", "symbols": 9}
        ]

    def test_empty_graph(self, swift_graph: GraphFactory) -> None:
        stats = QueryEngine(swift_graph({})).stats()

        assert stats.unit_count == 0
        assert stats.total_types == 0
        assert stats.largest_units == []


class TestFileOverview:
    def test_single_match(self, engine: QueryEngine) -> None:
        overview = engine.file_overview("profilecontroller")

        assert overview.unit == "Legacy/ProfileController.h"
        assert [s.name for s in overview.sections["classes"]] == ["ProfileController"]
        assert [s.name for s in overview.sections["extensions"]] == ["ProfileController"]
        assert overview.sections["structs"] == []
        assert "variables" not in overview.sections

    def test_ambiguous_fragment(self, engine: QueryEngine) -> None:
        overview = engine.file_overview("Manager")

        assert overview.unit is None
        assert overview.matches == ["Sources/UserManager.swift", "Sources/AdminManager.swift"]
        assert overview.sections == {}

    def test_no_match(self, engine: QueryEngine) -> None:
        overview = engine.file_overview("Nope.swift")

        assert overview.matches == []
        assert overview.to_dict()["unit"] is None
