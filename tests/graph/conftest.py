"""Shared fixtures for graph tests.

Swift units use SourceKitten ``structure`` output; Objective-C units use
``clang -Xclang -ast-dump=json`` output, trimmed to the fields extraction
reads.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from symgraph.graph import Dialect, Graph, build_graph

SK = "source.lang.swift.decl."
SK_ACCESS = "source.lang.swift.accessibility."


def _swift_decl(
    kind: str,
    name: str,
    *,
    inherits: tuple[str, ...] = (),
    children: tuple[dict[str, Any], ...] = (),
    **keys: Any,
) -> dict[str, Any]:
    node: dict[str, Any] = {"key.kind": SK + kind, "key.name": name}
    if inherits:
        node["key.inheritedtypes"] = [{"key.name": t} for t in inherits]
    if children:
        node["key.substructure"] = list(children)
    for key, value in keys.items():
        node[f"key.{key}"] = value
    return node


def _swift_file(*decls: dict[str, Any]) -> dict[str, Any]:
    return {
        "key.diagnostic_stage": "source.diagnostic.stage.swift.parse",
        "key.substructure": list(decls),
    }


@pytest.fixture
def user_manager_ast() -> dict[str, Any]:
    """A Swift file with one of every declaration kind."""
    return _swift_file(
        _swift_decl(
            "class",
            "UserManager",
            inherits=("BaseManager", "UserProviding"),
            accessibility=SK_ACCESS + "public",
            offset=10,
            length=200,
            children=(
                _swift_decl(
                    "var.instance",
                    "users",
                    typename="[User]",
                    accessibility=SK_ACCESS + "private",
                ),
                _swift_decl("function.method.instance", "init(store:)"),
                _swift_decl(
                    "function.method.instance",
                    "load()",
                    typename="Bool",
                    accessibility=SK_ACCESS + "public",
                ),
                _swift_decl("function.method.class", "shared()", typename="UserManager"),
            ),
        ),
        _swift_decl("struct", "User", children=(_swift_decl("var.instance", "id", typename="Int"),)),
        _swift_decl("protocol", "UserProviding"),
        _swift_decl(
            "enum",
            "UserRole",
            children=(
                _swift_decl("enumcase", "", children=(_swift_decl("enumelement", "admin"),)),
            ),
        ),
        _swift_decl("extension", "User", inherits=("Codable",)),
        _swift_decl("function.free", "makeUser()"),
        _swift_decl("var.global", "defaultTimeout", typename="Double"),
    )


@pytest.fixture
def profile_header_ast() -> dict[str, Any]:
    """An Objective-C header with an interface, protocol and category."""
    return {
        "kind": "TranslationUnitDecl",
        "inner": [
            {
                "kind": "TypedefDecl",
                "name": "SEL",
                "isImplicit": True,
            },
            {
                "kind": "ObjCInterfaceDecl",
                "name": "NSObject",
                "loc": {"includedFrom": {"file": "/usr/include/objc/NSObject.h"}},
            },
            {
                "kind": "ObjCProtocolDecl",
                "name": "ProfileDelegate",
                "loc": {"offset": 40},
            },
            {
                "kind": "ObjCInterfaceDecl",
                "name": "ProfileController",
                "super": {"id": "0x1", "kind": "ObjCInterfaceDecl", "name": "NSObject"},
                "protocols": [{"id": "0x2", "kind": "ObjCProtocolDecl", "name": "ProfileDelegate"}],
                "range": {"begin": {"offset": 80}, "end": {"offset": 300, "tokLen": 4}},
                "inner": [
                    {
                        "kind": "ObjCPropertyDecl",
                        "name": "title",
                        "type": {"qualType": "NSString *"},
                    },
                    {
                        "kind": "ObjCMethodDecl",
                        "name": "initWithTitle:",
                        "returnType": {"qualType": "instancetype"},
                    },
                    {
                        "kind": "ObjCMethodDecl",
                        "name": "reload",
                        "returnType": {"qualType": "void"},
                    },
                ],
            },
            {
                "kind": "ObjCCategoryDecl",
                "name": "Refresh",
                "interface": {"id": "0x3", "kind": "ObjCInterfaceDecl", "name": "ProfileController"},
                "protocols": [{"name": "NSCopying"}],
            },
        ],
    }


@pytest.fixture
def sample_graph(user_manager_ast: dict[str, Any], profile_header_ast: dict[str, Any]) -> Graph:
    """Three units: the Swift file, the header, and a Swift subclass."""
    admin_ast = _swift_file(
        _swift_decl("class", "AdminManager", inherits=("UserManager",)),
        _swift_decl("extension", "UserManager", inherits=("Auditable",)),
        _swift_decl(
            "struct",
            "AuditEntry",
            children=(_swift_decl("var.instance", "user", typename="User"),),
        ),
    )
    return build_graph(
        {
            "Sources/UserManager.swift": (Dialect.SWIFT, user_manager_ast),
            "Legacy/ProfileController.h": (Dialect.OBJC, profile_header_ast),
            "Sources/AdminManager.swift": (Dialect.SWIFT, admin_ast),
        },
        repo_path="/repo",
        max_workers=2,
    ).graph


@pytest.fixture
def swift_decl() -> Callable[..., dict[str, Any]]:
    """Factory for SourceKitten declaration nodes: ``swift_decl("class", "Foo", inherits=(...))``."""
    return _swift_decl


@pytest.fixture
def swift_graph() -> Callable[[dict[str, list[dict[str, Any]]]], Graph]:
    """Build a graph from ``{unit_id: [top-level decls]}``, in dict order."""

    def build(units: dict[str, list[dict[str, Any]]]) -> Graph:
        raw = {unit_id: (Dialect.SWIFT, _swift_file(*decls)) for unit_id, decls in units.items()}
        return build_graph(raw, max_workers=1).graph

    return build
