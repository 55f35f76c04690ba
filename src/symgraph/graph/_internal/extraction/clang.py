"""Objective-C / C extraction from ``clang -Xclang -ast-dump=json`` output.

Nodes are dicts tagged with ``kind`` (``ObjCInterfaceDecl``, ``ObjCMethodDecl``,
...), ``name``, ``inner``, ``super``, ``protocols``, ``loc`` and ``range``.
Clang kinds are translated into classifier tags (``objc.decl.class``) so the
shared classifier stays the only place that interprets kind strings.

Dialect differences handled here:
- ``super`` is present on class definitions even without a superclass, holding
  a null-pointer sentinel (``null``, ``"0x0"`` or ``{"id": "0x0"}``).
- Categories name their extended class through ``interface`` and take that
  name as their own; a category without a resolvable interface is malformed
  and dropped.
- Declarations pulled in from other headers (``loc.includedFrom``) and
  implicit declarations are skipped with their subtrees.
"""

from __future__ import annotations

from typing import Any

from symgraph.graph._internal.extraction import BaseSymbolExtractor, Node
from symgraph.graph.models import Accessibility, Dialect, Symbol, SymbolKind

NULL_POINTER = "0x0"

_CLANG_TAGS: dict[str, str] = {
    "ObjCInterfaceDecl": "objc.decl.class",
    "ObjCProtocolDecl": "objc.decl.protocol",
    "ObjCCategoryDecl": "objc.decl.extension",
    "ObjCMethodDecl": "objc.decl.method",
    "ObjCPropertyDecl": "objc.decl.var.property",
    "ObjCIvarDecl": "objc.decl.var.ivar",
    "FunctionDecl": "c.decl.function",
    "CXXMethodDecl": "cxx.decl.method",
    "VarDecl": "c.decl.var",
    "FieldDecl": "c.decl.var.field",
    "ParmVarDecl": "c.decl.var.parameter",
    "EnumDecl": "c.decl.enum",
}

_RECORD_KINDS = frozenset(("RecordDecl", "CXXRecordDecl"))
_RECORD_TAGS: dict[str, str] = {
    "struct": "c.decl.struct",
    "class": "c.decl.class",
}


def _is_null_pointer(ref: Any) -> bool:
    if ref is None or ref == NULL_POINTER:
        return True
    if isinstance(ref, dict):
        return ref.get("id") == NULL_POINTER or not ref.get("name")
    return False


def _ref_name(ref: Any) -> str | None:
    """Name of a declaration reference, or None for sentinels and malformed refs."""
    if _is_null_pointer(ref):
        return None
    if isinstance(ref, dict):
        name = ref.get("name")
        return name if isinstance(name, str) and name else None
    return ref if isinstance(ref, str) and ref else None


def _qual_type(value: Any) -> str | None:
    if isinstance(value, dict):
        qual = value.get("qualType")
        return qual if isinstance(qual, str) else None
    return value if isinstance(value, str) else None


def _location_blocks(loc: Any) -> list[dict[str, Any]]:
    if not isinstance(loc, dict):
        return []
    blocks = [loc]
    for key in ("spellingLoc", "expansionLoc"):
        nested = loc.get(key)
        if isinstance(nested, dict):
            blocks.append(nested)
    return blocks


class ClangExtractor(BaseSymbolExtractor):
    """Shape B adapter."""

    dialect = Dialect.OBJC

    def node_tag(self, node: Node) -> str | None:
        kind = node.get("kind")
        if not isinstance(kind, str):
            return None
        if kind in _RECORD_KINDS:
            # Unions and unknown record tags stay unclassified
            return _RECORD_TAGS.get(node.get("tagUsed", ""), kind)
        return _CLANG_TAGS.get(kind, kind)

    def node_name(self, node: Node) -> str | None:
        if node.get("kind") == "ObjCCategoryDecl":
            # A category is named after the class it extends, like a Swift extension
            return self.extended_type(node)
        name = node.get("name")
        return name if isinstance(name, str) and name else None

    def children(self, node: Node) -> list[Any]:
        return node.get("inner") or []

    def node_type_name(self, node: Node) -> str | None:
        if node.get("kind") == "ObjCMethodDecl":
            return _qual_type(node.get("returnType"))
        return _qual_type(node.get("type"))

    def node_access(self, node: Node) -> str | None:
        access = node.get("access")
        return access if isinstance(access, str) else None

    def is_excluded(self, node: Node) -> bool:
        if node.get("isImplicit"):
            return True
        return any("includedFrom" in block for block in _location_blocks(node.get("loc")))

    def inherited_types(self, node: Node) -> list[str]:
        """Superclass first, then adopted protocols, then C++ bases."""
        names: list[str] = []
        superclass = _ref_name(node.get("super"))
        if superclass:
            names.append(superclass)
        for proto in node.get("protocols") or []:
            name = _ref_name(proto)
            if name:
                names.append(name)
        for base in node.get("bases") or []:
            if isinstance(base, dict):
                name = _qual_type(base.get("type"))
                if name:
                    names.append(name)
        return names

    def extended_type(self, node: Node) -> str | None:
        return _ref_name(node.get("interface"))

    def source_range(self, node: Node) -> tuple[int | None, int | None]:
        """Byte offset and length from ``range``, falling back to ``loc``."""
        rng = node.get("range")
        if isinstance(rng, dict):
            begin, end = rng.get("begin"), rng.get("end")
            if isinstance(begin, dict) and isinstance(end, dict):
                start, stop = begin.get("offset"), end.get("offset")
                if isinstance(start, int) and isinstance(stop, int):
                    return start, stop + int(end.get("tokLen", 0)) - start
        loc = node.get("loc")
        if isinstance(loc, dict) and isinstance(loc.get("offset"), int):
            return loc["offset"], None
        return None, None

    def build_symbol(
        self,
        node: Node,
        name: str,
        kind: SymbolKind,
        tag: str,
        unit_id: str,
        default_access: Accessibility,
    ) -> Symbol | None:
        offset, length = self.source_range(node)
        return Symbol(
            name=name,
            kind=kind,
            file=unit_id,
            inherited_types=self.inherited_types(node),
            accessibility=Accessibility.normalize(self.node_access(node), default_access)
            or default_access,
            raw_kind=node.get("kind", tag),
            type_name=self.node_type_name(node),
            offset=offset,
            length=length,
            extended_type=name if kind is SymbolKind.EXTENSION else None,
        )
