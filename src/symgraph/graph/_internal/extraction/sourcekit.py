"""Swift extraction from SourceKitten ``structure`` output.

Nodes are dicts tagged with ``key.kind``, ``key.name``, ``key.substructure``,
``key.inheritedtypes``, ``key.accessibility``, ``key.typename``,
``key.offset`` and ``key.length``. Kind tags look like
``source.lang.swift.decl.class`` and feed the shared classifier directly.
"""

from __future__ import annotations

from typing import Any

from symgraph.graph._internal.extraction import BaseSymbolExtractor, Node
from symgraph.graph.models import Accessibility, Dialect, Symbol, SymbolKind

KEY_KIND = "key.kind"
KEY_NAME = "key.name"
KEY_SUBSTRUCTURE = "key.substructure"
KEY_INHERITED = "key.inheritedtypes"
KEY_ACCESSIBILITY = "key.accessibility"
KEY_TYPENAME = "key.typename"
KEY_OFFSET = "key.offset"
KEY_LENGTH = "key.length"
KEY_IMPLICIT = "key.is_implicit"

# Compiler-synthesized storage (property wrappers, lazy vars) is prefixed with "$"
_SYNTHESIZED_PREFIX = "$"


def _optional_int(value: Any) -> int | None:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


class SourceKitExtractor(BaseSymbolExtractor):
    """Shape A adapter."""

    dialect = Dialect.SWIFT

    def node_tag(self, node: Node) -> str | None:
        tag = node.get(KEY_KIND)
        return tag if isinstance(tag, str) else None

    def node_name(self, node: Node) -> str | None:
        name = node.get(KEY_NAME)
        return name if isinstance(name, str) and name else None

    def children(self, node: Node) -> list[Any]:
        return node.get(KEY_SUBSTRUCTURE) or []

    def node_type_name(self, node: Node) -> str | None:
        type_name = node.get(KEY_TYPENAME)
        return type_name if isinstance(type_name, str) else None

    def node_access(self, node: Node) -> str | None:
        access = node.get(KEY_ACCESSIBILITY)
        return access if isinstance(access, str) else None

    def is_excluded(self, node: Node) -> bool:
        if node.get(KEY_IMPLICIT):
            return True
        name = node.get(KEY_NAME)
        return isinstance(name, str) and name.startswith(_SYNTHESIZED_PREFIX)

    def inherited_types(self, node: Node) -> list[str]:
        """Names from ``key.inheritedtypes``; absent or malformed lists mean no supertypes."""
        entries = node.get(KEY_INHERITED)
        if not isinstance(entries, list):
            return []
        names: list[str] = []
        for entry in entries:
            name = entry.get(KEY_NAME) if isinstance(entry, dict) else None
            if isinstance(name, str) and name:
                names.append(name)
        return names

    def build_symbol(
        self,
        node: Node,
        name: str,
        kind: SymbolKind,
        tag: str,
        unit_id: str,
        default_access: Accessibility,
    ) -> Symbol | None:
        return Symbol(
            name=name,
            kind=kind,
            file=unit_id,
            inherited_types=self.inherited_types(node),
            accessibility=Accessibility.normalize(self.node_access(node), default_access)
            or default_access,
            raw_kind=tag,
            type_name=self.node_type_name(node),
            offset=_optional_int(node.get(KEY_OFFSET)),
            length=_optional_int(node.get(KEY_LENGTH)),
            extended_type=name if kind is SymbolKind.EXTENSION else None,
        )
