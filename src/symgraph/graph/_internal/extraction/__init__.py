"""Symbol extraction protocol, kind classifier and dialect registry.

Raw ASTs arrive in one of two shapes (see ``Dialect``). Each dialect
implements a thin adapter over ``BaseSymbolExtractor`` that knows how to read
tags from its nodes; traversal, classification and member collection are
shared so both shapes produce identical ``UnitData``.

Ownership of members is resolved by name only: the first node in pre-order
whose name equals a type's name supplies that type's members. Same-named
declarations in different scopes are not told apart.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import PurePosixPath
from typing import Any

import structlog

from symgraph.config.constants import INITIALIZER_PREFIX, PUBLIC_INTERFACE_SUFFIXES
from symgraph.graph.models import (
    TYPE_KINDS,
    Accessibility,
    Dialect,
    Member,
    MemberSet,
    Symbol,
    SymbolKind,
    SymbolTable,
    UnitData,
)

log = structlog.get_logger(__name__)

Node = dict[str, Any]

# =============================================================================
# Kind classification
# =============================================================================

_Rules = tuple[tuple[tuple[str, ...], SymbolKind], ...]

# Substring rules over the whole tag, first match wins. A Swift class
# method (``function.method.class``) lands in classes.
_KIND_RULES: _Rules = (
    (("class",), SymbolKind.CLASS),
    (("struct",), SymbolKind.STRUCT),
    (("protocol",), SymbolKind.PROTOCOL),
    (("enum",), SymbolKind.ENUM),
    (("extension",), SymbolKind.EXTENSION),
    (("function", "method"), SymbolKind.FUNCTION),
    (("var",), SymbolKind.VARIABLE),
)

# Member roles test callables first: class methods and class vars stay
# methods and properties of their owner.
_MEMBER_RULES: _Rules = (
    (("function", "method"), SymbolKind.FUNCTION),
    (("var",), SymbolKind.VARIABLE),
)


def _match(tag: str | None, rules: _Rules) -> SymbolKind | None:
    if not tag:
        return None
    for needles, kind in rules:
        if any(needle in tag for needle in needles):
            return kind
    return None


def classify_kind(tag: str | None) -> SymbolKind | None:
    """Classify a raw kind tag into a symbol kind.

    Case-sensitive substring match on the whole tag, in the order class,
    struct, protocol, enum, extension, function/method, variable.
    """
    return _match(tag, _KIND_RULES)


def classify_member(tag: str | None) -> SymbolKind | None:
    """FUNCTION for methods and initializers, VARIABLE for properties, else None."""
    return _match(tag, _MEMBER_RULES)


def is_initializer(name: str) -> bool:
    return name.startswith(INITIALIZER_PREFIX)


def default_accessibility(unit_id: str) -> Accessibility:
    """Public-interface units (headers) default to public, everything else to internal."""
    if PurePosixPath(unit_id).suffix in PUBLIC_INTERFACE_SUFFIXES:
        return Accessibility.PUBLIC
    return Accessibility.INTERNAL


# =============================================================================
# Base extractor
# =============================================================================


class BaseSymbolExtractor(ABC):
    """Shared traversal over a dialect's node/child-list structure."""

    dialect: Dialect

    # -------------------------------------------------------------------------
    # Dialect hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def node_tag(self, node: Node) -> str | None:
        """Kind tag in classifier vocabulary, or None if the node is unclassifiable."""

    @abstractmethod
    def node_name(self, node: Node) -> str | None: ...

    @abstractmethod
    def children(self, node: Node) -> list[Any]: ...

    @abstractmethod
    def build_symbol(
        self,
        node: Node,
        name: str,
        kind: SymbolKind,
        tag: str,
        unit_id: str,
        default_access: Accessibility,
    ) -> Symbol | None:
        """Normalize a classified node. Returning None drops the declaration."""

    @abstractmethod
    def node_type_name(self, node: Node) -> str | None:
        """Declared type (variables) or return type (methods)."""

    @abstractmethod
    def node_access(self, node: Node) -> str | None:
        """Raw accessibility string, if the node carries one."""

    def is_excluded(self, node: Node) -> bool:
        """True for implicit or foreign nodes; their whole subtree is skipped."""
        return False

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def walk(self, root: Any) -> Iterator[Node]:
        """Pre-order traversal yielding every well-formed, non-excluded node."""
        stack: list[Any] = [root]
        while stack:
            node = stack.pop()
            if not isinstance(node, dict) or self.is_excluded(node):
                continue
            yield node
            kids = self.children(node)
            if isinstance(kids, list):
                stack.extend(reversed(kids))

    def extract(self, ast: Any, unit_id: str) -> UnitData:
        """Extract the symbol table and member table for one unit."""
        default_access = default_accessibility(unit_id)
        table = SymbolTable()
        first_by_name: dict[str, Node] = {}

        for node in self.walk(ast):
            tag = self.node_tag(node)
            name = self.node_name(node)
            if not tag or not name:
                continue
            first_by_name.setdefault(name, node)
            kind = classify_kind(tag)
            if kind is None:
                continue
            symbol = self.build_symbol(node, name, kind, tag, unit_id, default_access)
            if symbol is not None:
                table.add(symbol)

        members: dict[str, MemberSet] = {}
        for symbol in table.iter_kinds(TYPE_KINDS):
            if symbol.name in members:
                continue
            owner = first_by_name.get(symbol.name)
            if owner is not None:
                members[symbol.name] = self.extract_members(owner)

        log.debug(
            "unit_extracted",
            unit=unit_id,
            dialect=self.dialect.value,
            symbols=sum(1 for _ in table),
            typed=len(members),
        )
        return UnitData(dialect=self.dialect, symbols=table, members=members)

    def extract_members(self, owner: Node) -> MemberSet:
        """Classify the direct children of ``owner`` into properties, methods, initializers."""
        members = MemberSet()
        for child in self.children(owner) or []:
            if not isinstance(child, dict) or self.is_excluded(child):
                continue
            name = self.node_name(child)
            if not name:
                continue
            kind = classify_member(self.node_tag(child))
            access = Accessibility.normalize(self.node_access(child))
            if kind is SymbolKind.FUNCTION:
                if is_initializer(name):
                    members.initializers.append(Member(name=name, access=access))
                else:
                    members.methods.append(
                        Member(name=name, type_name=self.node_type_name(child), access=access)
                    )
            elif kind is SymbolKind.VARIABLE:
                members.properties.append(
                    Member(name=name, type_name=self.node_type_name(child), access=access)
                )
        return members


# =============================================================================
# Registry
# =============================================================================


def get_extractor(dialect: Dialect | str) -> BaseSymbolExtractor:
    """Look up the extractor for a dialect."""
    from symgraph.graph._internal.extraction.clang import ClangExtractor
    from symgraph.graph._internal.extraction.sourcekit import SourceKitExtractor

    extractors: dict[Dialect, type[BaseSymbolExtractor]] = {
        Dialect.SWIFT: SourceKitExtractor,
        Dialect.OBJC: ClangExtractor,
    }
    return extractors[Dialect(dialect)]()


def extract_unit(dialect: Dialect | str, ast: Any, unit_id: str) -> UnitData:
    """Extract one raw AST. Pure: depends only on its arguments."""
    return get_extractor(dialect).extract(ast, unit_id)


__all__ = [
    "BaseSymbolExtractor",
    "classify_kind",
    "classify_member",
    "default_accessibility",
    "extract_unit",
    "get_extractor",
    "is_initializer",
]
