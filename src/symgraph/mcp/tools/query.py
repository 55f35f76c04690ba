"""Symbol query MCP tools.

- explain_symbol: Definition, supertypes, members and usages of one symbol
- search_symbols: Substring search over declared symbols
- get_codebase_stats: Per-kind totals and largest units
- get_file_overview: Declarations of one unit, found by path fragment

Display limits come from the ``limits`` config section. Truncated lists
report their full length alongside.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from fastmcp import Context
from pydantic import Field

from symgraph.config.constants import SEARCH_MAX_LIMIT
from symgraph.core.errors import SymgraphError
from symgraph.core.formatting import format_name_list, pluralize, truncate_query
from symgraph.graph.models import SymbolKind
from symgraph.graph.query import Explanation
from symgraph.mcp.errors import error_result, not_found_result

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from symgraph.mcp.context import AppContext

KindFilter = Literal["all", "class", "struct", "protocol", "enum", "function", "extension"]


# =============================================================================
# Output Helpers
# =============================================================================


def _capped(items: list[Any], limit: int) -> dict[str, Any]:
    return {"items": items[:limit], "total": len(items), "truncated": len(items) > limit}


def _explanation_output(
    explanation: Explanation, members_shown: int, refs_shown: int
) -> dict[str, Any]:
    members = explanation.members.to_dict()
    usages = explanation.usages
    return {
        "found": True,
        "symbol": explanation.resolved.to_dict(),
        "inherits": [t.to_dict() for t in explanation.inherits],
        "members": {
            "properties": _capped(members["properties"], members_shown),
            "methods": _capped(members["methods"], members_shown),
            "initializers": _capped(members["initializers"], members_shown),
        },
        "usages": {
            "inherited_by": [r.to_dict() for r in usages.inherited_by],
            "extended_in": [r.to_dict() for r in usages.extended_in],
            "referenced_in": _capped(usages.referenced_in, refs_shown),
            "has_usages": usages.has_usages,
        },
    }


def _summarize_explanation(explanation: Explanation) -> str:
    resolved = explanation.resolved
    members = explanation.members
    usages = explanation.usages
    parts = [
        pluralize(len(members.properties), "property", "properties"),
        pluralize(len(members.methods), "method"),
    ]
    if usages.inherited_by:
        parts.append(pluralize(len(usages.inherited_by), "inheritor"))
    if usages.extended_in:
        parts.append(pluralize(len(usages.extended_in), "extension"))
    if not usages.has_usages:
        parts.append("no detected usages")
    return f"{resolved.symbol_kind.value} {resolved.name} in {resolved.file}: {', '.join(parts)}"


# =============================================================================
# Tool Registration
# =============================================================================


def register_tools(mcp: FastMCP, app_ctx: AppContext) -> None:
    """Register query tools with FastMCP server."""
    limits = app_ctx.config.limits

    @mcp.tool
    async def explain_symbol(
        ctx: Context,  # noqa: ARG001
        symbol_name: str = Field(..., description="Exact symbol name, e.g. UserManager"),
    ) -> dict[str, Any]:
        """Explain a symbol: definition, supertypes, members and where it is used.

        Usages are detected by name recurrence (inheritance, extensions,
        declared types), so "no detected usages" means not provably referenced.
        """
        try:
            engine = app_ctx.session.query()
        except SymgraphError as e:
            return error_result(e)

        explanation = engine.explain(symbol_name)
        if explanation is None:
            return not_found_result("symbol", symbol_name)

        output = _explanation_output(explanation, limits.members_shown, limits.references_shown)
        output["summary"] = _summarize_explanation(explanation)
        return output

    @mcp.tool
    async def search_symbols(
        ctx: Context,  # noqa: ARG001
        query: str = Field(..., description="Case-insensitive substring of the symbol name"),
        kind: KindFilter = Field("all", description="Restrict results to one symbol kind"),
        limit: int | None = Field(None, ge=1, description="Maximum results (default from config)"),
    ) -> dict[str, Any]:
        """Search declared symbols by name substring, in file then declaration order."""
        try:
            engine = app_ctx.session.query()
        except SymgraphError as e:
            return error_result(e)

        effective = min(limits.search_default if limit is None else limit, SEARCH_MAX_LIMIT)
        # One extra hit tells us whether the list was cut
        hits = engine.search(query, kind=kind, limit=effective + 1)
        truncated = len(hits) > effective
        hits = hits[:effective]

        names = [h.name for h in hits]
        label = f"'{truncate_query(query)}'"
        if hits:
            found = pluralize(len(hits), "match", "matches")
            summary = f"{found} for {label}: {format_name_list(names)}"
        else:
            summary = f"no matches for {label}"
        return {
            "query": query,
            "kind": kind,
            "results": [h.to_dict() for h in hits],
            "truncated": truncated,
            "summary": summary + (" (truncated)" if truncated else ""),
        }

    @mcp.tool
    async def get_codebase_stats(
        ctx: Context,  # noqa: ARG001
    ) -> dict[str, Any]:
        """Codebase totals by symbol kind and the units declaring the most symbols."""
        try:
            engine = app_ctx.session.query()
        except SymgraphError as e:
            return error_result(e)

        stats = engine.stats(largest=limits.largest_files)
        output = stats.to_dict()
        output["summary"] = (
            f"{pluralize(stats.unit_count, 'unit')}, {pluralize(stats.total_types, 'type')}, "
            f"{pluralize(stats.counts.get('functions', 0), 'function')}"
        )
        return output

    @mcp.tool
    async def get_file_overview(
        ctx: Context,  # noqa: ARG001
        file_path: str = Field(
            ..., description="File name or path fragment, e.g. UserManager.swift"
        ),
    ) -> dict[str, Any]:
        """List the declarations of one source unit.

        Several matching units are reported back so the caller can narrow
        the fragment.
        """
        try:
            engine = app_ctx.session.query()
        except SymgraphError as e:
            return error_result(e)

        overview = engine.file_overview(file_path)
        if not overview.matches:
            return not_found_result("file", file_path)
        if overview.unit is None:
            return {
                "found": False,
                "file": file_path,
                "matches": overview.matches[: limits.overview_items],
                "total_matches": len(overview.matches),
                "summary": f"{pluralize(len(overview.matches), 'unit')} match '{file_path}'",
            }

        sections = {
            bucket: _capped([s.to_dict() for s in symbols], limits.overview_items)
            for bucket, symbols in overview.sections.items()
            if symbols
        }
        counts = [
            pluralize(section["total"], SymbolKind.from_bucket(bucket).value, bucket)
            for bucket, section in sections.items()
        ]
        return {
            "found": True,
            "file": overview.unit,
            "sections": sections,
            "summary": f"{overview.unit}: {', '.join(counts) if counts else 'no declarations'}",
        }
