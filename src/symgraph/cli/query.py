"""symgraph query commands - explain, search, stats, overview.

All of them read a snapshot written by ``symgraph build``.
"""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from symgraph.cli.utils import echo_json, json_option, open_engine, snapshot_option
from symgraph.config.loader import load_config
from symgraph.core.formatting import format_name_list, pluralize
from symgraph.graph.models import Member, SymbolKind

_KIND_CHOICES = ["all", *(k.value for k in SymbolKind if k is not SymbolKind.VARIABLE)]


def _member_lines(label: str, members: list[Member], limit: int) -> list[str]:
    if not members:
        return []
    lines = [f"{label} ({len(members)}):"]
    for member in members[:limit]:
        suffix = f": {member.type_name}" if member.type_name else ""
        lines.append(f"  {member.name}{suffix}")
    if len(members) > limit:
        lines.append(f"  ... +{len(members) - limit} more")
    return lines


@click.command()
@click.argument("name")
@snapshot_option
@json_option
def explain_command(name: str, snapshot: Path | None, as_json: bool) -> None:
    """Explain a symbol: definition, supertypes, members and usages."""
    engine = open_engine(snapshot)
    limits = load_config().limits

    explanation = engine.explain(name)
    if explanation is None:
        if as_json:
            echo_json({"found": False, "symbol": name})
            return
        raise click.ClickException(f"Symbol '{name}' not found")

    if as_json:
        echo_json({"found": True, **explanation.to_dict()})
        return

    resolved = explanation.resolved
    symbol = resolved.symbol
    lines = [
        f"{resolved.symbol_kind.value} {symbol.name}",
        f"File: {resolved.file}",
        f"Access: {symbol.accessibility.value}",
    ]
    if explanation.inherits:
        inherits = [
            f"{t.name} (external)" if t.external else f"{t.name} ({t.file})"
            for t in explanation.inherits
        ]
        lines.append(f"Inherits: {', '.join(inherits)}")

    members = explanation.members
    lines.extend(_member_lines("Properties", members.properties, limits.members_shown))
    lines.extend(_member_lines("Methods", members.methods, limits.members_shown))
    lines.extend(_member_lines("Initializers", members.initializers, limits.members_shown))

    usages = explanation.usages
    if usages.inherited_by:
        lines.append(
            "Inherited by: "
            + ", ".join(f"{r.name} ({r.file})" for r in usages.inherited_by)
        )
    for ext in usages.extended_in:
        conformances = f" adds {', '.join(ext.conformances)}" if ext.conformances else ""
        lines.append(f"Extended in: {ext.file}{conformances}")
    if usages.referenced_in:
        lines.append(
            "Referenced in: "
            + format_name_list(usages.referenced_in, max_shown=limits.references_shown)
        )
    if not usages.has_usages:
        lines.append("No detected usages (name-based analysis)")

    for line in lines:
        click.echo(line)


@click.command()
@click.argument("query")
@click.option(
    "--kind",
    type=click.Choice(_KIND_CHOICES),
    default="all",
    show_default=True,
    help="Restrict to one symbol kind",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum results (default from config)",
)
@snapshot_option
@json_option
def search_command(
    query: str, kind: str, limit: int | None, snapshot: Path | None, as_json: bool
) -> None:
    """Search symbols by case-insensitive name substring."""
    engine = open_engine(snapshot)
    if limit is None:
        limit = load_config().limits.search_default

    hits = engine.search(query, kind=kind, limit=limit)
    if as_json:
        echo_json({"query": query, "kind": kind, "results": [h.to_dict() for h in hits]})
        return
    if not hits:
        click.echo(f"No matches for '{query}'")
        return

    table = Table(title=f"{pluralize(len(hits), 'match', 'matches')} for '{query}'")
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("File", style="dim")
    table.add_column("Inherits")
    for hit in hits:
        table.add_row(hit.name, hit.kind.value, hit.file, ", ".join(hit.inherited_types))
    Console().print(table)


@click.command()
@snapshot_option
@json_option
def stats_command(snapshot: Path | None, as_json: bool) -> None:
    """Show symbol totals and the largest units."""
    engine = open_engine(snapshot)
    stats = engine.stats(largest=load_config().limits.largest_files)
    if as_json:
        echo_json(stats.to_dict())
        return

    console = Console()
    totals = Table(show_header=False, box=None, padding=(0, 2))
    totals.add_column("bucket", style="dim")
    totals.add_column("count", justify="right")
    totals.add_row("units", str(stats.unit_count))
    totals.add_row("types", str(stats.total_types))
    for bucket, count in stats.counts.items():
        totals.add_row(bucket, str(count))
    console.print(totals)

    if stats.largest_units:
        largest = Table(title="Largest units")
        largest.add_column("File")
        largest.add_column("Symbols", justify="right")
        for unit, count in stats.largest_units:
            largest.add_row(unit, str(count))
        console.print(largest)


@click.command()
@click.argument("fragment")
@snapshot_option
@json_option
def overview_command(fragment: str, snapshot: Path | None, as_json: bool) -> None:
    """List the declarations of the unit matching FRAGMENT."""
    engine = open_engine(snapshot)
    overview = engine.file_overview(fragment)
    if as_json:
        echo_json(overview.to_dict())
        return

    if not overview.matches:
        raise click.ClickException(f"No unit matches '{fragment}'")
    if overview.unit is None:
        click.echo(f"{pluralize(len(overview.matches), 'unit')} match '{fragment}':")
        for unit in overview.matches:
            click.echo(f"  {unit}")
        return

    limit = load_config().limits.overview_items
    click.echo(overview.unit)
    for bucket, symbols in overview.sections.items():
        if not symbols:
            continue
        click.echo(f"{bucket.capitalize()} ({len(symbols)}):")
        for symbol in symbols[:limit]:
            inherits = f": {', '.join(symbol.inherited_types)}" if symbol.inherited_types else ""
            click.echo(f"  {symbol.name}{inherits}")
        if len(symbols) > limit:
            click.echo(f"  ... +{len(symbols) - limit} more")
